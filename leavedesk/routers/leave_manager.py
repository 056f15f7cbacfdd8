import logging

from fastapi import APIRouter, Depends

from leavedesk.core.schemas import ApiResponse
from leavedesk.dependencies import get_request_service, require_director
from leavedesk.models.user import User
from leavedesk.schemas.leave import DecisionResult, ReviewDecision
from leavedesk.services.lifecycle import LeaveRequestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/requests", tags=["requests-review"])


# Director decision endpoint
@router.post("/{request_id}/decision", response_model=ApiResponse[DecisionResult])
def decide_request(
    request_id: str,
    decision: ReviewDecision,
    current_user: User = Depends(require_director()),
    service: LeaveRequestService = Depends(get_request_service),
):
    """
    Approve or reject a request. Rejections need a remark.
    Deciding an already-decided request overwrites the earlier decision
    unless ENFORCE_PENDING_TRANSITIONS is on (409 in that case).
    """
    result = service.review(current_user, request_id, decision.status, decision.remark)
    logger.info(f"Director {current_user.id} set request {request_id} to {result.status.value}")
    return ApiResponse.ok(result)
