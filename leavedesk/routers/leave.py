from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import BaseModel, ValidationError as PydanticValidationError

from leavedesk.core.config import settings
from leavedesk.core.exceptions import ValidationError
from leavedesk.core.schemas import ApiResponse
from leavedesk.dependencies import get_current_user, get_request_service, require_staff
from leavedesk.models.department import Department
from leavedesk.models.leave_request import LeaveType, RequestStatus, RequestType
from leavedesk.models.user import User
from leavedesk.schemas.leave import (
    Attachment,
    CatalogueOption,
    RequestForm,
    RequestOptions,
    RequestRecord,
    RequestSummary,
)
from leavedesk.services.lifecycle import LeaveRequestService, RequestFilter

router = APIRouter(
    prefix="/requests",
    tags=["requests"]
)

class SubmissionResponse(BaseModel):
    id: str
    status: RequestStatus = RequestStatus.PENDING

# --- Endpoints ---

@router.get("/options", response_model=RequestOptions)
def get_options():
    """Picker contents for the submission form."""
    return RequestOptions(
        departments=[CatalogueOption(label=d.label, value=d.value) for d in Department],
        leave_types=[CatalogueOption(label=t.label, value=t.value) for t in LeaveType],
        request_types=[CatalogueOption(label=t.value, value=t.value) for t in RequestType],
    )

@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_request(
    form: RequestForm,
    current_user: User = Depends(require_staff()),
    service: LeaveRequestService = Depends(get_request_service),
):
    request_id = service.submit(form, current_user)
    return SubmissionResponse(id=request_id)

@router.post("/with-document", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_request_with_document(
    form: str = Form(..., description="RequestForm as JSON"),
    file: UploadFile = File(...),
    current_user: User = Depends(require_staff()),
    service: LeaveRequestService = Depends(get_request_service),
):
    try:
        parsed = RequestForm.model_validate_json(form)
    except PydanticValidationError:
        raise ValidationError("form", "Malformed request form")

    attachment = Attachment(
        filename=file.filename or "document",
        content_type=file.content_type or "",
        # One byte past the limit is enough for the size check to refuse it
        content=file.file.read(settings.max_upload_bytes + 1),
    )
    request_id = service.submit(parsed, current_user, attachment=attachment)
    return SubmissionResponse(id=request_id)

@router.get("", response_model=List[RequestRecord])
def list_requests(
    current_user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_request_service),
):
    """Directors see every request, staff only their own. Newest first."""
    return service.list(RequestFilter.for_viewer(current_user))

@router.get("/summary", response_model=ApiResponse[RequestSummary])
def summarize_requests(
    current_user: User = Depends(get_current_user),
    service: LeaveRequestService = Depends(get_request_service),
):
    records = service.list(RequestFilter.for_viewer(current_user))
    return ApiResponse.ok(service.summarize(records), metadata={"role": current_user.role.value})
