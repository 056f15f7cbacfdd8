import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leavedesk.core.exceptions import ConflictError, NotFoundError, PersistenceError
from leavedesk.models.leave_request import LeaveRequest, RequestStatus, RequestType
from leavedesk.schemas.leave import LeaveRecord, NewRequest, PermissionRecord
from leavedesk.services.base import BaseService

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def record_from_row(row: LeaveRequest):
    if row.request_type == RequestType.PERMISSION.value:
        return PermissionRecord.model_validate(row)
    return LeaveRecord.model_validate(row)


class SqlRequestStore(BaseService):
    """Request Store over the leave_requests table."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        super().__init__(db)
        self.clock = clock

    def create(self, record: NewRequest) -> str:
        row = LeaveRequest(**record.model_dump(), created_at=self.clock())
        row.status = record.status.value
        with self.write("create request"):
            self.db.add(row)
            self.db.flush()
            request_id = row.id
        logger.info(f"Stored {row.request_type} request {request_id} for user {row.user_id}")
        return request_id

    def list_by_user(self, user_id: str) -> List:
        return self._list(user_id)

    def list_all(self) -> List:
        return self._list(None)

    def _list(self, user_id: Optional[str]) -> List:
        try:
            query = self.db.query(LeaveRequest)
            if user_id is not None:
                query = query.filter(LeaveRequest.user_id == user_id)
            rows = query.all()
        except SQLAlchemyError as e:
            logger.error(f"Listing requests failed: {e}", exc_info=True)
            raise PersistenceError("Failed to load requests") from e
        return [record_from_row(row) for row in rows]

    def update_status(
        self,
        request_id: str,
        status: RequestStatus,
        remark: Optional[str] = None,
        expected_status: Optional[RequestStatus] = None,
    ) -> None:
        values = {"status": status.value}
        # An omitted remark leaves any earlier one in place
        if remark:
            values["remark"] = remark

        stmt = update(LeaveRequest).where(LeaveRequest.id == request_id)
        if expected_status is not None:
            stmt = stmt.where(LeaveRequest.status == expected_status.value)

        with self.write("update request status"):
            matched = self.db.execute(stmt.values(**values)).rowcount

        if matched == 0:
            current = self.db.get(LeaveRequest, request_id)
            if current is None:
                raise NotFoundError("Request", request_id)
            raise ConflictError(
                f"Request {request_id} is already {current.status}",
                details={"current_status": current.status},
            )
