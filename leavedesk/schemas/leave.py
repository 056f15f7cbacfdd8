from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Annotated, List, Literal, Optional, Union
from leavedesk.models.department import Department
from leavedesk.models.leave_request import LeaveDuration, LeaveType, RequestStatus


# --- Submission form ---

class RequestForm(BaseModel):
    """
    In-progress form state as collected by the client.
    Every field may be missing; the validator decides what is required.
    """
    emp_id: str = ""
    department: Optional[str] = None
    request_type: Optional[str] = None
    leave_type: Optional[str] = None
    permission_type: Optional[str] = None
    duration: LeaveDuration = LeaveDuration.SINGLE
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    from_time: Optional[str] = None
    to_time: Optional[str] = None
    reason: str = ""

class Attachment(BaseModel):
    filename: str
    content_type: str
    content: bytes


# --- Validated drafts (closed variant on request_type) ---

class _DraftBase(BaseModel):
    emp_id: str
    department: Department
    from_date: date
    to_date: Optional[date] = None
    reason: str

class LeaveDraft(_DraftBase):
    request_type: Literal["Leave"] = "Leave"
    leave_type: LeaveType

class PermissionDraft(_DraftBase):
    request_type: Literal["Permission"] = "Permission"
    # Free-text label, stored in the leave_type column
    leave_type: str
    from_time: str
    to_time: str

RequestDraft = Annotated[Union[LeaveDraft, PermissionDraft], Field(discriminator="request_type")]


# --- Store records ---

class NewRequest(BaseModel):
    """Exactly what the request store writes; id and created_at come from the store."""
    user_id: str
    emp_id: str
    department: str
    request_type: str
    leave_type: str
    from_date: date
    to_date: date
    from_time: Optional[str] = None
    to_time: Optional[str] = None
    reason: str
    file_url: Optional[str] = None
    status: RequestStatus = RequestStatus.PENDING

class _RecordBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    emp_id: str
    department: str
    leave_type: str
    from_date: date
    to_date: Optional[date] = None
    reason: str
    file_url: Optional[str] = None
    status: RequestStatus
    remark: Optional[str] = None
    created_at: datetime

    # Read-side enrichment
    user_name: Optional[str] = None
    duration: Optional[str] = None

class LeaveRecord(_RecordBase):
    request_type: Literal["Leave"] = "Leave"

class PermissionRecord(_RecordBase):
    request_type: Literal["Permission"] = "Permission"
    from_time: Optional[str] = None
    to_time: Optional[str] = None

RequestRecord = Annotated[Union[LeaveRecord, PermissionRecord], Field(discriminator="request_type")]


# --- Review ---

class ReviewDecision(BaseModel):
    status: str
    remark: Optional[str] = None

class DecisionResult(BaseModel):
    request_id: str
    status: RequestStatus
    remark: Optional[str] = None


# --- Read-side helpers ---

class RequestSummary(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0

class CatalogueOption(BaseModel):
    label: str
    value: str

class RequestOptions(BaseModel):
    departments: List[CatalogueOption]
    leave_types: List[CatalogueOption]
    request_types: List[CatalogueOption]
