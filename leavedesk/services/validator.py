"""
Request Validator.

Pure checks run before anything touches a store. Each function raises
ValidationError(field, message) on the first rule that fails; nothing is
remembered between calls.
"""
from typing import Optional, Tuple

from leavedesk.core.config import settings
from leavedesk.core.exceptions import ValidationError
from leavedesk.models.department import Department
from leavedesk.models.leave_request import LeaveDuration, LeaveType, RequestStatus, RequestType
from leavedesk.models.user import UserRole
from leavedesk.schemas.leave import Attachment, LeaveDraft, PermissionDraft, RequestDraft, RequestForm
from leavedesk.services.duration import minutes_between, parse_time

MIN_PASSWORD_LENGTH = 6
ALLOWED_ATTACHMENT_TYPES = ("application/pdf",)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_submission(form: RequestForm, user, max_minutes: Optional[int] = None) -> RequestDraft:
    """
    Validates a submission form for `user` (None when nobody is signed in).
    Returns a LeaveDraft or PermissionDraft with trimmed text fields.
    """
    max_minutes = max_minutes or settings.permission_max_minutes

    if user is None:
        raise ValidationError("user", "User not found")
    if user.role != UserRole.STAFF:
        raise ValidationError("user", "Only staff members can submit requests")

    if _blank(form.emp_id):
        raise ValidationError("emp_id", "Please enter your Employee ID")

    department = Department.from_code(form.department) if form.department else None
    if department is None:
        raise ValidationError("department", "Please select your department")

    try:
        request_type = RequestType(form.request_type)
    except ValueError:
        raise ValidationError("request_type", "Please select request type")

    leave_type = None
    if request_type == RequestType.LEAVE:
        try:
            leave_type = LeaveType(form.leave_type)
        except ValueError:
            raise ValidationError("leave_type", "Please select leave type")
    elif _blank(form.permission_type):
        raise ValidationError("permission_type", "Please enter permission type")

    if form.from_date is None:
        raise ValidationError("from_date", "Please select from date")

    to_date = None
    if request_type == RequestType.LEAVE and form.duration == LeaveDuration.MULTIPLE:
        if form.to_date is None:
            raise ValidationError("to_date", "Please select to date")
        if form.to_date < form.from_date:
            raise ValidationError("to_date", "From date cannot be after to date")
        to_date = form.to_date

    if request_type == RequestType.PERMISSION:
        if _blank(form.from_time):
            raise ValidationError("from_time", "Please select from time")
        if _blank(form.to_time):
            raise ValidationError("to_time", "Please select to time")
        for field in ("from_time", "to_time"):
            try:
                parse_time(getattr(form, field))
            except ValueError:
                raise ValidationError(field, "Please enter a valid time (HH:MM)")
        gap = minutes_between(form.from_time, form.to_time)
        if gap <= 0:
            raise ValidationError("to_time", "To time must be after from time")
        if gap > max_minutes:
            raise ValidationError("to_time", f"Permission cannot exceed {max_minutes} minutes")

    if _blank(form.reason):
        raise ValidationError("reason", "Please enter reason for request")

    common = dict(
        emp_id=form.emp_id.strip(),
        department=department,
        from_date=form.from_date,
        reason=form.reason.strip(),
    )
    if request_type == RequestType.LEAVE:
        return LeaveDraft(leave_type=leave_type, to_date=to_date, **common)
    return PermissionDraft(
        leave_type=form.permission_type.strip(),
        from_time=form.from_time.strip(),
        to_time=form.to_time.strip(),
        **common,
    )


def validate_review(reviewer, status: str, remark: Optional[str] = None) -> Tuple[RequestStatus, Optional[str]]:
    """Gate for a director decision. Returns the parsed status and trimmed remark."""
    if reviewer is None:
        raise ValidationError("user", "User not found")
    if reviewer.role != UserRole.DIRECTOR:
        raise ValidationError("user", "Only directors can review requests")

    try:
        decision = RequestStatus(status)
    except ValueError:
        raise ValidationError("status", "Decision must be Approved or Rejected")
    if decision == RequestStatus.PENDING:
        raise ValidationError("status", "Decision must be Approved or Rejected")

    remark = remark.strip() if remark else None
    if decision == RequestStatus.REJECTED and not remark:
        raise ValidationError("remark", "Please provide a reason for rejection")
    return decision, remark or None


def validate_attachment(attachment: Attachment, max_bytes: Optional[int] = None) -> None:
    max_bytes = max_bytes or settings.max_upload_bytes
    content_type = (attachment.content_type or "").lower()
    if not (content_type.startswith("image/") or content_type in ALLOWED_ATTACHMENT_TYPES):
        raise ValidationError("file", "Supporting document must be an image or a PDF")
    if not attachment.content:
        raise ValidationError("file", "Supporting document is empty")
    if len(attachment.content) > max_bytes:
        raise ValidationError("file", f"Supporting document exceeds {max_bytes // 1024} KB")


def validate_sign_up(email: str, password: str, name: str, role: UserRole, department: Optional[str]) -> Optional[Department]:
    """Returns the parsed department (None for a director without one)."""
    if _blank(email) or not password:
        raise ValidationError("email", "Please fill in all required fields")
    if _blank(name):
        raise ValidationError("name", "Please fill in all required fields")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("password", f"Password should be at least {MIN_PASSWORD_LENGTH} characters")

    parsed = Department.from_code(department) if department else None
    if department and parsed is None:
        raise ValidationError("department", "Please select a valid department")
    if role == UserRole.STAFF and parsed is None:
        raise ValidationError("department", "Please select your department")
    return parsed
