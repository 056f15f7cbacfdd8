"""
Request Lifecycle Manager.

States: Pending -> Approved | Rejected. Both outcomes are terminal and no
operation here moves a request out of them on purpose. Unless
`enforce_pending` is on, the store is not asked to check the current status,
so two conflicting decisions on one request resolve as last write wins.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from leavedesk.core.config import settings
from leavedesk.core.exceptions import AppException, NotFoundError, PersistenceError, ValidationError
from leavedesk.models.leave_request import RequestStatus
from leavedesk.schemas.leave import (
    Attachment,
    DecisionResult,
    LeaveDraft,
    NewRequest,
    RequestDraft,
    RequestForm,
    RequestSummary,
)
from leavedesk.services.duration import describe_duration
from leavedesk.services.interfaces import FileStore, ProfileStore, RequestStore
from leavedesk.services.validator import validate_attachment, validate_review, validate_submission

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"
DECISIONS = (RequestStatus.APPROVED, RequestStatus.REJECTED)


@dataclass(frozen=True)
class RequestFilter:
    """Either every request (owner_id None) or the ones owned by one user."""
    owner_id: Optional[str] = None

    @classmethod
    def all(cls) -> "RequestFilter":
        return cls()

    @classmethod
    def owned_by(cls, user_id: str) -> "RequestFilter":
        return cls(owner_id=user_id)

    @classmethod
    def for_viewer(cls, user) -> "RequestFilter":
        """Directors see everything, staff see their own requests."""
        if user.is_director:
            return cls.all()
        return cls.owned_by(user.id)


def _created_key(record) -> datetime:
    created = record.created_at
    # SQLite hands back naive datetimes; they are stored as UTC.
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


class LeaveRequestService:
    def __init__(
        self,
        requests: RequestStore,
        profiles: ProfileStore,
        files: Optional[FileStore] = None,
        enforce_pending: Optional[bool] = None,
    ):
        self.requests = requests
        self.profiles = profiles
        self.files = files
        self.enforce_pending = settings.enforce_pending_transitions if enforce_pending is None else enforce_pending

    # --- writes ---

    def create(self, draft: RequestDraft, owner_id: str, file_url: Optional[str] = None) -> str:
        """Persists a validated draft as Pending and returns its id."""
        # Single-day leave and permissions are stored with to_date == from_date
        to_date = draft.from_date
        if isinstance(draft, LeaveDraft) and draft.to_date is not None:
            to_date = draft.to_date

        record = NewRequest(
            user_id=owner_id,
            emp_id=draft.emp_id,
            department=draft.department.value,
            request_type=draft.request_type,
            leave_type=draft.leave_type.value if isinstance(draft, LeaveDraft) else draft.leave_type,
            from_date=draft.from_date,
            to_date=to_date,
            from_time=getattr(draft, "from_time", None),
            to_time=getattr(draft, "to_time", None),
            reason=draft.reason,
            file_url=file_url,
        )
        return self.requests.create(record)

    def submit(self, form: RequestForm, user, attachment: Optional[Attachment] = None) -> str:
        """
        Full submission: validate, upload the supporting document, persist,
        then record the employee ID on a profile that has none yet.
        """
        draft = validate_submission(form, user)

        file_url = None
        if attachment is not None:
            validate_attachment(attachment)
            if self.files is None:
                raise PersistenceError("Document uploads are not available")
            # Upload failures propagate before anything is written
            file_url = self.files.upload(attachment, user.id)

        try:
            request_id = self.create(draft, user.id, file_url=file_url)
        except AppException:
            # No request points at the document, so it must not stay behind
            if file_url is not None:
                self.files.delete(file_url)
            raise

        if not (user.employee_id or "").strip():
            try:
                self.profiles.update_employee_id(user.id, draft.emp_id)
            except AppException as e:
                # The request is already stored; the profile catches up next time
                logger.warning(f"Could not store employee ID for {user.id}: {e.message}")

        return request_id

    def transition(self, request_id: str, new_status: RequestStatus, remark: Optional[str] = None) -> None:
        """
        Moves a request to Approved or Rejected. The caller is responsible for
        the rejection-remark rule (see `review`).
        """
        if new_status not in DECISIONS:
            raise ValidationError("status", "Decision must be Approved or Rejected")

        expected = RequestStatus.PENDING if self.enforce_pending else None
        self.requests.update_status(request_id, new_status, remark, expected_status=expected)
        logger.info(f"Request {request_id} -> {new_status.value}")

    def review(self, reviewer, request_id: str, status: str, remark: Optional[str] = None) -> DecisionResult:
        decision, remark = validate_review(reviewer, status, remark)
        self.transition(request_id, decision, remark)
        return DecisionResult(request_id=request_id, status=decision, remark=remark)

    # --- reads ---

    def list(self, request_filter: RequestFilter) -> List:
        if request_filter.owner_id is None:
            records = self.requests.list_all()
        else:
            records = self.requests.list_by_user(request_filter.owner_id)

        names: Dict[str, str] = {}
        enriched = []
        for record in sorted(records, key=_created_key, reverse=True):
            if record.user_id not in names:
                names[record.user_id] = self._display_name(record.user_id)
            enriched.append(record.model_copy(update={
                "user_name": names[record.user_id],
                "duration": describe_duration(record),
            }))
        return enriched

    def _display_name(self, user_id: str) -> str:
        try:
            return self.profiles.get_user(user_id).name
        except NotFoundError:
            logger.warning(f"Profile {user_id} missing, showing placeholder name")
            return UNKNOWN_USER

    @staticmethod
    def summarize(records: Iterable) -> RequestSummary:
        summary = RequestSummary()
        for record in records:
            summary.total += 1
            if record.status == RequestStatus.PENDING:
                summary.pending += 1
            elif record.status == RequestStatus.APPROVED:
                summary.approved += 1
            elif record.status == RequestStatus.REJECTED:
                summary.rejected += 1
        return summary
