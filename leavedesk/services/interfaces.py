"""
Collaborator contracts used by the request lifecycle.

The lifecycle only talks to these Protocols; the SQLAlchemy and local-disk
implementations live next to them and tests may pass in anything with the
same shape.
"""
from typing import Callable, List, Optional, Protocol

from leavedesk.models.leave_request import RequestStatus
from leavedesk.schemas.auth import UserProfile
from leavedesk.schemas.leave import Attachment, NewRequest


class ProfileStore(Protocol):
    def get_user(self, user_id: str) -> UserProfile:
        """Raises NotFoundError for unknown ids."""
        ...

    def update_employee_id(self, user_id: str, employee_id: str) -> None:
        ...


class RequestStore(Protocol):
    def create(self, record: NewRequest) -> str:
        """Persists the record and returns the store-assigned id."""
        ...

    def list_by_user(self, user_id: str) -> List:
        ...

    def list_all(self) -> List:
        ...

    def update_status(
        self,
        request_id: str,
        status: RequestStatus,
        remark: Optional[str] = None,
        expected_status: Optional[RequestStatus] = None,
    ) -> None:
        """
        Writes the new status. With `expected_status` the write only happens
        while the stored status still matches (ConflictError otherwise).
        """
        ...


class FileStore(Protocol):
    def upload(self, file: Attachment, owner_id: str) -> str:
        """Stores the file and returns its URL."""
        ...

    def delete(self, url: str) -> None:
        """Removes a file returned by `upload`."""
        ...


class IdentityProvider(Protocol):
    def get_current_user(self) -> Optional[UserProfile]:
        ...

    def sign_in(self, email: str, password: str) -> UserProfile:
        ...

    def sign_up(self, email: str, password: str, name: str, role, department, employee_id: str) -> UserProfile:
        ...

    def sign_out(self) -> None:
        ...

    def on_auth_state_change(self, callback: Callable[[Optional[UserProfile]], None]) -> Callable[[], None]:
        ...
