import logging

from leavedesk.core.exceptions import NotFoundError
from leavedesk.models.user import User
from leavedesk.schemas.auth import UserProfile
from leavedesk.services.base import BaseService

logger = logging.getLogger(__name__)


class SqlProfileStore(BaseService):
    """Profile Store over the users table."""

    def _get_row(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_user(self, user_id: str) -> UserProfile:
        return UserProfile.model_validate(self._get_row(user_id))

    def update_employee_id(self, user_id: str, employee_id: str) -> None:
        user = self._get_row(user_id)
        with self.write("update employee id"):
            user.employee_id = employee_id.strip()
        logger.info(f"Employee ID updated for user {user_id}")
