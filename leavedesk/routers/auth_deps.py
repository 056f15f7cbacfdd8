"""
Auth Dependencies.
Resolve the bearer token into a user and enforce the Staff/Director split.
"""
import logging
from typing import Callable, List

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from leavedesk.core.exceptions import AccessDeniedError
from leavedesk.database import get_db
from leavedesk.models.user import User, UserRole
from leavedesk.services.identity import IdentityService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_identity_service(db: Session = Depends(get_db)) -> IdentityService:
    return IdentityService(db)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    identity: IdentityService = Depends(get_identity_service),
) -> User:
    """Raises AuthenticationError (401) for missing users or bad/expired tokens."""
    return identity.resolve_token(token)


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the user has one of the allowed roles.

    Usage:
        @router.post("/requests/{request_id}/decision")
        def decide(user: User = Depends(require_role([UserRole.DIRECTOR]))):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            logger.warning(f"Access denied for {current_user.id} ({current_user.role.value})")
            raise AccessDeniedError(
                f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker


def require_staff():
    return require_role([UserRole.STAFF])


def require_director():
    return require_role([UserRole.DIRECTOR])
