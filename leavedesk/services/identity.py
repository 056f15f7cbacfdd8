"""
Identity provider.

IdentityService is the stateless part (accounts, passwords, tokens) used by
the HTTP layer. AuthSession wraps it into the session-style contract a
client holds: one signed-in user at a time plus auth state listeners.
"""
import logging
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError

from leavedesk.core import security
from leavedesk.core.exceptions import AuthenticationError, PersistenceError, ValidationError
from leavedesk.models.user import User, UserRole
from leavedesk.schemas.auth import UserProfile
from leavedesk.services.base import BaseService
from leavedesk.services.validator import validate_sign_up

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[UserProfile]], None]


class IdentityService(BaseService):
    def sign_up(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole,
        department: Optional[str] = None,
        employee_id: str = "",
    ) -> User:
        parsed_department = validate_sign_up(email, password, name, role, department)

        normalized = email.strip().lower()
        if self.db.query(User).filter(User.email == normalized).first():
            raise ValidationError("email", "Email already in use")

        user = User(
            email=normalized,
            hashed_password=security.get_password_hash(password),
            name=name.strip(),
            role=UserRole(role),
            department=parsed_department,
            employee_id=(employee_id or "").strip(),
        )
        try:
            with self.write("sign up"):
                self.db.add(user)
        except PersistenceError as e:
            # Lost a race with a concurrent sign-up for the same address
            if isinstance(e.__cause__, IntegrityError):
                raise ValidationError("email", "Email already in use") from e
            raise
        self.db.refresh(user)
        logger.info(f"Created {user.role.value} account {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        normalized = (email or "").strip().lower()
        user = self.db.query(User).filter(User.email == normalized).first()
        if not user or not security.verify_password(password, user.hashed_password):
            logger.warning("Authentication failed: invalid credentials")
            raise AuthenticationError("Incorrect email or password")
        return user

    def issue_token(self, user: User) -> str:
        return security.create_access_token({"sub": user.id, "role": user.role.value})

    def resolve_token(self, token: str) -> User:
        payload = security.decode_access_token(token)
        if payload is None:
            raise AuthenticationError()
        if payload.get("error") == "TOKEN_EXPIRED":
            raise AuthenticationError("TOKEN_EXPIRED")
        if payload.get("type") != "access" or not payload.get("sub"):
            raise AuthenticationError("Invalid token")

        user = self.db.get(User, payload["sub"])
        if user is None:
            logger.warning(f"Authentication failed: user {payload['sub']} not found")
            raise AuthenticationError("User not found")
        return user


class AuthSession:
    """Session-style identity contract with explicit, per-client state."""

    def __init__(self, identity: IdentityService):
        self.identity = identity
        self._user_id: Optional[str] = None
        self.token: Optional[str] = None
        self._listeners: List[AuthListener] = []

    def get_current_user(self) -> Optional[UserProfile]:
        if self._user_id is None:
            return None
        user = self.identity.db.get(User, self._user_id)
        return UserProfile.model_validate(user) if user else None

    def sign_up(self, email, password, name, role, department=None, employee_id="") -> UserProfile:
        user = self.identity.sign_up(email, password, name, role, department, employee_id)
        return self._signed_in(user)

    def sign_in(self, email: str, password: str) -> UserProfile:
        return self._signed_in(self.identity.authenticate(email, password))

    def sign_out(self) -> None:
        self._user_id = None
        self.token = None
        self._notify(None)

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Registers `callback`; the returned function unregisters it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _signed_in(self, user: User) -> UserProfile:
        self._user_id = user.id
        self.token = self.identity.issue_token(user)
        profile = UserProfile.model_validate(user)
        self._notify(profile)
        return profile

    def _notify(self, profile: Optional[UserProfile]) -> None:
        for listener in list(self._listeners):
            try:
                listener(profile)
            except Exception as e:
                # A broken listener must not undo the sign-in itself
                logger.warning(f"Auth state listener failed: {e}", exc_info=True)
