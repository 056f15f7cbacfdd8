import logging

from fastapi import APIRouter, Depends, Request, status

from leavedesk.core.config import settings
from leavedesk.core.exceptions import ValidationError
from leavedesk.core.limiter import limiter
from leavedesk.dependencies import get_current_user, get_identity_service, get_profile_store
from leavedesk.models.user import User
from leavedesk.schemas.auth import EmployeeIdUpdate, LoginRequest, SignUpRequest, Token, UserProfile
from leavedesk.services.identity import IdentityService
from leavedesk.services.profile_store import SqlProfileStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def _token_response(identity: IdentityService, user: User) -> Token:
    return Token(
        access_token=identity.issue_token(user),
        user=UserProfile.model_validate(user),
    )


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.auth_rate_limit)
def sign_up(request: Request, data: SignUpRequest, identity: IdentityService = Depends(get_identity_service)):
    user = identity.sign_up(
        email=data.email,
        password=data.password,
        name=data.name,
        role=data.role,
        department=data.department,
        employee_id=data.employee_id,
    )
    return _token_response(identity, user)


@router.post("/login", response_model=Token)
@limiter.limit(settings.auth_rate_limit)
def login(request: Request, login_data: LoginRequest, identity: IdentityService = Depends(get_identity_service)):
    user = identity.authenticate(login_data.email, login_data.password)
    logger.info(f"User {user.id} signed in")
    return _token_response(identity, user)


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy.
    logger.info(f"User {current_user.id} signed out")
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserProfile)
def get_me(current_user: User = Depends(get_current_user)):
    return UserProfile.model_validate(current_user)


@router.patch("/profile/employee-id", response_model=UserProfile)
def update_employee_id(
    update_data: EmployeeIdUpdate,
    current_user: User = Depends(get_current_user),
    profiles: SqlProfileStore = Depends(get_profile_store),
):
    if not update_data.employee_id.strip():
        raise ValidationError("employee_id", "Please enter your Employee ID")
    profiles.update_employee_id(current_user.id, update_data.employee_id)
    return profiles.get_user(current_user.id)
