"""
Service providers for the routers.

Auth dependencies live in leavedesk.routers.auth_deps and are re-exported
here so routers only need a single import.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from leavedesk.core.config import settings
from leavedesk.database import get_db
from leavedesk.routers.auth_deps import (
    get_current_user,
    get_identity_service,
    require_director,
    require_role,
    require_staff,
)
from leavedesk.services.file_store import LocalFileStore
from leavedesk.services.lifecycle import LeaveRequestService
from leavedesk.services.profile_store import SqlProfileStore
from leavedesk.services.request_store import SqlRequestStore


def get_file_store() -> LocalFileStore:
    return LocalFileStore(settings.upload_dir, settings.upload_base_url)


def get_profile_store(db: Session = Depends(get_db)) -> SqlProfileStore:
    return SqlProfileStore(db)


def get_request_service(
    db: Session = Depends(get_db),
    files: LocalFileStore = Depends(get_file_store),
) -> LeaveRequestService:
    return LeaveRequestService(
        requests=SqlRequestStore(db),
        profiles=SqlProfileStore(db),
        files=files,
    )


__all__ = [
    "get_current_user",
    "get_identity_service",
    "get_file_store",
    "get_profile_store",
    "get_request_service",
    "require_role",
    "require_staff",
    "require_director",
]
