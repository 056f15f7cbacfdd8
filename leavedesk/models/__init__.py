# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import user, leave_request

# Explicit class exports for cleaner imports
from .department import Department
from .user import User, UserRole
from .leave_request import LeaveRequest, LeaveType, LeaveDuration, RequestStatus, RequestType

__all__ = [
    "Department",
    "User",
    "UserRole",
    "LeaveRequest",
    "LeaveType",
    "LeaveDuration",
    "RequestStatus",
    "RequestType",
]
