"""
User Model.
A user is either Staff (submits requests) or a Director (reviews them).
"""
import uuid
import enum
from sqlalchemy import Column, String, Enum, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from leavedesk.database import Base
from leavedesk.models.department import Department


class UserRole(str, enum.Enum):
    STAFF = "Staff"
    DIRECTOR = "Director"


def new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)

    # Role is fixed at sign-up; nothing in the service changes it.
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    department = Column(Enum(Department, values_callable=lambda e: [m.value for m in e]), nullable=True)

    # Empty until the user sets it or submits their first request
    employee_id = Column(String, default="", nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    leave_requests = relationship("LeaveRequest", back_populates="user")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_director(self) -> bool:
        return self.role == UserRole.DIRECTOR
