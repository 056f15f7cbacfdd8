from sqlalchemy import Column, String, Date, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from leavedesk.database import Base
from leavedesk.models.user import new_id
import enum

class RequestType(str, enum.Enum):
    LEAVE = "Leave"
    PERMISSION = "Permission"

class RequestStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

class LeaveType(str, enum.Enum):
    SICK = "Sick"
    CASUAL = "Casual"
    EMERGENCY = "Emergency"
    ANNUAL = "Annual"
    MATERNITY = "Maternity"
    PATERNITY = "Paternity"

    @property
    def label(self) -> str:
        return f"{self.value} Leave"

class LeaveDuration(str, enum.Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"

class LeaveRequest(Base):
    """
    Persisted Leave or Permission request.
    `leave_type` holds the catalogue value for Leave and the free-text label for Permission.
    """
    __tablename__ = "leave_requests"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), index=True, nullable=False)

    # Snapshot of the submitter at submission time
    emp_id = Column(String, nullable=False)
    department = Column(String, nullable=False)

    request_type = Column(String, nullable=False, default=RequestType.LEAVE.value)
    leave_type = Column(String, nullable=False)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=True)
    from_time = Column(String(5), nullable=True)
    to_time = Column(String(5), nullable=True)
    reason = Column(Text, nullable=False)
    file_url = Column(String, nullable=True)

    status = Column(String, nullable=False, default=RequestStatus.PENDING.value)
    remark = Column(Text, nullable=True)

    # Assigned by the store (not the database) so ordering keeps sub-second precision
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="leave_requests")
