from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
from leavedesk.models.department import Department
from leavedesk.models.user import UserRole
from datetime import datetime

class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    department: Optional[Department] = None
    employee_id: str = ""
    created_at: Optional[datetime] = None

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str
    name: str
    role: UserRole = UserRole.STAFF
    # Kept as a plain string so unknown codes surface as field errors
    department: Optional[str] = None
    employee_id: str = ""

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserProfile

class EmployeeIdUpdate(BaseModel):
    employee_id: str
