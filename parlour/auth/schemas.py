from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from parlour.core.enums import UserRole
from parlour.core.schemas import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1)
    role: UserRole


class UserInfo(CamelModel):
    id: UUID
    email: EmailStr
    name: str
    role: UserRole


class LoginResponse(CamelModel):
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user: UserInfo
    issued_at: datetime


class RegisterResponse(CamelModel):
    message: str = "User created successfully"
    user: UserInfo


class ProfileResponse(CamelModel):
    user: UserInfo


class CurrentUser(CamelModel):
    """Lightweight representation of the authenticated user for role checks."""

    id: UUID
    email: str
    name: str
    role: UserRole

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN
