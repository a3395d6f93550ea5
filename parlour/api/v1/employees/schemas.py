from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from parlour.core.schemas import CamelModel


class EmployeeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    position: str = Field(..., min_length=1, max_length=100)
    department: str = Field(..., min_length=1, max_length=100)
    join_date: date


class EmployeeUpdate(CamelModel):
    """Only the fields sent are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    join_date: Optional[date] = None
    is_active: Optional[bool] = None


class EmployeeResponse(CamelModel):
    id: UUID
    name: str
    email: str
    phone: str
    position: str
    department: str
    join_date: date
    is_active: bool
    created_at: datetime
    updated_at: datetime


class EmployeeListResponse(CamelModel):
    employees: List[EmployeeResponse]


class EmployeeDetailResponse(CamelModel):
    employee: EmployeeResponse


class EmployeeMutationResponse(CamelModel):
    message: str
    employee: EmployeeResponse
