from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from parlour.core.enums import PunchAction
from parlour.core.schemas import CamelModel


class PunchRequest(CamelModel):
    """Punch from an attendance terminal. timestamp defaults to the server clock."""

    employee_id: UUID
    action: PunchAction
    timestamp: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=1000)


class AttendanceEmployee(CamelModel):
    """Display projection of the employee owning an attendance event."""

    id: UUID
    name: str
    email: str
    phone: str
    position: str


class AttendanceEventResponse(CamelModel):
    id: UUID
    employee_id: UUID
    employee: AttendanceEmployee
    action: PunchAction
    timestamp: datetime
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


class StatusSnapshot(CamelModel):
    is_checked_in: bool
    last_activity: Optional[datetime] = None


class EmployeeStatusResponse(CamelModel):
    id: UUID
    name: str
    email: str
    phone: str
    position: str
    department: str
    is_checked_in: bool
    last_activity: Optional[datetime] = None


class PunchResult(CamelModel):
    attendance: AttendanceEventResponse
    employee: EmployeeStatusResponse
    status: StatusSnapshot


class PunchResponse(CamelModel):
    message: str
    attendance: AttendanceEventResponse
    status: StatusSnapshot


class AttendanceUpdate(CamelModel):
    """Payload of the attendance_update realtime event."""

    attendance: AttendanceEventResponse
    employee: EmployeeStatusResponse


class EmployeeStatusListResponse(CamelModel):
    employees: List[EmployeeStatusResponse]


class AttendanceListResponse(CamelModel):
    attendance: List[AttendanceEventResponse]
