"""Attendance API router.

Punching and the status board are open to the attendance terminal; history is
admin only.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.api.deps import get_attendance_service
from parlour.auth.rbac import require_admin
from parlour.core.exceptions import ServiceError
from parlour.db.session import get_db

from .schemas import (
    AttendanceListResponse,
    EmployeeStatusListResponse,
    EmployeeStatusResponse,
    PunchRequest,
    PunchResponse,
)
from .service import AttendanceService

router = APIRouter(prefix="/api/v1/attendance", tags=["attendance"])


@router.post(
    "/punch",
    response_model=PunchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def punch(
    payload: PunchRequest,
    db: AsyncSession = Depends(get_db),
    attendance: AttendanceService = Depends(get_attendance_service),
) -> PunchResponse:
    """Record a punch_in or punch_out. Rejected when it does not match the employee's current state."""
    try:
        result = await attendance.record_punch(
            db,
            payload.employee_id,
            payload.action,
            timestamp=payload.timestamp,
            location=payload.location,
            notes=payload.notes,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return PunchResponse(
        message=f"Successfully {payload.action.value.replace('_', ' ')}",
        attendance=result.attendance,
        status=result.status,
    )


@router.get("/employee-status", response_model=EmployeeStatusListResponse)
async def employee_status(
    db: AsyncSession = Depends(get_db),
    attendance: AttendanceService = Depends(get_attendance_service),
) -> EmployeeStatusListResponse:
    """Every active employee with isCheckedIn and lastActivity."""
    try:
        employees = await attendance.list_employee_statuses(db)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return EmployeeStatusListResponse(employees=employees)


@router.get(
    "",
    response_model=AttendanceListResponse,
    dependencies=[Depends(require_admin)],
)
async def query_attendance(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    employee_id: Optional[UUID] = Query(None, alias="employeeId"),
    db: AsyncSession = Depends(get_db),
    attendance: AttendanceService = Depends(get_attendance_service),
) -> AttendanceListResponse:
    """Ledger events matching the filters, newest first. Date bounds are inclusive."""
    try:
        events = await attendance.query_events(db, employee_id=employee_id, start=start_date, end=end_date)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return AttendanceListResponse(attendance=events)


@router.get(
    "/today",
    response_model=AttendanceListResponse,
    dependencies=[Depends(require_admin)],
)
async def today_attendance(
    db: AsyncSession = Depends(get_db),
    attendance: AttendanceService = Depends(get_attendance_service),
) -> AttendanceListResponse:
    try:
        events = await attendance.today_events(db)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return AttendanceListResponse(attendance=events)


@router.get(
    "/employees/{employee_id}/status",
    response_model=EmployeeStatusResponse,
    dependencies=[Depends(require_admin)],
)
async def single_employee_status(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
    attendance: AttendanceService = Depends(get_attendance_service),
) -> EmployeeStatusResponse:
    try:
        return await attendance.get_employee_status(db, employee_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
