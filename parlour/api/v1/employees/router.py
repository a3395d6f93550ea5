from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.auth.rbac import require_admin, require_super_admin
from parlour.core.exceptions import ServiceError
from parlour.core.schemas import MessageResponse
from parlour.db.session import get_db

from .schemas import (
    EmployeeCreate,
    EmployeeDetailResponse,
    EmployeeListResponse,
    EmployeeMutationResponse,
    EmployeeUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/employees", tags=["employees"])


@router.get(
    "",
    response_model=EmployeeListResponse,
    dependencies=[Depends(require_admin)],
)
async def list_employees(
    db: AsyncSession = Depends(get_db),
) -> EmployeeListResponse:
    return EmployeeListResponse(employees=await service.list_employees(db))


@router.get(
    "/{employee_id}",
    response_model=EmployeeDetailResponse,
    dependencies=[Depends(require_admin)],
)
async def get_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> EmployeeDetailResponse:
    try:
        return EmployeeDetailResponse(employee=await service.get_employee(db, employee_id))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.post(
    "",
    response_model=EmployeeMutationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_super_admin)],
)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
) -> EmployeeMutationResponse:
    try:
        employee = await service.create_employee(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return EmployeeMutationResponse(message="Employee created successfully", employee=employee)


@router.put(
    "/{employee_id}",
    response_model=EmployeeMutationResponse,
    dependencies=[Depends(require_super_admin)],
)
async def update_employee(
    employee_id: UUID,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
) -> EmployeeMutationResponse:
    try:
        employee = await service.update_employee(db, employee_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return EmployeeMutationResponse(message="Employee updated successfully", employee=employee)


@router.delete(
    "/{employee_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_super_admin)],
)
async def delete_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Soft delete: the employee is marked inactive."""
    try:
        await service.deactivate_employee(db, employee_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return MessageResponse(message="Employee deleted successfully")
