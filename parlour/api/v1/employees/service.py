"""Employee directory: lookups used by attendance and tasks, plus CRUD."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.core.exceptions import ConflictError, NotFoundError, StorageFailureError
from parlour.core.models import Employee

from .schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate

logger = logging.getLogger(__name__)


async def find_by_id(db: AsyncSession, employee_id: UUID) -> Optional[Employee]:
    return await db.get(Employee, employee_id)


async def list_active(db: AsyncSession) -> List[Employee]:
    result = await db.execute(
        select(Employee).where(Employee.is_active.is_(True)).order_by(Employee.created_at.desc())
    )
    return list(result.scalars().all())


async def _email_taken(db: AsyncSession, email: str, exclude_id: Optional[UUID] = None) -> bool:
    stmt = select(Employee.id).where(func.lower(Employee.email) == email)
    if exclude_id is not None:
        stmt = stmt.where(Employee.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def _commit(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("Employee with this email already exists") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to %s employee", action)
        raise StorageFailureError() from e


async def list_employees(db: AsyncSession) -> List[EmployeeResponse]:
    return [EmployeeResponse.model_validate(e) for e in await list_active(db)]


async def get_employee(db: AsyncSession, employee_id: UUID) -> EmployeeResponse:
    employee = await find_by_id(db, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")
    return EmployeeResponse.model_validate(employee)


async def create_employee(db: AsyncSession, payload: EmployeeCreate) -> EmployeeResponse:
    email = payload.email.strip().lower()
    if await _email_taken(db, email):
        raise ConflictError("Employee with this email already exists")
    employee = Employee(
        name=payload.name.strip(),
        email=email,
        phone=payload.phone.strip(),
        position=payload.position.strip(),
        department=payload.department.strip(),
        join_date=payload.join_date,
        is_active=True,
    )
    db.add(employee)
    await _commit(db, "create")
    await db.refresh(employee)
    logger.info("Created employee %s (%s)", employee.id, employee.email)
    return EmployeeResponse.model_validate(employee)


async def update_employee(
    db: AsyncSession,
    employee_id: UUID,
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    employee = await find_by_id(db, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].strip().lower()
        if await _email_taken(db, changes["email"], exclude_id=employee.id):
            raise ConflictError("Employee with this email already exists")
    for field, value in changes.items():
        if isinstance(value, str):
            value = value.strip()
        setattr(employee, field, value)

    await _commit(db, "update")
    await db.refresh(employee)
    return EmployeeResponse.model_validate(employee)


async def deactivate_employee(db: AsyncSession, employee_id: UUID) -> None:
    """Soft delete. Attendance history is kept; the employee drops out of status listings."""
    employee = await find_by_id(db, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")
    employee.is_active = False
    await _commit(db, "deactivate")
    logger.info("Deactivated employee %s", employee_id)
