"""
Queries over the append-only attendance ledger.

Within one employee's ledger, sequence order and timestamp order agree: a punch
is only appended with a timestamp no earlier than the previous one. Ties on
timestamp are broken by sequence (creation order).
"""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.core.models import AttendanceEvent, Employee


async def latest_event(db: AsyncSession, employee_id: UUID) -> Optional[AttendanceEvent]:
    """Most recent event of one employee, served by the (employee_id, timestamp DESC) index."""
    result = await db.execute(
        select(AttendanceEvent)
        .where(AttendanceEvent.employee_id == employee_id)
        .order_by(AttendanceEvent.timestamp.desc(), AttendanceEvent.sequence.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def latest_events_of_active_employees(
    db: AsyncSession,
) -> List[Tuple[Employee, Optional[AttendanceEvent]]]:
    """Every active employee with their latest event (None when the ledger is empty for them)."""
    last_sequence = (
        select(
            AttendanceEvent.employee_id.label("employee_id"),
            func.max(AttendanceEvent.sequence).label("sequence"),
        )
        .group_by(AttendanceEvent.employee_id)
        .subquery()
    )
    stmt = (
        select(Employee, AttendanceEvent)
        .outerjoin(last_sequence, last_sequence.c.employee_id == Employee.id)
        .outerjoin(
            AttendanceEvent,
            and_(
                AttendanceEvent.employee_id == Employee.id,
                AttendanceEvent.sequence == last_sequence.c.sequence,
            ),
        )
        .where(Employee.is_active.is_(True))
        .order_by(Employee.created_at.desc())
    )
    result = await db.execute(stmt)
    return [(employee, event) for employee, event in result.all()]


async def find_events(
    db: AsyncSession,
    employee_id: Optional[UUID] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Tuple[AttendanceEvent, Employee]]:
    """Events matching the optional filters, newest first. Both bounds are inclusive."""
    stmt = select(AttendanceEvent, Employee).join(Employee, Employee.id == AttendanceEvent.employee_id)
    if employee_id is not None:
        stmt = stmt.where(AttendanceEvent.employee_id == employee_id)
    if start is not None:
        stmt = stmt.where(AttendanceEvent.timestamp >= start)
    if end is not None:
        stmt = stmt.where(AttendanceEvent.timestamp <= end)
    stmt = stmt.order_by(AttendanceEvent.timestamp.desc(), AttendanceEvent.sequence.desc())
    result = await db.execute(stmt)
    return [(event, employee) for event, employee in result.all()]
