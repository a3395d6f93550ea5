"""Attendance state machine: derives check-in state from the ledger and guards appends."""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterator, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.api.v1.employees.service import find_by_id as find_employee
from parlour.core.clock import to_utc_naive, utcnow
from parlour.core.config import settings
from parlour.core.enums import AttendanceState, PunchAction, TransitionRejection
from parlour.core.exceptions import (
    IllegalTransitionError,
    NotFoundError,
    StorageFailureError,
    ValidationError,
)
from parlour.core.locks import KeyedLock
from parlour.core.models import AttendanceEvent, Employee
from parlour.realtime.broadcaster import ADMIN_ROOM, ATTENDANCE_UPDATE, RealtimeBroadcaster

from . import ledger
from .schemas import (
    AttendanceEmployee,
    AttendanceEventResponse,
    AttendanceUpdate,
    EmployeeStatusResponse,
    PunchResult,
    StatusSnapshot,
)

logger = logging.getLogger(__name__)

# state -> the only action accepted from it, and the state it leads to
TRANSITIONS = {
    AttendanceState.CHECKED_OUT: (PunchAction.CHECK_IN, AttendanceState.CHECKED_IN),
    AttendanceState.CHECKED_IN: (PunchAction.CHECK_OUT, AttendanceState.CHECKED_OUT),
}


def derive_state(latest: Optional[AttendanceEvent]) -> AttendanceState:
    if latest is not None and latest.action == PunchAction.CHECK_IN.value:
        return AttendanceState.CHECKED_IN
    return AttendanceState.CHECKED_OUT


def derive_status(latest: Optional[AttendanceEvent]) -> StatusSnapshot:
    return StatusSnapshot(
        is_checked_in=derive_state(latest) == AttendanceState.CHECKED_IN,
        last_activity=latest.timestamp if latest is not None else None,
    )


def next_state(state: AttendanceState, action: PunchAction) -> AttendanceState:
    """Apply action to state or raise IllegalTransitionError."""
    allowed, target = TRANSITIONS[state]
    if action != allowed:
        if state == AttendanceState.CHECKED_IN:
            raise IllegalTransitionError(TransitionRejection.ALREADY_CHECKED_IN)
        raise IllegalTransitionError(TransitionRejection.NOT_CHECKED_IN)
    return target


@contextmanager
def _reading(what: str) -> Iterator[None]:
    """Turn database errors raised while reading into StorageFailureError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Failed to read %s", what)
        raise StorageFailureError() from e


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return text.strip() or None


def _employee_view(employee: Employee) -> AttendanceEmployee:
    return AttendanceEmployee(
        id=employee.id,
        name=employee.name,
        email=employee.email,
        phone=employee.phone,
        position=employee.position,
    )


def _event_view(event: AttendanceEvent, employee: AttendanceEmployee) -> AttendanceEventResponse:
    return AttendanceEventResponse(
        id=event.id,
        employee_id=event.employee_id,
        employee=employee,
        action=event.action,
        timestamp=event.timestamp,
        location=event.location,
        notes=event.notes,
        created_at=event.created_at,
    )


def _status_view(employee: Employee, status: StatusSnapshot) -> EmployeeStatusResponse:
    return EmployeeStatusResponse(
        id=employee.id,
        name=employee.name,
        email=employee.email,
        phone=employee.phone,
        position=employee.position,
        department=employee.department,
        is_checked_in=status.is_checked_in,
        last_activity=status.last_activity,
    )


class AttendanceService:
    """
    Records punches and answers status/history queries.

    The read-latest, validate, append sequence for one employee runs under that
    employee's lock, so concurrent punches for the same employee are serialized
    within the process. Across processes the (employee_id, sequence) unique
    constraint rejects the second append of the same ledger slot, and the
    sequence is re-run against the new latest event.

    The broadcaster is notified after the append is committed. Delivery is best
    effort and never affects the outcome of the punch.
    """

    def __init__(
        self,
        broadcaster: RealtimeBroadcaster,
        locks: Optional[KeyedLock] = None,
        future_tolerance: Optional[timedelta] = None,
        append_attempts: Optional[int] = None,
    ) -> None:
        self.broadcaster = broadcaster
        self.locks = locks if locks is not None else KeyedLock()
        if future_tolerance is None:
            future_tolerance = timedelta(seconds=settings.punch_future_tolerance_seconds)
        self.future_tolerance = future_tolerance
        self.append_attempts = max(1, append_attempts or settings.punch_append_attempts)

    def _resolve_timestamp(
        self,
        latest: Optional[AttendanceEvent],
        requested: Optional[datetime],
    ) -> datetime:
        now = utcnow()
        if requested is None:
            # Never place a server-stamped punch before the previous one
            if latest is not None and now < latest.timestamp:
                return latest.timestamp
            return now
        if requested > now + self.future_tolerance:
            raise ValidationError("Punch timestamp cannot be in the future")
        if latest is not None and requested < latest.timestamp:
            raise ValidationError("Punch timestamp cannot be earlier than the employee's last punch")
        return requested

    async def record_punch(
        self,
        db: AsyncSession,
        employee_id: UUID,
        action: PunchAction,
        timestamp: Optional[datetime] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> PunchResult:
        try:
            action = PunchAction(action)
        except ValueError as e:
            raise ValidationError("Action must be punch_in or punch_out") from e
        with _reading("employee"):
            employee = await find_employee(db, employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.is_active:
            raise ValidationError("Employee is inactive")

        # Snapshot before any rollback expires the instance
        employee_view = _employee_view(employee)
        department = employee.department
        requested = to_utc_naive(timestamp)

        async with self.locks.hold(employee_id):
            event = await self._append(db, employee_id, action, requested, _clean(location), _clean(notes))

        status = derive_status(event)
        attendance = _event_view(event, employee_view)
        employee_status = EmployeeStatusResponse(
            **employee_view.model_dump(),
            department=department,
            is_checked_in=status.is_checked_in,
            last_activity=status.last_activity,
        )
        logger.info("Employee %s %s at %s", employee_id, action.value, event.timestamp.isoformat())

        await self._notify(AttendanceUpdate(attendance=attendance, employee=employee_status))
        return PunchResult(attendance=attendance, employee=employee_status, status=status)

    async def _append(
        self,
        db: AsyncSession,
        employee_id: UUID,
        action: PunchAction,
        requested: Optional[datetime],
        location: Optional[str],
        notes: Optional[str],
    ) -> AttendanceEvent:
        for attempt in range(1, self.append_attempts + 1):
            with _reading("attendance ledger"):
                latest = await ledger.latest_event(db, employee_id)
            try:
                next_state(derive_state(latest), action)
            except IllegalTransitionError as e:
                logger.info("Rejected %s for employee %s: %s", action.value, employee_id, e.reason.value)
                raise
            sequence = latest.sequence + 1 if latest is not None else 1
            event = AttendanceEvent(
                employee_id=employee_id,
                action=action.value,
                timestamp=self._resolve_timestamp(latest, requested),
                sequence=sequence,
                location=location,
                notes=notes,
            )
            db.add(event)
            try:
                await db.commit()
                return event
            except IntegrityError:
                await db.rollback()
                logger.warning(
                    "Ledger slot %d of employee %s was taken concurrently (attempt %d/%d)",
                    sequence,
                    employee_id,
                    attempt,
                    self.append_attempts,
                )
            except SQLAlchemyError as e:
                await db.rollback()
                logger.exception("Failed to append attendance event for employee %s", employee_id)
                raise StorageFailureError() from e
        raise StorageFailureError("Attendance ledger is busy, please retry")

    async def _notify(self, update: AttendanceUpdate) -> None:
        payload = update.model_dump(mode="json", by_alias=True)
        try:
            delivered = await self.broadcaster.broadcast(ADMIN_ROOM, ATTENDANCE_UPDATE, payload)
        except Exception:
            logger.exception("Broadcasting %s failed", ATTENDANCE_UPDATE)
            return
        logger.debug("%s delivered to %d connection(s)", ATTENDANCE_UPDATE, delivered)

    async def list_employee_statuses(self, db: AsyncSession) -> List[EmployeeStatusResponse]:
        with _reading("employee statuses"):
            rows = await ledger.latest_events_of_active_employees(db)
        return [_status_view(employee, derive_status(latest)) for employee, latest in rows]

    async def get_employee_status(self, db: AsyncSession, employee_id: UUID) -> EmployeeStatusResponse:
        with _reading("employee status"):
            employee = await find_employee(db, employee_id)
            latest = await ledger.latest_event(db, employee_id) if employee else None
        if not employee:
            raise NotFoundError("Employee not found")
        return _status_view(employee, derive_status(latest))

    async def query_events(
        self,
        db: AsyncSession,
        employee_id: Optional[UUID] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[AttendanceEventResponse]:
        start, end = to_utc_naive(start), to_utc_naive(end)
        if start is not None and end is not None and start > end:
            raise ValidationError("startDate must not be after endDate")
        with _reading("attendance events"):
            rows = await ledger.find_events(db, employee_id=employee_id, start=start, end=end)
        return [_event_view(event, _employee_view(employee)) for event, employee in rows]

    async def today_events(self, db: AsyncSession) -> List[AttendanceEventResponse]:
        """Events of the current UTC day, newest first."""
        start = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1) - timedelta(microseconds=1)
        return await self.query_events(db, start=start, end=end)
