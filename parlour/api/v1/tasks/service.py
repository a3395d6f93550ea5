import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from parlour.api.v1.employees.service import find_by_id as find_employee
from parlour.core.clock import to_utc_naive
from parlour.core.exceptions import NotFoundError, StorageFailureError
from parlour.core.models import Task

from .schemas import TaskAssignee, TaskAssigner, TaskCreate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)


def _task_query():
    return select(Task).options(selectinload(Task.assignee), selectinload(Task.assigner))


def _to_response(task: Task) -> TaskResponse:
    assigner = None
    if task.assigner is not None:
        assigner = TaskAssigner(id=task.assigner.id, name=task.assigner.name, email=task.assigner.email)
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        assigned_to=TaskAssignee(
            id=task.assignee.id,
            name=task.assignee.name,
            email=task.assignee.email,
            position=task.assignee.position,
        ),
        assigned_by=assigner,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


async def _load_task(db: AsyncSession, task_id: UUID) -> Optional[Task]:
    result = await db.execute(
        _task_query().where(Task.id == task_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _commit(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to %s task", action)
        raise StorageFailureError() from e


async def _require_assignee(db: AsyncSession, employee_id: UUID) -> None:
    if not await find_employee(db, employee_id):
        raise NotFoundError("Assigned employee not found")


async def list_tasks(db: AsyncSession) -> List[TaskResponse]:
    result = await db.execute(_task_query().order_by(Task.created_at.desc()))
    return [_to_response(t) for t in result.scalars().all()]


async def get_task(db: AsyncSession, task_id: UUID) -> TaskResponse:
    task = await _load_task(db, task_id)
    if not task:
        raise NotFoundError("Task not found")
    return _to_response(task)


async def create_task(db: AsyncSession, assigned_by: UUID, payload: TaskCreate) -> TaskResponse:
    await _require_assignee(db, payload.assigned_to)
    task = Task(
        title=payload.title.strip(),
        description=payload.description.strip(),
        assigned_to=payload.assigned_to,
        assigned_by=assigned_by,
        priority=payload.priority.value,
        due_date=to_utc_naive(payload.due_date),
    )
    db.add(task)
    await _commit(db, "create")
    logger.info("Task %s assigned to employee %s", task.id, task.assigned_to)
    return _to_response(await _load_task(db, task.id))


async def update_task(db: AsyncSession, task_id: UUID, payload: TaskUpdate) -> TaskResponse:
    task = await _load_task(db, task_id)
    if not task:
        raise NotFoundError("Task not found")

    if payload.assigned_to is not None and payload.assigned_to != task.assigned_to:
        await _require_assignee(db, payload.assigned_to)
        task.assigned_to = payload.assigned_to
    if payload.title is not None:
        task.title = payload.title.strip()
    if payload.description is not None:
        task.description = payload.description.strip()
    if payload.status is not None:
        task.status = payload.status.value
    if payload.priority is not None:
        task.priority = payload.priority.value
    if payload.due_date is not None:
        task.due_date = to_utc_naive(payload.due_date)

    await _commit(db, "update")
    return _to_response(await _load_task(db, task_id))


async def delete_task(db: AsyncSession, task_id: UUID) -> None:
    task = await db.get(Task, task_id)
    if not task:
        raise NotFoundError("Task not found")
    await db.delete(task)
    await _commit(db, "delete")
