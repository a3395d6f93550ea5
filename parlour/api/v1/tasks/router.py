from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.auth.rbac import require_admin, require_super_admin
from parlour.auth.schemas import CurrentUser
from parlour.core.exceptions import ServiceError
from parlour.core.schemas import MessageResponse
from parlour.db.session import get_db

from .schemas import (
    TaskCreate,
    TaskDetailResponse,
    TaskListResponse,
    TaskMutationResponse,
    TaskUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=TaskListResponse,
    dependencies=[Depends(require_admin)],
)
async def list_tasks(
    db: AsyncSession = Depends(get_db),
) -> TaskListResponse:
    return TaskListResponse(tasks=await service.list_tasks(db))


@router.get(
    "/{task_id}",
    response_model=TaskDetailResponse,
    dependencies=[Depends(require_admin)],
)
async def get_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> TaskDetailResponse:
    try:
        return TaskDetailResponse(task=await service.get_task(db, task_id))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.post(
    "",
    response_model=TaskMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    payload: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
) -> TaskMutationResponse:
    try:
        task = await service.create_task(db, current_user.id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return TaskMutationResponse(message="Task created successfully", task=task)


@router.put(
    "/{task_id}",
    response_model=TaskMutationResponse,
    dependencies=[Depends(require_super_admin)],
)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    db: AsyncSession = Depends(get_db),
) -> TaskMutationResponse:
    try:
        task = await service.update_task(db, task_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return TaskMutationResponse(message="Task updated successfully", task=task)


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_super_admin)],
)
async def delete_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.delete_task(db, task_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return MessageResponse(message="Task deleted successfully")
