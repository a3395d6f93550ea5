from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from parlour.core.enums import TaskPriority, TaskStatus
from parlour.core.schemas import CamelModel


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    assigned_to: UUID
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime


class TaskUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    assigned_to: Optional[UUID] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None


class TaskAssignee(CamelModel):
    id: UUID
    name: str
    email: str
    position: str


class TaskAssigner(CamelModel):
    id: UUID
    name: str
    email: str


class TaskResponse(CamelModel):
    id: UUID
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    assigned_to: TaskAssignee
    assigned_by: Optional[TaskAssigner] = None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(CamelModel):
    tasks: List[TaskResponse]


class TaskDetailResponse(CamelModel):
    task: TaskResponse


class TaskMutationResponse(CamelModel):
    message: str
    task: TaskResponse
