from __future__ import annotations

from recruitment_api.schemas.entities import Task
from recruitment_api.schemas.tasks import TaskCreate, TaskUpdate
from recruitment_api.services.tasks import TaskService

from .crud import build_crud_router

router = build_crud_router(
    prefix="/tasks",
    tags=["Tasks"],
    label="Task",
    service_cls=TaskService,
    create_model=TaskCreate,
    update_model=TaskUpdate,
    read_model=Task,
)
