"""Task Routes — owner-scoped CRUD over the caller's tasks.

Invariants:
    - Every route depends on require_identity; the owner is always identity.user_id,
      never a value taken from the request body or query
    - list query: status/priority enums (400 otherwise), page/limit clamped by the store
    - PATCH forwards only fields the client sent (TaskUpdate.changes())
    - DELETE → 204 with no body; a second DELETE of the same id → 404

Design Decisions:
    - page/limit accepted as plain ints without ge/le: out-of-range values are
      clamped, not rejected
"""

from fastapi import APIRouter, Depends, Query, Response, status

from taskvault.api.auth_guard import require_identity
from taskvault.api.dependencies import get_task_store
from taskvault.core.domain_types import Identity, TaskPriority, TaskStatus
from taskvault.schemas.task import (
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from taskvault.services.task_store import TaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    status_filter: TaskStatus | None = Query(None, alias="status"),
    priority: TaskPriority | None = Query(None),
    page: int | None = Query(None),
    limit: int | None = Query(None),
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
):
    """List the caller's tasks, newest first."""
    result = await store.list(
        identity.user_id,
        status=status_filter,
        priority=priority,
        page=page,
        limit=limit,
    )
    return TaskListResponse(
        data=[TaskResponse.model_validate(t) for t in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


@router.post(
    "", response_model=TaskResponse, status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreate,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
):
    """Create a task owned by the caller."""
    task = await store.create(
        identity.user_id,
        title=body.title,
        description=body.description,
        status=body.status,
        priority=body.priority,
        due_date=body.due_date,
    )
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
):
    task = await store.get(identity.user_id, task_id)
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
):
    """Apply a partial update to one of the caller's tasks."""
    task = await store.update(identity.user_id, task_id, body.changes())
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    identity: Identity = Depends(require_identity),
    store: TaskStore = Depends(get_task_store),
):
    await store.delete(identity.user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
