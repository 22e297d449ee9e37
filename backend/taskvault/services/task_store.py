"""Task Store — owner-scoped CRUD, filtering and pagination over tasks.

Invariants:
    - Every statement carries `owner_id = :owner`; there is no unscoped task query
    - "Absent" and "owned by someone else" both raise ResourceNotFoundError("Task")
    - Input is validated (core/task_rules) before any statement is issued
    - update and delete are single conditional statements keyed on (id, owner_id):
      no read-then-write window for a concurrent delete to slip into
    - update always refreshes updated_at, even with an empty change set
    - list orders by created_at DESC, id DESC; total counts filtered rows only
    - An id outside the BIGINT range is reported as a missing task, without a statement
    - create for an owner that no longer exists (FK violation) raises
      ResourceNotFoundError("User"), the same answer /auth/me gives

Design Decisions:
    - UPDATE ... RETURNING over SELECT + mutate: atomic ownership check and write
    - Store takes plain values, not schemas: callable from scripts and tests alike
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.core.domain_types import (
    TaskId, TaskPriority, TaskStatus, UserId,
)
from taskvault.core.errors import ResourceNotFoundError
from taskvault.core.pagination import page_window
from taskvault.core.task_rules import (
    normalize_changes,
    normalize_description,
    normalize_due_date,
    normalize_title,
    parse_priority,
    parse_status,
)
from taskvault.models.task import Task

logger = logging.getLogger(__name__)

MAX_TASK_ID = 2**63 - 1


def _require_storable_id(task_id: int) -> None:
    """Ids outside the BIGINT range cannot name a row: report them as absent."""
    if not 1 <= task_id <= MAX_TASK_ID:
        raise ResourceNotFoundError("Task")


@dataclass(frozen=True)
class TaskPage:
    """One page of tasks plus the count of all rows matching the filter."""
    items: list[Task]
    total: int
    page: int
    limit: int


class TaskStore:
    """Row-scoped access to one owner's tasks."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        owner_id: UserId,
        status: str | TaskStatus | None = None,
        priority: str | TaskPriority | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> TaskPage:
        """List the owner's tasks, newest first."""
        conditions = [Task.owner_id == owner_id]
        if status is not None:
            conditions.append(Task.status == parse_status(status).value)
        if priority is not None:
            conditions.append(Task.priority == parse_priority(priority).value)
        window = page_window(page, limit)

        total = await self.db.scalar(
            select(func.count()).select_from(Task).where(*conditions),
        )
        result = await self.db.execute(
            select(Task)
            .where(*conditions)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(window.limit)
            .offset(window.offset),
        )
        return TaskPage(
            items=list(result.scalars().all()),
            total=total or 0,
            page=window.page,
            limit=window.limit,
        )

    async def create(
        self,
        owner_id: UserId,
        title: str,
        description: str | None = None,
        status: str | TaskStatus | None = None,
        priority: str | TaskPriority | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        """Validate and insert a task. Defaults: todo / medium / no description."""
        now = datetime.now(timezone.utc)
        task = Task(
            owner_id=owner_id,
            title=normalize_title(title),
            description=normalize_description(description),
            status=parse_status(status or TaskStatus.TODO).value,
            priority=parse_priority(priority or TaskPriority.MEDIUM).value,
            due_date=normalize_due_date(due_date),
            created_at=now,
            updated_at=now,
        )
        self.db.add(task)
        try:
            await self.db.commit()
        except IntegrityError:
            # only the owner FK can fail here: the token outlived its user
            await self.db.rollback()
            raise ResourceNotFoundError("User") from None
        logger.info(
            "Task created", extra={"user_id": owner_id, "task_id": task.id},
        )
        return task

    async def get(self, owner_id: UserId, task_id: TaskId) -> Task:
        _require_storable_id(task_id)
        result = await self.db.execute(
            select(Task).where(Task.id == task_id, Task.owner_id == owner_id),
        )
        task = result.scalar_one_or_none()
        if task is None:
            raise ResourceNotFoundError("Task")
        return task

    async def update(
        self, owner_id: UserId, task_id: TaskId, changes: Mapping[str, Any],
    ) -> Task:
        """Apply only the supplied fields, conditioned on id AND owner."""
        values = normalize_changes(changes)
        _require_storable_id(task_id)
        values["updated_at"] = datetime.now(timezone.utc)
        result = await self.db.execute(
            update(Task)
            .where(Task.id == task_id, Task.owner_id == owner_id)
            .values(**values)
            .returning(Task),
        )
        task = result.scalar_one_or_none()
        if task is None:
            await self.db.rollback()
            raise ResourceNotFoundError("Task")
        await self.db.commit()
        logger.info(
            "Task updated",
            extra={"user_id": owner_id, "task_id": task_id},
        )
        return task

    async def delete(self, owner_id: UserId, task_id: TaskId) -> None:
        """Remove the task if (and only if) the caller owns it."""
        _require_storable_id(task_id)
        result = await self.db.execute(
            delete(Task).where(Task.id == task_id, Task.owner_id == owner_id),
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("Task")
        await self.db.commit()
        logger.info(
            "Task deleted", extra={"user_id": owner_id, "task_id": task_id},
        )
