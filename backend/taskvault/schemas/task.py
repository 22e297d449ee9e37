"""Task Schemas — strict request records and task response shapes.

Invariants:
    - TaskCreate.title and TaskUpdate.title go through core/task_rules.normalize_title
    - status/priority are typed as enums: anything else is a 400 at the boundary
    - TaskUpdate distinguishes "absent" from "null" via model_fields_set
      (changes() returns only the keys the client actually sent)
    - title/status/priority may be omitted from an update but never set to null

Design Decisions:
    - field_validator delegates to core rules (single definition per invariant)
    - TaskListResponse mirrors the wire contract {data, total, page, limit}
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from taskvault.core.domain_types import TaskPriority, TaskStatus
from taskvault.core.errors import ValidationFailedError
from taskvault.core.task_rules import normalize_description, normalize_title


def _title(v: Any) -> str:
    try:
        return normalize_title(v)
    except ValidationFailedError as e:
        raise ValueError(e.message) from None


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _title(v)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return normalize_description(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date_is_none(cls, v: Any) -> Any:
        return None if v == "" else v


class TaskUpdate(BaseModel):
    """Partial update — every field optional, only sent fields are applied."""
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _title(v)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return normalize_description(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date_is_none(cls, v: Any) -> Any:
        return None if v == "" else v

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, mode="python")


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    data: list[TaskResponse]
    total: int
    page: int
    limit: int
