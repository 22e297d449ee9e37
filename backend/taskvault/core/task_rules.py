"""Task Rules — pure validation and normalization of task fields.

Invariants:
    - title is non-empty after trimming and at most TITLE_MAX_LENGTH chars
    - description is trimmed; empty/whitespace collapses to None
    - status/priority must be members of TaskStatus/TaskPriority
    - normalize_changes only ever returns keys from UPDATABLE_FIELDS
    - Every failure raises ValidationFailedError before storage is touched

Design Decisions:
    - Shared by TaskStore and the Pydantic schemas so both boundaries
      enforce the same rules (ADR: one definition per invariant)
"""

from datetime import datetime
from typing import Any, Mapping

from taskvault.core.domain_types import TaskPriority, TaskStatus
from taskvault.core.errors import ValidationFailedError

TITLE_MAX_LENGTH = 500
UPDATABLE_FIELDS = frozenset(
    {"title", "description", "status", "priority", "due_date"},
)


def normalize_title(title: Any) -> str:
    if not isinstance(title, str):
        raise ValidationFailedError("Title is required", field="title")
    title = title.strip()
    if not title:
        raise ValidationFailedError("Title is required", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationFailedError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters",
            field="title",
        )
    return title


def normalize_description(description: Any) -> str | None:
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValidationFailedError(
            "Description must be a string", field="description",
        )
    return description.strip() or None


def parse_status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationFailedError("Invalid status", field="status") from None


def parse_priority(value: Any) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError:
        raise ValidationFailedError(
            "Invalid priority", field="priority",
        ) from None


def normalize_due_date(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    raise ValidationFailedError("Invalid due_date", field="due_date")


def normalize_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial update. Only keys present in `changes` are returned."""
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationFailedError(
            f"Unknown field(s): {', '.join(sorted(unknown))}",
        )

    normalized: dict[str, Any] = {}
    if "title" in changes:
        normalized["title"] = normalize_title(changes["title"])
    if "description" in changes:
        normalized["description"] = normalize_description(
            changes["description"],
        )
    if "status" in changes:
        normalized["status"] = parse_status(changes["status"]).value
    if "priority" in changes:
        normalized["priority"] = parse_priority(changes["priority"]).value
    if "due_date" in changes:
        normalized["due_date"] = normalize_due_date(changes["due_date"])
    return normalized
