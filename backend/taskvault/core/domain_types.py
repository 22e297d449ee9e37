"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps UUID, TaskId wraps int — never mix them in store signatures
    - Every valid task state is encoded as an Enum — no raw string matching
    - Identity is frozen: once require_identity builds it, nothing downstream can change it

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
TaskId = NewType("TaskId", int)


@dataclass(frozen=True, slots=True)
class Identity:
    """Verified caller identity, scoped to exactly one request."""
    user_id: UserId
    email: str


# ─── Enums ───────────────────────────────────────────────────────

class TaskStatus(str, Enum):
    """Task workflow states — maps to DB `status` column."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority levels — maps to DB `priority` column."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
