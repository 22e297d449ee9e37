"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root; every Task is scoped by owner_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before
      create_all / alembic autogenerate runs
"""

from taskvault.models.user import User  # noqa: F401
from taskvault.models.task import Task  # noqa: F401
