"""Services Layer — stores that talk to the database on behalf of routes.

Invariants:
    - Every task query is scoped by owner_id (no unscoped task access exists)
    - Stores receive an AsyncSession; they never open or close connections

Design Decisions:
    - One store per aggregate (users, tasks) for locality
"""
