"""Core Layer — pure domain logic, no DB, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are deterministic given their inputs (clock injected where time matters)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
    - Password hashing lives here despite its CPU cost: it is pure, callers offload it
"""
