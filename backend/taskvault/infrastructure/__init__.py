"""Infrastructure Layer — connection pool and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain logic beyond core/errors
    - All SQLAlchemy exceptions mapped to DatabaseError before leaving this layer
"""
