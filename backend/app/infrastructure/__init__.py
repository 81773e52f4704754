"""Infrastructure Layer — database engine and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All persistence failures mapped to StoreUnavailableError

Design Decisions:
    - Session manager owns rollback and error mapping (single responsibility)
"""
