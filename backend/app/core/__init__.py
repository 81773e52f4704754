"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO: only in-process state and pure functions

Design Decisions:
    - Functional core separated from imperative shell
"""
