"""Services Layer — stores and services that talk to the database.

Invariants:
    - Every class takes its AsyncSession in the constructor (one per request)
    - No service reads identity from anywhere but an explicit SessionContext argument

Design Decisions:
    - One file per store/service for locality
"""
