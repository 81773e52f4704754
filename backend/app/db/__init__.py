"""Database Metadata — SQLAlchemy declarative Base shared by all ORM models.

Invariants:
    - Single Base (db/base.py); engine lifecycle lives in infrastructure/database.py
"""
