"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Listing returns structured JSON; state-changing POSTs answer 303 redirects

Design Decisions:
    - Thin routes delegate to stores and services
"""
