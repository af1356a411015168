"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - ISRC semantics stay in core/isrc.py; schemas only carry the strings

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
