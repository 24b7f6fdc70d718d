"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input); field rules mirror the public API docs
    - Strings are stripped before length checks

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
