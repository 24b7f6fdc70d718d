"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Decision and aggregation functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell
"""
