"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions never raise for malformed input unless documented otherwise

Design Decisions:
    - Functional core separated from imperative shell: access decisions are
      returned as values here and raised as errors by services/
"""
