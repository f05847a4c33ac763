"""Core Layer - user entity, validation rules, error taxonomy, storage contract.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Validation and pagination rules are pure and deterministic
"""
