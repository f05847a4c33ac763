"""Pydantic Schemas - request/response shapes for API endpoints.

Invariants:
    - Schemas check JSON types only; business validation lives in core/user.py
    - Schemas convert to and from core dataclasses at the route boundary
"""
