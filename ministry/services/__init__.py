"""Services Layer - use-case orchestration between transport and storage.

Invariants:
    - Services depend on core/ contracts only, never on a concrete backend
    - Services know nothing about HTTP status codes; they raise core/errors.py types
"""
