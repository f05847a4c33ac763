"""Database Primitives - declarative Base, column types, and a standalone session factory.

Invariants:
    - All ORM models inherit from Base
    - All sessions are async (AsyncSession)
"""
