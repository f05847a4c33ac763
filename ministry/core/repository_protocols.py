"""Boundary Protocols - the storage contract the user service depends on.

Invariants:
    - Core NEVER imports from shell; implementations are injected into UserService
    - Lookups that match nothing raise UserNotFoundError, never return None
    - Every returned User is fully populated (id and both timestamps set)
    - Backend failures raise StorageError subclasses
    - Email uniqueness violations raise UserExistsError (backend constraint is authoritative)

Design Decisions:
    - Protocol over ABC: structural subtyping, backends need no shared base class
    - Async methods: every implementation does IO or may be awaited concurrently
"""

from typing import Protocol

from ministry.core.domain_types import UserId
from ministry.core.user import User


class UserRepository(Protocol):
    """Contract for durable user storage - implemented by shell."""

    async def get_by_id(self, user_id: UserId) -> User: ...

    async def get_by_email(self, email: str) -> User: ...

    async def create(self, user: User) -> User:
        """Persist user; the returned copy carries the assigned id."""
        ...

    async def update(self, user: User) -> User:
        """Replace name, email and updated_at of the row with user.id."""
        ...

    async def delete(self, user_id: UserId) -> None:
        """Remove the row; UserNotFoundError when zero rows are affected."""
        ...

    async def list(self, limit: int, offset: int) -> list[User]:
        """Newest first (created_at DESC, id DESC); [] past the end."""
        ...
