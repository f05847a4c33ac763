"""In-Memory User Repository - UserRepository implementation backed by a dict.

Invariants:
    - Identifiers start at 1 and are never reused, even after deletion
    - Email uniqueness is checked and enforced atomically under one asyncio.Lock
    - Stored and returned users are immutable dataclasses (no aliasing hazards)

Design Decisions:
    - Same contract and error taxonomy as SqlAlchemyUserRepository, so the service
      runs unchanged against either backend
"""

import asyncio

from ministry.core.domain_types import UserId
from ministry.core.errors import ErrorContext, UserExistsError, UserNotFoundError
from ministry.core.user import User


class InMemoryUserRepository:
    """Process-local user storage."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._users)

    def _email_taken(self, email: str, exclude: UserId | None = None) -> bool:
        return any(
            u.email == email and u.id != exclude for u in self._users.values()
        )

    async def get_by_id(self, user_id: UserId) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(
                "id", user_id, ErrorContext(user_id=user_id, operation="get_by_id"),
            )
        return user

    async def get_by_email(self, email: str) -> User:
        for user in self._users.values():
            if user.email == email:
                return user
        raise UserNotFoundError(
            "email", email, ErrorContext(operation="get_by_email"),
        )

    async def create(self, user: User) -> User:
        async with self._lock:
            if self._email_taken(user.email):
                raise UserExistsError(user.email, ErrorContext(operation="create"))
            created = user.with_id(UserId(self._next_id))
            self._next_id += 1
            self._users[created.id] = created
        return created

    async def update(self, user: User) -> User:
        async with self._lock:
            if user.id is None or user.id not in self._users:
                raise UserNotFoundError(
                    "id", user.id, ErrorContext(user_id=user.id, operation="update"),
                )
            if self._email_taken(user.email, exclude=user.id):
                raise UserExistsError(
                    user.email, ErrorContext(user_id=user.id, operation="update"),
                )
            self._users[user.id] = user
        return user

    async def delete(self, user_id: UserId) -> None:
        async with self._lock:
            if self._users.pop(user_id, None) is None:
                raise UserNotFoundError(
                    "id", user_id, ErrorContext(user_id=user_id, operation="delete"),
                )

    async def list(self, limit: int, offset: int) -> list[User]:
        ordered = sorted(
            self._users.values(),
            key=lambda u: (u.created_at, u.id),
            reverse=True,
        )
        return ordered[offset:offset + limit]
