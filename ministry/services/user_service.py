"""User Service - orchestrates validation, email uniqueness, and repository calls.

Invariants:
    - Sole holder of business rules; repositories only store what they are given
    - Validation runs before any storage call on create, and before persistence on update
    - Errors are surfaced exactly once, unchanged: no retries, no suppression
    - Every operation runs under a deadline; expiry cancels pending storage awaits and
      raises OperationTimeoutError
    - updated_at never moves backwards, so updated_at >= created_at always holds
    - Holds no per-request state: one instance may serve concurrent operations

Design Decisions:
    - The get_by_email pre-check is a fast path for a clean UserExistsError; the backend
      uniqueness guard is authoritative and maps its violation to the same error, which
      closes the check-then-create race
    - Task cancellation (asyncio.CancelledError) propagates untouched
    - Clock injected for deterministic tests
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable

from ministry.core.domain_types import UserId, UserOperation
from ministry.core.errors import (
    ErrorContext,
    OperationTimeoutError,
    UserExistsError,
    UserNotFoundError,
)
from ministry.core.pagination import clamp_pagination
from ministry.core.repository_protocols import UserRepository
from ministry.core.user import CreateUserRequest, UpdateUserRequest, User

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserService:
    """Use-case layer for user records."""

    def __init__(
        self,
        repository: UserRepository,
        *,
        default_timeout: float | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.default_timeout = default_timeout
        self._clock = clock

    @asynccontextmanager
    async def _deadline(
        self, operation: UserOperation, timeout: float | None,
        user_id: UserId | None = None,
    ) -> AsyncGenerator[None, None]:
        """Bound the enclosed storage calls by timeout, falling back to default_timeout."""
        seconds = timeout if timeout is not None else self.default_timeout
        try:
            async with asyncio.timeout(seconds):
                yield
        except TimeoutError as e:
            logger.warning(
                f"{operation.value} timed out after {seconds}s",
                extra={"operation": operation.value, "user_id": user_id},
            )
            raise OperationTimeoutError(
                operation.value, seconds,
                ErrorContext(user_id=user_id, operation=operation.value),
            ) from e

    async def _ensure_email_available(self, email: str) -> None:
        """Raise UserExistsError if email is taken; propagate any other lookup failure."""
        try:
            await self.repository.get_by_email(email)
        except UserNotFoundError:
            return
        logger.warning(
            "Rejected duplicate email",
            extra={"error_code": "USER_EXISTS"},
        )
        raise UserExistsError(email)

    async def get_user(self, user_id: UserId, *, timeout: float | None = None) -> User:
        async with self._deadline(UserOperation.GET, timeout, user_id):
            return await self.repository.get_by_id(user_id)

    async def create_user(
        self, request: CreateUserRequest, *, timeout: float | None = None,
    ) -> User:
        """Validate, reject duplicate email, then persist with both timestamps = now."""
        request.validate()
        async with self._deadline(UserOperation.CREATE, timeout):
            await self._ensure_email_available(request.email)
            now = self._clock()
            user = await self.repository.create(User(
                name=request.name,
                email=request.email,
                created_at=now,
                updated_at=now,
            ))
        logger.info(
            f"Created user {user.id}",
            extra={"user_id": user.id, "operation": UserOperation.CREATE.value},
        )
        return user

    async def update_user(
        self, user_id: UserId, request: UpdateUserRequest, *, timeout: float | None = None,
    ) -> User:
        """Apply a partial patch. Absent fields are left untouched.

        Order: load (NotFound) -> duplicate check when the email changes ->
        merge -> refresh updated_at -> re-validate -> persist. A validation
        failure after merging writes nothing.
        """
        async with self._deadline(UserOperation.UPDATE, timeout, user_id):
            current = await self.repository.get_by_id(user_id)
            if request.changes_email(current.email):
                await self._ensure_email_available(request.email)
            merged = request.apply_to(
                current, updated_at=max(self._clock(), current.updated_at),
            )
            merged.validate()
            user = await self.repository.update(merged)
        logger.info(
            f"Updated user {user_id}",
            extra={"user_id": user_id, "operation": UserOperation.UPDATE.value},
        )
        return user

    async def delete_user(self, user_id: UserId, *, timeout: float | None = None) -> None:
        async with self._deadline(UserOperation.DELETE, timeout, user_id):
            # NotFound reported here, distinct from a zero-row delete racing another deleter
            await self.repository.get_by_id(user_id)
            await self.repository.delete(user_id)
        logger.info(
            f"Deleted user {user_id}",
            extra={"user_id": user_id, "operation": UserOperation.DELETE.value},
        )

    async def list_users(
        self,
        limit: int | None = None,
        offset: int | None = None,
        *,
        timeout: float | None = None,
    ) -> list[User]:
        """Newest first. limit clamped into [1, 100] (default 10), offset floored at 0."""
        limit, offset = clamp_pagination(limit, offset)
        async with self._deadline(UserOperation.LIST, timeout):
            return await self.repository.list(limit, offset)
