"""SQL User Repository - UserRepository implementation over an AsyncSession.

Invariants:
    - Each mutating call is its own unit of work: commit on success, rollback on failure
    - "No rows" from a lookup becomes UserNotFoundError; delete/update matching zero rows too
    - A uq_users_email violation becomes UserExistsError; every other SQLAlchemyError becomes DatabaseError
    - Returned entities are built from the row, never from partially flushed state

Design Decisions:
    - Bulk UPDATE/DELETE statements so rowcount reports exactly which rows matched;
      the default session synchronization keeps already-loaded rows consistent
    - Secondary ORDER BY id keeps list order stable when created_at values tie
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ministry.core.domain_types import UserId
from ministry.core.errors import (
    DatabaseError,
    ErrorContext,
    UserExistsError,
    UserNotFoundError,
)
from ministry.core.user import User
from ministry.models.user import EMAIL_UNIQUE_CONSTRAINT, User as UserModel

logger = logging.getLogger(__name__)


def _is_email_conflict(exc: IntegrityError) -> bool:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    return EMAIL_UNIQUE_CONSTRAINT in detail or "users.email" in detail


class SqlAlchemyUserRepository:
    """Relational user storage."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _unit_of_work(
        self, operation: str, email: str | None = None,
    ) -> AsyncGenerator[None, None]:
        """Map driver errors to the domain taxonomy; roll back on any failure."""
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            if email is not None and _is_email_conflict(e):
                raise UserExistsError(
                    email, ErrorContext(operation=operation),
                ) from e
            logger.error(f"DB integrity error during {operation}: {e}")
            raise DatabaseError("Integrity constraint violated", operation) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"DB error during {operation}: {e}")
            raise DatabaseError("Database operation failed", operation) from e

    async def get_by_id(self, user_id: UserId) -> User:
        async with self._unit_of_work("get_by_id"):
            row = await self.db.get(UserModel, user_id)
        if row is None:
            raise UserNotFoundError(
                "id", user_id, ErrorContext(user_id=user_id, operation="get_by_id"),
            )
        return row.to_entity()

    async def get_by_email(self, email: str) -> User:
        async with self._unit_of_work("get_by_email"):
            result = await self.db.execute(
                select(UserModel).where(UserModel.email == email),
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise UserNotFoundError(
                "email", email, ErrorContext(operation="get_by_email"),
            )
        return row.to_entity()

    async def create(self, user: User) -> User:
        row = UserModel.from_entity(user)
        async with self._unit_of_work("create", email=user.email):
            self.db.add(row)
            await self.db.flush()
            created = row.to_entity()
            await self.db.commit()
        return created

    async def update(self, user: User) -> User:
        if user.id is None:
            raise ValueError("cannot update a user without an id")
        async with self._unit_of_work("update", email=user.email):
            result = await self.db.execute(
                update(UserModel)
                .where(UserModel.id == user.id)
                .values(
                    name=user.name,
                    email=user.email,
                    updated_at=user.updated_at,
                ),
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise UserNotFoundError(
                    "id", user.id,
                    ErrorContext(user_id=user.id, operation="update"),
                )
            await self.db.commit()
        return user

    async def delete(self, user_id: UserId) -> None:
        async with self._unit_of_work("delete"):
            result = await self.db.execute(
                delete(UserModel).where(UserModel.id == user_id),
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise UserNotFoundError(
                    "id", user_id,
                    ErrorContext(user_id=user_id, operation="delete"),
                )
            await self.db.commit()

    async def list(self, limit: int, offset: int) -> list[User]:
        async with self._unit_of_work("list"):
            result = await self.db.execute(
                select(UserModel)
                .order_by(UserModel.created_at.desc(), UserModel.id.desc())
                .limit(limit)
                .offset(offset),
            )
            rows = result.scalars().all()
        return [row.to_entity() for row in rows]
