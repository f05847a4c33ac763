"""User ORM - persistence model for the users table.

Invariants:
    - id is an autoincrement integer primary key assigned by the database
    - email is unique (uq_users_email); the constraint is the authoritative duplicate guard
    - created_at/updated_at are non-null and always read back as UTC-aware

Design Decisions:
    - Column lengths mirror the validation limits in core/domain_types.py
    - ix_users_created_at backs the newest-first list ordering
"""

from datetime import datetime

from sqlalchemy import Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ministry.core.domain_types import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH, UserId
from ministry.core.user import User as UserEntity
from ministry.db.base import Base, UTCDateTime

EMAIL_UNIQUE_CONSTRAINT = "uq_users_email"


class User(Base):
    """User row."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name=EMAIL_UNIQUE_CONSTRAINT),
        Index("ix_users_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(MAX_EMAIL_LENGTH), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    def to_entity(self) -> UserEntity:
        return UserEntity(
            id=UserId(self.id),
            name=self.name,
            email=self.email,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_entity(cls, user: UserEntity) -> "User":
        return cls(
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
