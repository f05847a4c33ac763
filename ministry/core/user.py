"""User Entity & Validation - the User record and the rules a candidate must satisfy.

Invariants:
    - Rules run in a fixed order: name length, email length, email pattern
    - The first violated rule is raised; later rules are not evaluated
    - No normalization: validation sees the raw input (no strip, no case-folding)
    - Lengths are measured in UTF-8 bytes, not characters
    - User is immutable; updates build a new instance via dataclasses.replace

Design Decisions:
    - UpdateUserRequest fields are optional: None means "absent, leave as is",
      an empty string is a present value and is validated like any other
    - Pattern is matched with fullmatch so a trailing newline never passes
"""

import re
from dataclasses import dataclass, replace
from datetime import datetime

from ministry.core.domain_types import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MIN_EMAIL_LENGTH,
    MIN_NAME_LENGTH,
    UserId,
)
from ministry.core.errors import (
    EmailTooLongError,
    EmptyNameError,
    InvalidEmailError,
    NameTooLongError,
)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_name(name: str) -> None:
    length = _byte_length(name)
    if length < MIN_NAME_LENGTH:
        raise EmptyNameError()
    if length > MAX_NAME_LENGTH:
        raise NameTooLongError(length)


def validate_email(email: str) -> None:
    length = _byte_length(email)
    if length < MIN_EMAIL_LENGTH:
        raise InvalidEmailError()
    if length > MAX_EMAIL_LENGTH:
        raise EmailTooLongError(length)
    if not EMAIL_PATTERN.fullmatch(email):
        raise InvalidEmailError()


def validate_user(name: str, email: str) -> None:
    """Raise the first UserValidationError for (name, email), or return None."""
    validate_name(name)
    validate_email(email)


@dataclass(frozen=True)
class User:
    """Persisted user record. id is None only before the backend assigns one."""
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    id: UserId | None = None

    def validate(self) -> None:
        validate_user(self.name, self.email)

    def with_id(self, user_id: UserId) -> "User":
        return replace(self, id=user_id)


@dataclass(frozen=True)
class CreateUserRequest:
    """Creation input - both fields required."""
    name: str
    email: str

    def validate(self) -> None:
        validate_user(self.name, self.email)


@dataclass(frozen=True)
class UpdateUserRequest:
    """Partial patch - fields left as None are not touched."""
    name: str | None = None
    email: str | None = None

    def changes_email(self, current_email: str) -> bool:
        return self.email is not None and self.email != current_email

    def apply_to(self, user: User, updated_at: datetime) -> User:
        """Merge present fields onto user. Does not validate."""
        return replace(
            user,
            name=self.name if self.name is not None else user.name,
            email=self.email if self.email is not None else user.email,
            updated_at=updated_at,
        )
