"""Domain Types - named primitives and limits shared by the user domain.

Invariants:
    - UserId wraps the storage-assigned positive integer, never a bare int in domain logic
    - Length limits and list bounds are defined once, here
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Field Limits ────────────────────────────────────────────────

MIN_NAME_LENGTH: int = 1
MAX_NAME_LENGTH: int = 100
MIN_EMAIL_LENGTH: int = 5
MAX_EMAIL_LENGTH: int = 254


# ─── List Bounds ─────────────────────────────────────────────────

DEFAULT_LIST_LIMIT: int = 10
MAX_LIST_LIMIT: int = 100


# ─── Identifier Range ────────────────────────────────────────────

# Ids are signed 64-bit integers in every backend
MAX_USER_ID: int = 2**63 - 1


# ─── Enums ───────────────────────────────────────────────────────

class ValidationRule(str, Enum):
    """Validation rules in evaluation order. The first violated rule is reported."""
    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    EMAIL_TOO_LONG = "email_too_long"
    INVALID_EMAIL = "invalid_email"


class UserOperation(str, Enum):
    """Service operations, used for logging and error context."""
    GET = "get_user"
    CREATE = "create_user"
    UPDATE = "update_user"
    DELETE = "delete_user"
    LIST = "list_users"
