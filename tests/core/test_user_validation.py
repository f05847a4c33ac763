"""User Validation - tests for the ordered, first-failure-wins rules.

Tests cover:
    - Valid names/emails at and inside the length bounds
    - EmptyName, NameTooLong, EmailTooLong, InvalidEmail triggers
    - Rule order: name rules before email rules
    - No normalization (whitespace and case preserved, trailing newline rejected)
    - Lengths counted in UTF-8 bytes (multi-byte names and emails)
    - UpdateUserRequest partial-merge semantics
"""

from datetime import datetime, timedelta, timezone

import pytest

from ministry.core.domain_types import UserId, ValidationRule
from ministry.core.errors import (
    EmailTooLongError,
    EmptyNameError,
    InvalidEmailError,
    NameTooLongError,
    UserValidationError,
)
from ministry.core.user import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
    validate_user,
)

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _user(**overrides) -> User:
    fields = dict(
        id=UserId(1), name="John Doe", email="john@example.com",
        created_at=T0, updated_at=T0,
    )
    fields.update(overrides)
    return User(**fields)


# ─── Accepted input ──────────────────────────────────────────────

@pytest.mark.parametrize("email", [
    "john@example.com",
    "a.b_c%d+e-f@sub.domain-x.org",
    "x@y.io",
    "UPPER@EXAMPLE.COM",
    "1234@numbers.net",
])
def test_valid_emails_pass(email):
    validate_user("John Doe", email)


def test_name_at_bounds_passes():
    validate_user("J", "john@example.com")
    validate_user("n" * 100, "john@example.com")


def test_email_at_max_length_passes():
    email = "a" * 242 + "@example.com"
    assert len(email) == 254
    validate_user("John Doe", email)


def test_name_is_not_trimmed_or_rejected_for_whitespace():
    validate_user("  John  ", "john@example.com")


# ─── Name rules ──────────────────────────────────────────────────

def test_empty_name_fails_with_empty_name():
    with pytest.raises(EmptyNameError) as exc_info:
        validate_user("", "john@example.com")
    assert exc_info.value.rule is ValidationRule.EMPTY_NAME
    assert exc_info.value.field == "name"


def test_name_over_100_fails_with_length_error():
    with pytest.raises(NameTooLongError) as exc_info:
        validate_user("n" * 101, "john@example.com")
    assert exc_info.value.length == 101


# ─── Email rules ─────────────────────────────────────────────────

def test_empty_email_fails_with_invalid_email():
    with pytest.raises(InvalidEmailError):
        validate_user("John Doe", "")


def test_email_shorter_than_five_fails_with_invalid_email():
    with pytest.raises(InvalidEmailError):
        validate_user("John Doe", "a@b.")


def test_email_over_254_fails_with_length_error():
    email = "a" * 243 + "@example.com"
    with pytest.raises(EmailTooLongError):
        validate_user("John Doe", email)


# ─── Byte lengths ────────────────────────────────────────────────

def test_multibyte_name_at_100_bytes_passes():
    name = "é" * 50
    assert len(name.encode("utf-8")) == 100
    validate_user(name, "john@example.com")


def test_multibyte_name_over_100_bytes_fails():
    with pytest.raises(NameTooLongError) as exc_info:
        validate_user("é" * 51, "john@example.com")
    assert exc_info.value.length == 102
    assert "102" in exc_info.value.message


def test_multibyte_email_at_254_bytes_reaches_pattern_rule():
    email = "é" * 123 + "a@ab.com"
    assert len(email.encode("utf-8")) == 254
    with pytest.raises(InvalidEmailError):
        validate_user("John Doe", email)


def test_multibyte_email_over_254_bytes_fails_with_length_error():
    email = "é" * 124 + "@ab.com"
    assert len(email) < 254
    with pytest.raises(EmailTooLongError) as exc_info:
        validate_user("John Doe", email)
    assert exc_info.value.length == 255


@pytest.mark.parametrize("email", [
    "invalid-email",
    "john@example",
    "john@example.c",
    "john@example.c0m",
    "@example.com",
    "john@@example.com",
    "john doe@example.com",
    " john@example.com",
    "john@example.com ",
    "john@example.com\n",
])
def test_malformed_emails_fail_with_invalid_email(email):
    with pytest.raises(InvalidEmailError):
        validate_user("John Doe", email)


def test_first_violated_rule_wins():
    with pytest.raises(EmptyNameError):
        validate_user("", "not-an-email")
    with pytest.raises(NameTooLongError):
        validate_user("n" * 101, "")


def test_all_rules_share_validation_base():
    for cls in (EmptyNameError, InvalidEmailError):
        assert issubclass(cls, UserValidationError)
    assert issubclass(NameTooLongError, UserValidationError)
    assert issubclass(EmailTooLongError, UserValidationError)


# ─── Entity and request wrappers ─────────────────────────────────

def test_create_request_validate_delegates():
    CreateUserRequest("John Doe", "john@example.com").validate()
    with pytest.raises(EmptyNameError):
        CreateUserRequest("", "john@example.com").validate()


def test_user_validate_delegates():
    _user().validate()
    with pytest.raises(InvalidEmailError):
        _user(email="invalid-email").validate()


def test_user_is_immutable():
    user = _user()
    with pytest.raises(AttributeError):
        user.name = "Jane"  # type: ignore[misc]


def test_with_id_returns_copy():
    user = _user(id=None)
    assigned = user.with_id(UserId(7))
    assert assigned.id == 7
    assert user.id is None


# ─── UpdateUserRequest ───────────────────────────────────────────

def test_update_request_absent_fields_are_untouched():
    later = T0 + timedelta(minutes=5)
    merged = UpdateUserRequest(name="Jane Doe").apply_to(_user(), later)
    assert merged.name == "Jane Doe"
    assert merged.email == "john@example.com"
    assert merged.created_at == T0
    assert merged.updated_at == later


def test_update_request_empty_string_is_a_present_value():
    merged = UpdateUserRequest(name="").apply_to(_user(), T0)
    assert merged.name == ""
    with pytest.raises(EmptyNameError):
        merged.validate()


def test_changes_email_only_when_present_and_different():
    assert not UpdateUserRequest().changes_email("john@example.com")
    assert not UpdateUserRequest(email="john@example.com").changes_email("john@example.com")
    assert UpdateUserRequest(email="JOHN@example.com").changes_email("john@example.com")
