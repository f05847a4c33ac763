"""User Schemas - Pydantic models for the /users API boundary.

Invariants:
    - UserCreate requires both name and email as strings
    - UserUpdate: an omitted key and an explicit null both mean "leave unchanged"
    - No length/pattern constraints here: the service reports those as typed validation errors
    - Strings are never coerced from other JSON types (strict str)

Design Decisions:
    - to_request() returns core dataclasses so routes never hand Pydantic models to the service
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, StrictStr

from ministry.core.user import CreateUserRequest, UpdateUserRequest, User


class UserCreate(BaseModel):
    """User creation payload."""
    name: StrictStr
    email: StrictStr

    def to_request(self) -> CreateUserRequest:
        return CreateUserRequest(name=self.name, email=self.email)


class UserUpdate(BaseModel):
    """Partial update payload."""
    name: StrictStr | None = None
    email: StrictStr | None = None

    def to_request(self) -> UpdateUserRequest:
        return UpdateUserRequest(name=self.name, email=self.email)


class UserResponse(BaseModel):
    """Public-facing user record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls.model_validate(user)


class Pagination(BaseModel):
    limit: int
    offset: int


class UserListResponse(BaseModel):
    """Page of users, newest first."""
    users: list[UserResponse]
    count: int
    pagination: Pagination
