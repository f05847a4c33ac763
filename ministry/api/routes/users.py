"""User Routes - HTTP CRUD over the user service.

Invariants:
    - Routes contain no business rules: they translate JSON <-> core types and call UserService
    - Service errors propagate to the global handlers (api/error_handlers.py) for status mapping
    - Every request gets a fresh UserService bound to a request-scoped DB session
    - The per-request deadline comes from Settings.request_timeout_seconds

Design Decisions:
    - PUT carries a partial patch (absent keys untouched)
    - Path ids above the signed 64-bit range are rejected as request validation errors (400)
    - Query limit/offset accepted unbounded; clamping is the service's rule and the clamped
      values are echoed back in the pagination block
"""

import logging

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ministry.config import get_settings
from ministry.core.domain_types import MAX_USER_ID, UserId
from ministry.core.pagination import clamp_pagination
from ministry.infrastructure.database import get_db
from ministry.infrastructure.user_repository import SqlAlchemyUserRepository
from ministry.schemas.user import (
    Pagination,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from ministry.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """FastAPI dependency: service over the relational backend."""
    return UserService(
        SqlAlchemyUserRepository(db),
        default_timeout=get_settings().request_timeout_seconds,
    )


@router.get("", response_model=UserListResponse)
async def list_users(
    limit: int = Query(0),
    offset: int = Query(0),
    service: UserService = Depends(get_user_service),
):
    """List users, newest first."""
    users = await service.list_users(limit, offset)
    limit, offset = clamp_pagination(limit, offset)
    return UserListResponse(
        users=[UserResponse.from_entity(u) for u in users],
        count=len(users),
        pagination=Pagination(limit=limit, offset=offset),
    )


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, service: UserService = Depends(get_user_service),
):
    """Create a user."""
    user = await service.create_user(body.to_request())
    return UserResponse.from_entity(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int = Path(le=MAX_USER_ID),
    service: UserService = Depends(get_user_service),
):
    """Get a user by id."""
    user = await service.get_user(UserId(user_id))
    return UserResponse.from_entity(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    body: UserUpdate,
    user_id: int = Path(le=MAX_USER_ID),
    service: UserService = Depends(get_user_service),
):
    """Partially update a user."""
    user = await service.update_user(UserId(user_id), body.to_request())
    return UserResponse.from_entity(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int = Path(le=MAX_USER_ID),
    service: UserService = Depends(get_user_service),
):
    """Delete a user permanently."""
    await service.delete_user(UserId(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
