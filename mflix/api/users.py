"""
User account endpoints.

Registration, lookup, deletion and preference updates. Errors raised by the
repository (duplicate email, null preferences) are mapped to HTTP responses by
the global AppError handler.
"""

import structlog
from fastapi import APIRouter, Depends, status

from ..core.exceptions import NotFoundError
from ..database.repositories.user_repository import UserRepository
from ..models.user import PreferencesUpdate, User, UserCreate, UserPublic
from ..services.password import hash_password
from .dependencies.repositories import get_user_repository

logger = structlog.get_logger()

router = APIRouter(prefix="/api/users", tags=["users"])


def _public(user: User) -> UserPublic:
    return UserPublic(name=user.name, email=user.email, preferences=user.preferences)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserPublic)
async def register_user(
    user_create: UserCreate,
    repo: UserRepository = Depends(get_user_repository),
) -> UserPublic:
    """
    Register a new user.

    **Request Body**:
    ```json
    {"name": "Ned Stark", "email": "sean_bean@gameofthron.es", "password": "..."}
    ```

    **Response**: 201 with the public user, 409 if the email is taken
    """
    user = User(
        name=user_create.name,
        email=user_create.email,
        hashedpw=hash_password(user_create.password),
    )
    await repo.add_user(user)

    logger.info("User registered", email=user.email)
    return _public(user)


@router.get("/{email}", response_model=UserPublic)
async def get_user(
    email: str,
    repo: UserRepository = Depends(get_user_repository),
) -> UserPublic:
    """Get a user by email."""
    user = await repo.get_user(email)
    if user is None:
        raise NotFoundError(f"User {email} not found", email=email)
    return _public(user)


@router.delete("/{email}")
async def delete_user(
    email: str,
    repo: UserRepository = Depends(get_user_repository),
) -> dict[str, bool]:
    """Delete a user together with its sessions."""
    acknowledged = await repo.delete_user(email)
    return {"deleted": acknowledged}


@router.put("/{email}/preferences", response_model=UserPublic)
async def update_preferences(
    email: str,
    update: PreferencesUpdate,
    repo: UserRepository = Depends(get_user_repository),
) -> UserPublic:
    """
    Replace the preferences map of a user.

    **Response**: the updated user, 404 if unknown, 400 if preferences is null
    """
    updated = await repo.update_user_preferences(email, update.preferences)
    if not updated:
        raise NotFoundError(f"User {email} not found", email=email)

    user = await repo.get_user(email)
    if user is None:
        raise NotFoundError(f"User {email} not found", email=email)
    return _public(user)
