"""
Dependency injection for repository-backed endpoints.
"""

from fastapi import Depends, Request

from ...core.config import Settings, get_settings
from ...database.mongodb import MongoDB
from ...database.repositories.comment_repository import CommentRepository
from ...database.repositories.user_repository import UserRepository


def get_mongodb(request: Request) -> MongoDB:
    """Get MongoDB instance from app state."""
    mongodb: MongoDB = request.app.state.mongodb
    return mongodb


def get_user_repository(
    mongodb: MongoDB = Depends(get_mongodb),
    settings: Settings = Depends(get_settings),
) -> UserRepository:
    """Get user repository instance."""
    return UserRepository(
        mongodb.get_collection(settings.users_collection),
        mongodb.get_collection(settings.sessions_collection),
    )


def get_comment_repository(
    mongodb: MongoDB = Depends(get_mongodb),
    settings: Settings = Depends(get_settings),
) -> CommentRepository:
    """Get comment repository instance."""
    return CommentRepository(
        mongodb.get_collection(settings.comments_collection),
        mongodb.get_collection(settings.users_collection),
    )
