"""
Repository layer for MongoDB data access.
Provides clean abstraction over database operations.
"""

from .comment_repository import CommentRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "CommentRepository",
]
