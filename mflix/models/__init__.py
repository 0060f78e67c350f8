"""
Pydantic models for stored documents and API payloads.
"""

from .comment import Comment, CommentCreate, CommentUpdate, Critic
from .user import PreferencesUpdate, Session, User, UserCreate, UserPublic

__all__ = [
    "Comment",
    "CommentCreate",
    "CommentUpdate",
    "Critic",
    "PreferencesUpdate",
    "Session",
    "User",
    "UserCreate",
    "UserPublic",
]
