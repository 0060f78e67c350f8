"""
Comment models for movie comments and the commenter report.

Comment and movie identifiers are ObjectIds in the database and hex strings
everywhere else.
"""

from datetime import datetime
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.utils.date_utils import utcnow


def to_object_id(value: str | ObjectId | None) -> ObjectId | None:
    """Convert a hex string to ObjectId, returning None when it is not valid."""
    if isinstance(value, ObjectId):
        return value
    if value and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _stringify_object_id(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


# ===== Request Models =====


class CommentCreate(BaseModel):
    """Request model for posting a comment on a movie."""

    movie_id: str = Field(..., description="Movie the comment belongs to")
    name: str = Field(..., min_length=1, description="Commenter display name")
    email: str = Field(..., min_length=3, description="Commenter email")
    text: str = Field(..., min_length=1, description="Comment text")

    @field_validator("movie_id")
    @classmethod
    def _check_movie_id(cls, value: str) -> str:
        if not ObjectId.is_valid(value):
            raise ValueError("movie_id must be a 24 character hex ObjectId")
        return value


class CommentUpdate(BaseModel):
    """Request model for editing a comment. Email must match the owner."""

    email: str = Field(..., description="Email of the requesting user")
    text: str = Field(..., min_length=1, description="New comment text")


# ===== Database / Response Models =====


class Comment(BaseModel):
    """Comment on a movie."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "5a9427648b0beebeb69579e7",
                "movie_id": "573a1390f29313caabcd4323",
                "name": "Mercedes Tyler",
                "email": "mercedes_tyler@fakegmail.com",
                "text": "Eius veritatis vero facilis quaerat fuga temporibus.",
                "date": "2002-08-18T04:56:07Z",
            }
        },
    )

    id: str | None = Field(None, alias="_id", description="Comment identifier")
    movie_id: str | None = Field(None, description="Movie identifier")
    name: str | None = Field(None, description="Commenter display name")
    email: str | None = Field(None, description="Commenter email")
    text: str | None = Field(None, description="Comment text")
    date: datetime = Field(default_factory=utcnow)

    @field_validator("id", "movie_id", mode="before")
    @classmethod
    def _coerce_object_ids(cls, value: Any) -> Any:
        return _stringify_object_id(value)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Comment":
        """Build a Comment from a stored document."""
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape (ObjectId ids)."""
        document = self.model_dump(exclude={"id"})
        document["_id"] = to_object_id(self.id) or self.id
        if self.movie_id is not None:
            document["movie_id"] = to_object_id(self.movie_id) or self.movie_id
        return document


class Critic(BaseModel):
    """Row of the most active commenters report."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(None, alias="_id", description="User document identifier")
    email: str | None = Field(None, description="User email")
    count: int = Field(0, description="Number of comments posted")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_object_id(cls, value: Any) -> Any:
        return _stringify_object_id(value)
