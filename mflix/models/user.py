"""
User and session models for account management.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Request model for registering a new user."""

    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=3, description="Email address (unique)")
    password: str = Field(..., min_length=1, description="Password (will be hashed)")


class User(BaseModel):
    """User model for database storage. Email is the natural key."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Ned Stark",
                "email": "sean_bean@gameofthron.es",
                "preferences": {"favourite_cast": "Sean Bean"},
            }
        },
    )

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address (unique)")
    hashedpw: str | None = Field(
        None, alias="password", description="Bcrypt password hash"
    )
    preferences: dict[str, Any] | None = Field(
        None, description="Free-form user preferences"
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape."""
        return self.model_dump(by_alias=True)


class UserPublic(BaseModel):
    """User representation returned by the API (no password hash)."""

    name: str
    email: str
    preferences: dict[str, Any] | None = None


class PreferencesUpdate(BaseModel):
    """Request model for replacing user preferences."""

    preferences: dict[str, Any] | None = Field(
        ..., description="Replacement preferences map (null is rejected)"
    )


class Session(BaseModel):
    """Login session. At most one per user, keyed by user_id."""

    user_id: str = Field(..., description="Owning user identifier (email)")
    jwt: str = Field(..., description="Session token")
