"""
User repository for account and session management.
Handles CRUD operations for the users and sessions collections.
"""

from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import WriteConcern
from pymongo.errors import DuplicateKeyError

from ...core.exceptions import DuplicateUserError, IncorrectOperationError
from ...models.user import Session, User

logger = structlog.get_logger()


class UserRepository:
    """Repository for user and session data access operations."""

    def __init__(
        self,
        users_collection: AsyncIOMotorCollection,
        sessions_collection: AsyncIOMotorCollection,
    ):
        """
        Initialize user repository.

        Args:
            users_collection: MongoDB collection for users
            sessions_collection: MongoDB collection for sessions
        """
        self.users_collection = users_collection
        self.sessions_collection = sessions_collection

    async def ensure_indexes(self) -> None:
        """
        Create indexes for user and session lookups.

        The sample dataset may already hold duplicate emails, in which case the
        unique index cannot be built; this is logged and startup continues.
        """
        try:
            await self.users_collection.create_index("email", unique=True)
            logger.info("Created unique index on users.email")
        except Exception as e:
            logger.warning(
                "Failed to create unique index on users.email",
                error=str(e),
                recommendation="Remove duplicate emails before creating the index",
            )

        try:
            await self.sessions_collection.create_index("user_id")
            logger.info("Created index on sessions.user_id")
        except Exception as e:
            logger.error("Failed to create index on sessions.user_id", error=str(e))

    async def add_user(self, user: User) -> bool:
        """
        Insert a new user.

        Args:
            user: User to insert

        Returns:
            True once the user has been written with majority acknowledgement

        Raises:
            DuplicateUserError: If a user with the same email exists
        """
        existing = await self.users_collection.find_one({"email": user.email})
        if existing:
            logger.info("User already exists", email=user.email)
            raise DuplicateUserError("User is already created", email=user.email)

        try:
            await self.users_collection.with_options(
                write_concern=WriteConcern(w="majority")
            ).insert_one(user.to_document())
        except DuplicateKeyError as e:
            # Another writer inserted the same email after our lookup
            logger.info("User inserted concurrently", email=user.email)
            raise DuplicateUserError(
                "User is already created", email=user.email
            ) from e

        logger.info("User created", email=user.email)
        return True

    async def create_user_session(self, user_id: str, jwt: str) -> bool:
        """
        Create or replace the login session of a user.

        Args:
            user_id: User identifier (email)
            jwt: Session token

        Returns:
            True if the session was written, False if the identical session
            already exists
        """
        existing = await self.sessions_collection.find_one(
            {"user_id": user_id, "jwt": jwt}
        )
        if existing:
            logger.info("Session already exists", user_id=user_id)
            return False

        session = Session(user_id=user_id, jwt=jwt)
        await self.sessions_collection.replace_one(
            {"user_id": user_id},
            session.model_dump(),
            upsert=True,
        )

        logger.info("User session created", user_id=user_id)
        return True

    async def get_user(self, email: str) -> User | None:
        """
        Get user by email address.

        Args:
            email: Email address

        Returns:
            User if found, None otherwise
        """
        user_dict = await self.users_collection.find_one({"email": email})

        if not user_dict:
            return None

        user_dict.pop("_id", None)
        return User(**user_dict)

    async def get_user_session(self, user_id: str) -> Session | None:
        """
        Get the session of a user.

        Args:
            user_id: User identifier (email)

        Returns:
            Session if found, None otherwise
        """
        session_dict = await self.sessions_collection.find_one({"user_id": user_id})

        if not session_dict:
            return None

        session_dict.pop("_id", None)
        return Session(**session_dict)

    async def delete_user_sessions(self, user_id: str) -> bool:
        """
        Delete every session of a user.

        Returns:
            Whether the delete was acknowledged by the server
        """
        result = await self.sessions_collection.delete_many({"user_id": user_id})

        logger.info(
            "User sessions deleted",
            user_id=user_id,
            count=result.deleted_count,
        )
        acknowledged: bool = result.acknowledged
        return acknowledged

    async def delete_user(self, email: str) -> bool:
        """
        Delete a user and, first, all of its sessions.

        Args:
            email: Email of the user to delete

        Returns:
            Whether the user delete was acknowledged by the server
        """
        await self.delete_user_sessions(email)
        result = await self.users_collection.delete_one({"email": email})

        if result.deleted_count == 0:
            logger.warning("No user deleted", email=email)
        else:
            logger.info("User deleted", email=email)

        acknowledged: bool = result.acknowledged
        return acknowledged

    async def update_user_preferences(
        self, email: str, preferences: dict[str, Any] | None
    ) -> bool:
        """
        Replace the preferences of a user.

        Args:
            email: Email of the user to update
            preferences: New preferences map, replaces the stored one entirely

        Returns:
            True if updated, False if no user has this email

        Raises:
            IncorrectOperationError: If preferences is None
        """
        user_dict = await self.users_collection.find_one({"email": email})
        if not user_dict:
            logger.warning("No user with email", email=email)
            return False

        if preferences is None:
            raise IncorrectOperationError(
                "User preferences cannot be NULL", email=email
            )

        await self.users_collection.update_one(
            {"email": email},
            {"$set": {"preferences": preferences}},
        )

        logger.info("User preferences updated", email=email)
        return True
