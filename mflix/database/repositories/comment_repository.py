"""
Comment repository for movie comments and commenter reporting.
Handles CRUD operations for the comments collection.
"""

from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.read_concern import ReadConcern

from ...core.exceptions import IncorrectOperationError, ValidationError
from ...core.utils.date_utils import utcnow
from ...models.comment import Comment, Critic, to_object_id

logger = structlog.get_logger()

MOST_ACTIVE_COMMENTERS_LIMIT = 20


class CommentRepository:
    """Repository for comment data access operations."""

    def __init__(
        self,
        comments_collection: AsyncIOMotorCollection,
        users_collection: AsyncIOMotorCollection,
    ):
        """
        Initialize comment repository.

        Args:
            comments_collection: MongoDB collection for comments
            users_collection: MongoDB collection for users (report source)
        """
        self.comments_collection = comments_collection
        self.users_collection = users_collection

    async def ensure_indexes(self) -> None:
        """
        Create database indexes for comment lookups.

        Indexes:
        - email - ownership-scoped updates and deletes
        - movie_id - comments of a movie
        """
        await self.comments_collection.create_index("email")
        await self.comments_collection.create_index("movie_id")

        logger.info("Comment indexes created")

    async def get_comment(self, comment_id: str) -> Comment | None:
        """
        Get comment by ID.

        Args:
            comment_id: Comment identifier (ObjectId hex string)

        Returns:
            Comment if found, None otherwise
        """
        object_id = to_object_id(comment_id)
        if object_id is None:
            logger.warning("Invalid comment id", comment_id=comment_id)
            return None

        comment_dict = await self.comments_collection.find_one({"_id": object_id})

        if not comment_dict:
            return None

        return Comment.from_document(comment_dict)

    async def add_comment(self, comment: Comment) -> Comment:
        """
        Insert a comment.

        Args:
            comment: Comment with its identifier already set

        Returns:
            The inserted comment

        Raises:
            IncorrectOperationError: If the comment has no id
        """
        if not comment.id:
            raise IncorrectOperationError(
                "Comment objects need to have an id field set."
            )

        await self.comments_collection.insert_one(comment.to_document())

        logger.info(
            "Comment created",
            comment_id=comment.id,
            movie_id=comment.movie_id,
            email=comment.email,
        )
        return comment

    async def update_comment(self, comment_id: str, text: str, email: str) -> bool:
        """
        Update the text of a comment owned by `email` and stamp the current date.

        Args:
            comment_id: Comment identifier
            text: New comment text
            email: Email of the requesting user

        Returns:
            True if a comment owned by `email` matched, False otherwise
        """
        object_id = to_object_id(comment_id)
        result = None
        if object_id is not None:
            result = await self.comments_collection.update_one(
                {"_id": object_id, "email": email},
                {"$set": {"text": text, "date": utcnow()}},
            )

        if result is not None and result.matched_count > 0:
            if result.modified_count != 1:
                logger.warning(
                    "Comment text was not updated. Is it the same text?",
                    comment_id=comment_id,
                )
            return True

        logger.error(
            "Could not update comment. Make sure the comment is owned by the user",
            comment_id=comment_id,
            email=email,
        )
        return False

    async def delete_comment(self, comment_id: str, email: str) -> bool:
        """
        Delete a comment owned by `email`.

        Args:
            comment_id: Comment identifier
            email: Email of the requesting user

        Returns:
            True if deleted, False if no comment owned by `email` matched

        Raises:
            ValidationError: If comment_id is empty
        """
        if not comment_id:
            raise ValidationError("Comment id must not be empty", email=email)

        object_id = to_object_id(comment_id)
        if object_id is None:
            logger.warning("Invalid comment id", comment_id=comment_id)
            return False

        deleted = await self.comments_collection.find_one_and_delete(
            {"_id": object_id, "email": email}
        )

        if deleted is None:
            logger.warning(
                "Failed to delete comment", comment_id=comment_id, email=email
            )
            return False

        logger.info("Comment deleted", comment_id=comment_id, email=email)
        return True

    async def most_active_commenters(self) -> list[Critic]:
        """
        Rank the users who posted the most comments.

        Comments are matched to users by display name. Runs with majority read
        concern so the report only reflects durable writes.

        Returns:
            Up to 20 critics sorted by comment count, highest first
        """
        pipeline: list[dict[str, Any]] = [
            {
                "$lookup": {
                    "from": self.comments_collection.name,
                    "let": {"userName": "$name"},
                    "pipeline": [
                        {"$match": {"$expr": {"$eq": ["$name", "$$userName"]}}}
                    ],
                    "as": "comments",
                }
            },
            {"$addFields": {"count": {"$size": "$comments"}}},
            {"$project": {"_id": 1, "email": 1, "count": 1}},
            {"$sort": {"count": -1}},
            {"$limit": MOST_ACTIVE_COMMENTERS_LIMIT},
        ]

        collection = self.users_collection.with_options(
            read_concern=ReadConcern("majority")
        )

        critics = []
        async for critic_doc in collection.aggregate(pipeline):
            critics.append(Critic(**critic_doc))

        logger.info("Most active commenters computed", count=len(critics))
        return critics
