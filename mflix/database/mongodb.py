"""
MongoDB connection and operations.
The document store is an attached resource configured by URL.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ..core.exceptions import ConfigurationError, DatabaseError

logger = structlog.get_logger()


def parse_database_name(mongodb_url: str) -> str:
    """
    Extract the database name from the path of a MongoDB URL.

    Raises:
        ConfigurationError: If the URL carries no database name or the name
            contains query parameter characters
    """
    db_with_params = mongodb_url.split("/")[-1]
    database_name = db_with_params.split("?")[0]

    if not database_name or any(char in database_name for char in ["?", "&", "="]):
        logger.error(
            "Invalid database name in MongoDB URL",
            raw_value=db_with_params,
            parsed_value=database_name,
        )
        raise ConfigurationError(
            f"Database name '{database_name}' is empty or contains invalid characters. "
            f"Check MONGODB_URL format: should be mongodb://host/dbname?params",
            raw_db_name=db_with_params,
            parsed_db_name=database_name,
        )

    if db_with_params != database_name:
        logger.info(
            "Database name extracted from URL",
            raw_url_suffix=db_with_params,
            parsed_db_name=database_name,
        )

    return database_name


class MongoDB:
    """MongoDB connection manager with async support."""

    def __init__(self) -> None:
        self.client: AsyncIOMotorClient | None = None
        self.database: AsyncIOMotorDatabase | None = None

    async def connect(self, mongodb_url: str) -> None:
        """Establish connection to MongoDB."""
        database_name = parse_database_name(mongodb_url)

        try:
            self.client = AsyncIOMotorClient(mongodb_url)
            self.database = self.client[database_name]

            # Test connection
            await self.client.admin.command("ping")

            logger.info(
                "MongoDB connection established",
                database=database_name,
                connection_verified=True,
            )

        except Exception as e:
            logger.error(
                "Failed to connect to MongoDB",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DatabaseError(
                f"MongoDB connection failed: {str(e)}",
                original_error=type(e).__name__,
            ) from e

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

    async def health_check(self) -> dict[str, bool | str]:
        """Check MongoDB connection health."""
        try:
            if not self.client:
                return {"connected": False, "error": "No client connection"}

            await self.client.admin.command("ping")
            server_info = await self.client.server_info()

            return {
                "connected": True,
                "version": server_info.get("version", "unknown"),
                "database": (
                    self.database.name if self.database is not None else "unknown"
                ),
            }

        except Exception as e:
            logger.error("MongoDB health check failed", error=str(e))
            return {"connected": False, "error": str(e)}

    def get_collection(self, collection_name: str):
        """Get a MongoDB collection."""
        if self.database is None:
            raise DatabaseError(
                "Cannot get collection: database connection not established",
                collection_name=collection_name,
            )
        return self.database[collection_name]
