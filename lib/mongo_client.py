# =============================================================================
# lib/mongo_client.py - MongoDB Client Wrapper
# =============================================================================
# This module provides a thin wrapper around pymongo:
# - owns the MongoClient (and therefore the connection pool)
# - hands out collections by name
# - creates the indexes the API relies on
#
# One instance is created in the FastAPI lifespan and injected into services
# through app/dependencies.py.
#
# Usage:
#   database = MongoDatabase.from_settings(settings)
#   database.collection(BOOTCAMPS).find_one({"slug": "devworks-bootcamp"})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from pymongo import ASCENDING, GEOSPHERE, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

# Collection names
BOOTCAMPS = "bootcamps"
COURSES = "courses"


class MongoClientError(ApplicationError):
    """Error while connecting to or preparing the database."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, code=kwargs.pop("code", "MONGO_ERROR"), **kwargs)


class MongoDatabase:
    """
    Wrapper for the DevCamper database.

    Example:
        database = MongoDatabase("mongodb://localhost:27017", "devcamper")
        database.ensure_indexes()
        bootcamps = database.collection(BOOTCAMPS)
    """

    def __init__(
        self,
        url: str,
        name: str,
        timeout_ms: int = 5000,
        client: MongoClient | None = None,
    ):
        self.name = name
        # MongoClient connects lazily; nothing touches the network here
        if client is None:
            client = MongoClient(url, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        self.client = client
        self._db = self.client[name]

    @classmethod
    def from_settings(cls, settings: Any) -> MongoDatabase:
        """Build the wrapper from application settings."""
        return cls(settings.DB_URL, settings.DB_NAME, timeout_ms=settings.DB_TIMEOUT_MS)

    def collection(self, name: str) -> Collection:
        """Get a collection by name."""
        return self._db[name]

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def ensure_indexes(self) -> None:
        """
        Create the indexes the API relies on.

        - bootcamps.name: unique (duplicate names are rejected)
        - bootcamps.location: 2dsphere (radius search)
        - courses.bootcamp: lookup by owning bootcamp

        Raises:
            MongoClientError: If the server is unreachable
        """
        try:
            bootcamps = self.collection(BOOTCAMPS)
            bootcamps.create_index([("name", ASCENDING)], unique=True)
            bootcamps.create_index([("location", GEOSPHERE)])
            self.collection(COURSES).create_index([("bootcamp", ASCENDING)])
            logger.info(f"MongoDB indexes ready on database '{self.name}'")
        except PyMongoError as e:
            raise MongoClientError(
                message=f"Failed to prepare database indexes: {e}",
                code="INDEX_INIT_FAILED",
                suggestion="Check DB_URL in your .env file and that MongoDB is running",
            ) from e

    def ping(self) -> bool:
        """Return True when the server answers a ping."""
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def close(self) -> None:
        self.client.close()
        logger.info("MongoDB connection closed")
