"""Database connectivity layer for personstore."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timezone
from typing import AsyncIterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from personstore.core.config import Settings, get_settings
from personstore.core.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "test"


class DatabaseManager:
    """Owns the MongoDB client for one open / use / close lifecycle."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.mongodb: Optional[AsyncIOMotorClient] = None

    async def initialize(self) -> None:
        """Connect and verify the endpoint answers a ping."""

        uri = self.settings.require_mongo_uri()
        logger.info("Connecting to MongoDB")

        client: Optional[AsyncIOMotorClient] = None
        try:
            # the constructor parses the URI; a malformed one raises ValueError
            client = AsyncIOMotorClient(
                uri,
                serverSelectionTimeoutMS=self.settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
                tz_aware=True,
                tzinfo=timezone.utc,
            )
            await client.admin.command("ping")
        except (PyMongoError, ValueError) as exc:
            if client is not None:
                client.close()
            raise DatabaseConnectionError(f"MongoDB connection error: {exc}") from exc

        self.mongodb = client
        logger.info("MongoDB connected")

    def database_name(self) -> str:
        if self.settings.MONGO_DATABASE:
            return self.settings.MONGO_DATABASE
        if self.mongodb is not None:
            default = self.mongodb.get_default_database(default=DEFAULT_DATABASE)
            return default.name
        return DEFAULT_DATABASE

    def collection(self) -> AsyncIOMotorCollection:
        if self.mongodb is None:
            raise DatabaseConnectionError("Database manager is not initialized")
        return self.mongodb[self.database_name()][self.settings.MONGO_COLLECTION]

    async def close(self) -> None:
        """Tear down the connection; safe to call more than once."""

        if self.mongodb is not None:
            self.mongodb.close()
            self.mongodb = None
            logger.info("MongoDB connection closed")

    @asynccontextmanager
    async def connect(self) -> AsyncIterator["DatabaseManager"]:
        await self.initialize()
        try:
            yield self
        finally:
            await self.close()
