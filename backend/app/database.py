"""
WordLog Backend — MongoDB Connection Management
================================================

What:  The connection manager owning the single Motor client for the process.
Why:   Centralizes all database connection logic in one place.
How:   A MongoConnection is created in the FastAPI lifespan, stored on
       app.state, and handed to the record store per request. The client is
       built lazily on the first ensure_connected() call and reused afterwards.
Who:   Used by route dependencies (app.routes.words) and the health check.

Connection Lifecycle:
    startup   → MongoConnection(settings)        (no network traffic)
    request 1 → ensure_connected()                (build client, ping, index)
    request N → ensure_connected()                (is_connected → no-op)
    shutdown  → close()

    Motor pools sockets internally, so one client serves every concurrent
    request.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import DESCENDING
from pymongo import errors as mongo_errors

from app.config import Settings
from app.exceptions import ConfigurationError, DatabaseConnectionError

logger = logging.getLogger(__name__)

# Sort key for the only query the API runs (newest first)
CREATED_AT_INDEX = [("createdAt", DESCENDING)]
CREATED_AT_INDEX_NAME = "idx_created_at_desc"


class MongoConnection:
    """
    Lifetime-scoped handle on the MongoDB client.

    Guarantees:
        - At most one AsyncIOMotorClient is ever built per instance.
        - The URI is read from settings on the first connection attempt;
          a missing one raises ConfigurationError before any client exists.
        - Connect failures raise DatabaseConnectionError and leave the
          handle disconnected, so the next request tries again.
    """

    def __init__(self, settings: Settings, client_options: Optional[Dict[str, Any]] = None):
        self._settings = settings
        self._client_options = client_options or {}
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        # Guards the slow path only; connected callers never touch it.
        self._connect_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._database is None:
            raise DatabaseConnectionError(message="Database connection has not been established")
        return self._database

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """The collection holding WordObservation documents."""
        return self.database[self._settings.mongodb_collection]

    async def ensure_connected(self) -> None:
        """
        Establish the shared connection unless it already exists.

        Raises:
            ConfigurationError: MONGODB_URI missing or rejected by the driver
            DatabaseConnectionError: MongoDB did not answer the initial ping
        """
        if self.is_connected:
            return

        async with self._connect_lock:
            # Another request may have connected while we waited.
            if self.is_connected:
                return
            await self._connect()

    async def _connect(self) -> None:
        uri = (self._settings.mongodb_uri or "").strip()
        if not uri:
            raise ConfigurationError(message="Missing MONGODB_URI")

        try:
            client = AsyncIOMotorClient(uri, tz_aware=True, **self._client_options)
        except mongo_errors.ConfigurationError as exc:
            raise ConfigurationError(
                message="MONGODB_URI is invalid",
                context={"reason": str(exc)},
            ) from exc

        database = client[self._settings.mongodb_db]
        try:
            await client.admin.command("ping")
            await self._ensure_indexes(database)
        except mongo_errors.PyMongoError as exc:
            client.close()
            logger.error("MongoDB connection failed: %s", str(exc))
            raise DatabaseConnectionError(
                context={"error_type": type(exc).__name__},
            ) from exc

        self._client = client
        self._database = database
        logger.info(
            "Connected to MongoDB (database=%s, collection=%s)",
            self._settings.mongodb_db,
            self._settings.mongodb_collection,
        )

    async def _ensure_indexes(self, database: AsyncIOMotorDatabase) -> None:
        """
        Create the createdAt index used by the newest-first listing.

        Only a lost connection aborts the connect. Anything else (typically
        missing createIndex privileges) is logged and the connection is kept:
        the sort still works, just without the index.
        """
        try:
            await database[self._settings.mongodb_collection].create_index(
                CREATED_AT_INDEX, name=CREATED_AT_INDEX_NAME
            )
        except mongo_errors.ConnectionFailure:
            raise
        except mongo_errors.PyMongoError as exc:
            logger.warning(
                "Could not ensure index %s: %s",
                CREATED_AT_INDEX_NAME,
                str(exc),
            )

    async def ping(self) -> bool:
        """Lightweight liveness probe for the health check."""
        if not self.is_connected:
            return False
        try:
            await self._client.admin.command("ping")
        except mongo_errors.PyMongoError as exc:
            logger.warning("MongoDB ping failed: %s", str(exc))
            return False
        return True

    def close(self) -> None:
        """
        What:  Closes the client and its pooled sockets.
        When:  Called during application shutdown (lifespan handler).
        """
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._database = None


# ── Request Dependency ────────────────────────────────────────────────────
def get_connection(request: Request) -> MongoConnection:
    """
    FastAPI dependency returning the handle created in the lifespan.

    Raises:
        ConfigurationError: the application was started without a lifespan
    """
    connection = getattr(request.app.state, "mongo", None)
    if connection is None:
        raise ConfigurationError(
            message="Database connection handle is not initialized",
            setting=None,
        )
    return connection
