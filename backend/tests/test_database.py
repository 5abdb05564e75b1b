"""
WordLog Backend — Connection Manager Unit Tests
================================================

What:  Tests for MongoConnection.ensure_connected() and friends.
How:   AsyncIOMotorClient is patched in app.database, so no socket is opened.

What we test:
    ✅ Connect step runs once, even under concurrent first calls
    ✅ Missing URI fails before a client is built
    ✅ Driver connect failures become DatabaseConnectionError
    ✅ close() and the health ping
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo import errors as mongo_errors

from app.config import Settings
from app.database import CREATED_AT_INDEX, MongoConnection
from app.exceptions import ConfigurationError, DatabaseConnectionError


def make_client(ping_side_effect=None):
    """A MagicMock shaped like AsyncIOMotorClient → database → collection."""
    collection = MagicMock()
    collection.create_index = AsyncMock(return_value="idx_created_at_desc")
    database = MagicMock()
    database.__getitem__.return_value = collection
    client = MagicMock()
    client.__getitem__.return_value = database
    client.admin.command = AsyncMock(side_effect=ping_side_effect, return_value={"ok": 1})
    return client


class TestEnsureConnected:

    @pytest.mark.asyncio
    async def test_connects_once(self, test_settings):
        client = make_client()
        with patch("app.database.AsyncIOMotorClient", return_value=client) as factory:
            connection = MongoConnection(test_settings)
            await connection.ensure_connected()
            await connection.ensure_connected()

        factory.assert_called_once_with("mongodb://localhost:27017", tz_aware=True)
        client.admin.command.assert_awaited_once_with("ping")
        assert connection.is_connected

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_connect_once(self, test_settings):
        client = make_client()
        with patch("app.database.AsyncIOMotorClient", return_value=client) as factory:
            connection = MongoConnection(test_settings)
            await asyncio.gather(*(connection.ensure_connected() for _ in range(5)))

        factory.assert_called_once()
        client.admin.command.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_creates_created_at_index(self, test_settings):
        client = make_client()
        with patch("app.database.AsyncIOMotorClient", return_value=client):
            connection = MongoConnection(test_settings)
            await connection.ensure_connected()

        client.__getitem__.assert_called_with("wordlog_test")
        collection = connection.collection
        collection.create_index.assert_awaited_once()
        assert collection.create_index.await_args.args[0] == CREATED_AT_INDEX

    @pytest.mark.asyncio
    @pytest.mark.parametrize("uri", [None, "", "   "])
    async def test_missing_uri(self, uri):
        settings = Settings(mongodb_uri=uri)
        with patch("app.database.AsyncIOMotorClient") as factory:
            connection = MongoConnection(settings)
            with pytest.raises(ConfigurationError) as exc_info:
                await connection.ensure_connected()

        factory.assert_not_called()
        assert exc_info.value.setting == "MONGODB_URI"
        assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_invalid_uri(self):
        settings = Settings(mongodb_uri="not-a-mongo-uri")
        with patch(
            "app.database.AsyncIOMotorClient",
            side_effect=mongo_errors.InvalidURI("Invalid URI scheme"),
        ):
            connection = MongoConnection(settings)
            with pytest.raises(ConfigurationError):
                await connection.ensure_connected()

    @pytest.mark.asyncio
    async def test_unreachable_server(self, test_settings):
        failing = make_client(ping_side_effect=mongo_errors.ServerSelectionTimeoutError("timed out"))
        with patch("app.database.AsyncIOMotorClient", return_value=failing):
            connection = MongoConnection(test_settings)
            with pytest.raises(DatabaseConnectionError) as exc_info:
                await connection.ensure_connected()

        assert isinstance(exc_info.value.__cause__, mongo_errors.ServerSelectionTimeoutError)
        failing.close.assert_called_once()
        assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_index_privilege_error_keeps_connection(self, test_settings):
        client = make_client()
        client[""][""].create_index.side_effect = mongo_errors.OperationFailure(
            "not authorized to execute command createIndexes"
        )
        with patch("app.database.AsyncIOMotorClient", return_value=client) as factory:
            connection = MongoConnection(test_settings)
            await connection.ensure_connected()
            await connection.ensure_connected()

        factory.assert_called_once()
        client.close.assert_not_called()
        assert connection.is_connected

    @pytest.mark.asyncio
    async def test_connection_lost_during_index_creation(self, test_settings):
        client = make_client()
        client[""][""].create_index.side_effect = mongo_errors.AutoReconnect("lost")
        with patch("app.database.AsyncIOMotorClient", return_value=client):
            connection = MongoConnection(test_settings)
            with pytest.raises(DatabaseConnectionError):
                await connection.ensure_connected()

        client.close.assert_called_once()
        assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_reconnects_after_failure(self, test_settings):
        failing = make_client(ping_side_effect=mongo_errors.ConnectionFailure("refused"))
        healthy = make_client()
        with patch("app.database.AsyncIOMotorClient", side_effect=[failing, healthy]) as factory:
            connection = MongoConnection(test_settings)
            with pytest.raises(DatabaseConnectionError):
                await connection.ensure_connected()
            await connection.ensure_connected()

        assert factory.call_count == 2
        assert connection.is_connected


class TestHandle:

    def test_collection_requires_connection(self, test_settings):
        connection = MongoConnection(test_settings)
        with pytest.raises(DatabaseConnectionError):
            connection.collection

    @pytest.mark.asyncio
    async def test_close(self, test_settings):
        client = make_client()
        with patch("app.database.AsyncIOMotorClient", return_value=client):
            connection = MongoConnection(test_settings)
            await connection.ensure_connected()

        connection.close()
        connection.close()

        client.close.assert_called_once()
        assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_ping(self, test_settings):
        client = make_client()
        with patch("app.database.AsyncIOMotorClient", return_value=client):
            connection = MongoConnection(test_settings)
            assert await connection.ping() is False
            await connection.ensure_connected()
            assert await connection.ping() is True

            client.admin.command.side_effect = mongo_errors.AutoReconnect("lost")
            assert await connection.ping() is False
