"""
MongoDB connection for the journal collections.

Motor clients are bound to the event loop that created them, so the manager
keeps one client per loop and rebuilds it when the loop changes (tests,
reloads). ``init_beanie`` binds the document models at startup.

Environment Variables:
    MONGODB_URI: MongoDB URI (default: mongodb://localhost:27017)
    MONGODB_DATABASE: Database name (default: journal_sync)
    MONGODB_MAX_POOL_SIZE: Connection pool size (default: 50)
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: Server selection timeout (default: 10000)
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import UTC
from typing import Any, Final

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from db.models import ALL_DOCUMENT_MODELS

logger = logging.getLogger(__name__)

DEFAULT_MONGO_URI: Final[str] = "mongodb://localhost:27017"
DEFAULT_DATABASE: Final[str] = "journal_sync"


def _get_mongo_uri() -> str:
    return os.getenv("MONGODB_URI", "").strip() or DEFAULT_MONGO_URI


def client_options(mongo_uri: str) -> dict[str, Any]:
    """Motor client keyword arguments for ``mongo_uri``."""
    options: dict[str, Any] = {
        "tz_aware": True,
        "tzinfo": UTC,
        "maxPoolSize": int(os.getenv("MONGODB_MAX_POOL_SIZE", "50")),
        "serverSelectionTimeoutMS": int(
            os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "10000"),
        ),
        "retryWrites": True,
        "appname": "JournalSync",
    }
    # Atlas clusters need the certifi CA bundle
    if mongo_uri.startswith("mongodb+srv://"):
        options.update(tls=True, tlsCAFile=certifi.where())
    return options


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class DatabaseManager:
    def __init__(self) -> None:
        self._client: AsyncIOMotorClient | None = None
        self._db: AsyncIOMotorDatabase | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """The journal database, connecting on first use in this loop."""
        loop = _running_loop()
        if self._client is not None and self._loop is not loop:
            logger.info("Event loop changed, reconnecting MongoDB client")
            self._close()

        if self._db is None:
            mongo_uri = _get_mongo_uri()
            self._client = AsyncIOMotorClient(mongo_uri, **client_options(mongo_uri))
            self._db = self._client[os.getenv("MONGODB_DATABASE", DEFAULT_DATABASE)]
            self._loop = loop
            logger.info("MongoDB client initialized for database %s", self._db.name)
        return self._db

    async def init_beanie(self) -> None:
        await init_beanie(database=self.db, document_models=ALL_DOCUMENT_MODELS)
        logger.info(
            "Beanie ODM initialized with %d document models",
            len(ALL_DOCUMENT_MODELS),
        )

    def _close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None
        self._loop = None

    async def cleanup_connections(self) -> None:
        """Close the client; the next ``db`` access reconnects."""
        if self._client is None:
            return
        logger.info("Closing MongoDB client connections")
        self._close()


db_manager = DatabaseManager()
