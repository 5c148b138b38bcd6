"""
MongoDB Logging Handler for storing application logs in MongoDB.

Sync runs are long and unattended; mirroring their log lines into the
``server_logs`` collection lets operators read them without shell access.
"""

import asyncio
import contextlib
import logging
from datetime import UTC, datetime
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

LOG_RETENTION_SECONDS = 30 * 24 * 60 * 60


class MongoDBHandler(logging.Handler):
    """Logging handler that writes log records to MongoDB."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        collection_name: str = "server_logs",
        level: int = logging.INFO,
    ):
        super().__init__(level)
        self.collection = db[collection_name]
        self._setup_complete = False
        self._pending: set[asyncio.Task] = set()

    async def setup_indexes(self) -> None:
        """Create indexes for the logs collection."""
        if self._setup_complete:
            return

        try:
            await self.collection.create_index("level")
            # TTL index to auto-delete logs older than 30 days
            await self.collection.create_index(
                "timestamp",
                expireAfterSeconds=LOG_RETENTION_SECONDS,
            )
            self._setup_complete = True
        except Exception as e:
            # Don't fail startup if index creation fails
            logging.getLogger(__name__).warning(
                "Could not create log indexes: %s",
                e,
            )

    def emit(self, record: logging.LogRecord) -> None:
        # Records from the driver itself would recurse through this handler
        if record.name.startswith(("pymongo", "motor")):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (startup, worker threads)
            return
        try:
            log_entry = self._format_log_entry(record)
        except Exception:
            self.handleError(record)
            return

        task = loop.create_task(self._async_emit(log_entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _async_emit(self, log_entry: dict[str, Any]) -> None:
        with contextlib.suppress(Exception):
            await self.collection.insert_one(log_entry)

    def _format_log_entry(self, record: logging.LogRecord) -> dict[str, Any]:
        log_entry = {
            "timestamp": datetime.now(UTC),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "funcName": record.funcName,
        }

        if record.exc_info:
            formatter = self.formatter or logging.Formatter()
            log_entry["exc_info"] = formatter.formatException(record.exc_info)

        return log_entry
