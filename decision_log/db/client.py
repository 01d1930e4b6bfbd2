"""libSQL database client wrapper."""

import logging
import sqlite3
from typing import Any

from libsql_client import Client, LibsqlError, ResultSet, create_client

from decision_log.config import settings
from decision_log.errors import StoreError

logger = logging.getLogger(__name__)


class DatabaseClient:
    """Wrapper for the libSQL async client.

    Supports both remote libSQL servers (with auth token) and local
    SQLite files. Driver failures are re-raised as StoreError so callers
    never depend on driver exception types.
    """

    def __init__(
        self,
        url: str | None = None,
        auth_token: str | None = None,
    ):
        """Initialize client with connection parameters.

        Args:
            url: Database URL. Defaults to settings.
            auth_token: Auth token for remote libSQL. Defaults to settings.
        """
        self.url = url or settings.database_url
        self.auth_token = auth_token or settings.database_auth_token
        self._client: Client | None = None

    async def connect(self) -> None:
        """Establish database connection."""
        if self._client is not None:
            return

        if self.auth_token and self.url.startswith(("libsql://", "https://")):
            self._client = create_client(url=self.url, auth_token=self.auth_token)
        else:
            self._client = create_client(url=self.url)

        logger.info(f"Connected to database: {self.url}")

    async def execute(
        self,
        sql: str,
        params: list[Any] | None = None,
    ) -> ResultSet:
        """Execute a single SQL statement.

        A single statement is atomic: field values and derived index
        columns written by one statement commit together or not at all.

        Args:
            sql: SQL query with ? placeholders
            params: Query parameters

        Returns:
            ResultSet with rows and metadata

        Raises:
            StoreError: If the driver reports a failure
        """
        if not self._client:
            msg = "Not connected. Call connect() first."
            raise RuntimeError(msg)
        try:
            return await self._client.execute(sql, params or [])
        except (LibsqlError, sqlite3.Error) as e:
            logger.error(f"Statement failed: {e}", exc_info=True)
            raise StoreError(str(e)) from e

    async def close(self) -> None:
        """Close the database connection."""
        if self._client:
            await self._client.close()
            self._client = None
            logger.info("Database connection closed")

    async def is_healthy(self) -> bool:
        """Check if database connection is healthy."""
        try:
            if not self._client:
                return False
            result = await self._client.execute("SELECT 1")
            return len(result.rows) == 1
        except Exception:
            return False
