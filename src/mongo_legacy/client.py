"""
MongoClient - entry point of mongo-legacy.

Connects to a MongoDB service over RPC and hands out Database handles
that share one wire protocol.
"""

from __future__ import annotations

import os
from types import TracebackType
from typing import Any

from .database import Database
from .protocol import Protocol
from .types import ConnectionError, MongoError

__all__ = ["MongoClient"]

DEFAULT_URI = "https://mongo.do"
DEFAULT_TIMEOUT = 30.0


class MongoClient:
    """
    MongoDB client.

    Databases can be accessed using either attribute access or subscript
    notation.

    Example:
        # Create client
        client = MongoClient("https://mongo.do")
        await client.connect()

        # Access databases
        db = client["myapp"]
        db = client.myapp

        # Close connection
        await client.close()

        # Or use as async context manager
        async with MongoClient("https://mongo.do") as client:
            db = client["myapp"]
            ...
    """

    __slots__ = ("_uri", "_protocol", "_connected", "_databases", "_options")

    def __init__(
        self,
        uri: str | None = None,
        **options: Any,
    ) -> None:
        """
        Initialize the MongoDB client.

        Args:
            uri: Connection URI (e.g., "https://mongo.do" or "wss://mongo.do/rpc").
                 If not provided, uses MONGO_URL environment variable.
            **options: Additional connection options.
                - timeout: Default timeout for operations (default: 30.0).
        """
        self._uri = uri or os.environ.get("MONGO_URL", DEFAULT_URI)
        self._protocol: Protocol | None = None
        self._connected = False
        self._databases: dict[str, Database] = {}
        self._options = options

    @property
    def uri(self) -> str:
        """Get the connection URI."""
        return self._uri

    @property
    def is_connected(self) -> bool:
        """Check if the client is connected."""
        return self._connected

    @property
    def protocol(self) -> Protocol:
        """Get the wire protocol shared by all handles of this client."""
        self._ensure_connected()
        assert self._protocol is not None
        return self._protocol

    async def connect(self) -> MongoClient:
        """
        Connect to the MongoDB service.

        Returns:
            Self for chaining.

        Raises:
            ConnectionError: If connection fails.
        """
        if self._connected:
            return self

        try:
            from rpc_do import connect

            timeout = self._options.get("timeout", DEFAULT_TIMEOUT)
            rpc = await connect(self._uri, timeout=timeout)
        except ImportError as e:
            raise ConnectionError(
                "rpc-do package is required. Install with: pip install rpc-do"
            ) from e
        except Exception as e:
            raise ConnectionError(f"Failed to connect to {self._uri}: {e}") from e

        self._protocol = Protocol(rpc)
        self._connected = True
        return self

    async def close(self) -> None:
        """Close the connection."""
        if self._protocol is not None:
            await self._protocol.close()
            self._protocol = None
        self._connected = False
        self._databases.clear()

    def _ensure_connected(self) -> None:
        """Ensure the client is connected."""
        if not self._connected or self._protocol is None:
            raise MongoError("Client is not connected. Call connect() first.")

    def __getitem__(self, name: str) -> Database:
        """
        Get a database by name using subscript notation.

        Example:
            db = client["myapp"]
        """
        self._ensure_connected()

        if name not in self._databases:
            self._databases[name] = Database(self._protocol, self, name)  # type: ignore[arg-type]
        return self._databases[name]

    def __getattr__(self, name: str) -> Database:
        """
        Get a database by name using attribute access.

        Example:
            db = client.myapp
        """
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

        return self[name]

    def get_database(self, name: str) -> Database:
        """Get a database by name."""
        return self[name]

    async def list_database_names(self) -> list[str]:
        """
        List all database names.

        Returns:
            List of database names.
        """
        result = await self["admin"].command("listDatabases")
        databases = result.get("databases", [])
        return [db["name"] for db in databases if isinstance(db, dict) and "name" in db]

    async def drop_database(self, name: str) -> None:
        """
        Drop a database.

        Args:
            name: Name of the database to drop.
        """
        await self[name].drop_database()
        self._databases.pop(name, None)

    async def __aenter__(self) -> MongoClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"MongoClient({self._uri!r}, {status})"
