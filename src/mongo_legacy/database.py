"""
Database - MongoDB database operations.

Provides the database handle: collection access, command execution and
the ``system.indexes`` catalog used by collection index management.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from .collection import Collection

if TYPE_CHECKING:
    from .client import MongoClient
    from .protocol import Protocol

T = TypeVar("T", bound=dict[str, Any])

__all__ = ["Database", "INDEXES_COLLECTION"]

INDEXES_COLLECTION = "system.indexes"


class Database:
    """
    MongoDB database handle.

    Collections can be accessed using either attribute access or
    subscript notation. Handles are cached, so the same name always
    yields the same Collection.

    Example:
        db = client["myapp"]

        # Access collections
        users = db.users
        orders = db["orders"]

        # Run a command
        result = await db.command("ping")

        # Drop database
        await db.drop_database()
    """

    __slots__ = ("_protocol", "_client", "_name", "_collections")

    def __init__(
        self,
        protocol: Protocol,
        client: MongoClient,
        name: str,
    ) -> None:
        """
        Initialize a database.

        Args:
            protocol: The shared wire protocol.
            client: Parent MongoClient instance.
            name: Database name.
        """
        self._protocol = protocol
        self._client = client
        self._name = name
        self._collections: dict[str, Collection[Any]] = {}

    @property
    def name(self) -> str:
        """Get the database name."""
        return self._name

    @property
    def client(self) -> MongoClient:
        """Get the parent client."""
        return self._client

    def full_collection_name(self, name: str) -> str:
        """Return the namespace of a collection in this database."""
        return f"{self._name}.{name}"

    def __getitem__(self, name: str) -> Collection[Any]:
        """
        Get a collection by name using subscript notation.

        Example:
            users = db["users"]
        """
        if name not in self._collections:
            self._collections[name] = Collection(self._protocol, self, name)
        return self._collections[name]

    def __getattr__(self, name: str) -> Collection[Any]:
        """
        Get a collection by name using attribute access.

        Example:
            users = db.users
        """
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

        return self[name]

    def get_collection(
        self,
        name: str,
        document_class: type[T] | None = None,
    ) -> Collection[T]:
        """
        Get a typed collection.

        Args:
            name: Collection name.
            document_class: Optional document type for type hints.

        Returns:
            Typed Collection instance.
        """
        return self[name]  # type: ignore[return-value]

    def indexes_collection(self) -> Collection[Any]:
        """Get the collection holding this database's index declarations."""
        return self[INDEXES_COLLECTION]

    async def command(
        self,
        command: str | dict[str, Any],
        value: Any = 1,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Run a database command.

        Args:
            command: Command name or command document.
            value: Command value (default 1).
            **kwargs: Additional command options.

        Returns:
            Command result.
        """
        if isinstance(command, str):
            cmd = {command: value, **kwargs}
        else:
            cmd = command

        return await self._protocol.op_command(self._name, cmd)

    async def drop_collection(self, name: str) -> dict[str, Any]:
        """
        Drop a collection.

        Args:
            name: Name of the collection to drop.
        """
        result = await self[name].drop()
        self._collections.pop(name, None)
        return result

    async def drop_database(self) -> dict[str, Any]:
        """Drop the database."""
        result = await self.command("dropDatabase")
        self._collections.clear()
        return result

    def __repr__(self) -> str:
        return f"Database({self._name!r})"
