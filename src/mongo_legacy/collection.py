"""
Collection - legacy driver collection operations.

Provides the classic collection API (insert, batch_insert, update, save,
remove, count, validate, ensure_index, ...) on top of the wire protocol.
Writes go straight to the protocol; administrative operations are sent
as commands through the parent database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Sequence, TypeVar

from bson import ObjectId

from . import commands
from .cursor import Cursor
from .index import (
    TextWeights,
    index_name,
    key_specification,
    parse_index_spec,
    to_index_string,
)
from .types import Failed, Ok

if TYPE_CHECKING:
    from .client import MongoClient
    from .database import Database
    from .protocol import Protocol
    from .types import Document, Filter, Projection, Result, WriteOptions

T = TypeVar("T", bound=dict[str, Any])

__all__ = ["Collection", "WRITE_OPTIONS"]

# Options of an index declaration that also apply to the insert carrying it.
WRITE_OPTIONS = ("safe", "w", "fsync", "timeout")


class Collection(Generic[T]):
    """
    MongoDB collection with the legacy driver API.

    Example:
        users = db["users"]

        # Insert (the document receives its _id in place)
        doc = {"name": "Alice"}
        await users.insert(doc)
        print(doc["_id"])

        # Find
        user = await users.find_one({"name": "Alice"})
        async for user in users.find({"status": "active"}):
            print(user)

        # Update and save
        await users.update({"name": "Alice"}, {"$set": {"status": "vip"}})
        user["status"] = "gold"
        await users.save(user)

        # Indexes
        await users.ensure_index({"email": 1}, {"unique": True})
    """

    __slots__ = ("_database", "_client", "_protocol", "_name", "_full_name")

    def __init__(
        self,
        protocol: Protocol,
        database: Database,
        name: str,
    ) -> None:
        """
        Initialize a collection.

        Args:
            protocol: The shared wire protocol.
            database: Parent database instance.
            name: Collection name.
        """
        self._protocol = protocol
        self._database = database
        self._client = database.client
        self._name = name
        self._full_name = database.full_collection_name(name)

    @property
    def name(self) -> str:
        """Get the collection name."""
        return self._name

    @property
    def full_name(self) -> str:
        """Get the full collection name (database.collection)."""
        return self._full_name

    @property
    def database(self) -> Database:
        """Get the parent database."""
        return self._database

    @property
    def client(self) -> MongoClient:
        """Get the client the parent database belongs to."""
        return self._client

    def get_name(self) -> str:
        """Return the collection name, not the full name."""
        return self._name

    def _generate_id(self) -> ObjectId:
        """Generate a unique document ID."""
        return ObjectId()

    # -- commands -----------------------------------------------------------

    async def count(
        self,
        query: Filter | None = None,
        limit: int = 0,
        skip: int = 0,
    ) -> Result[int]:
        """
        Count documents matching the query.

        Args:
            query: Query filter.
            limit: Maximum number of documents to count (0 for no limit).
            skip: Number of matching documents to skip before counting.

        Returns:
            Ok with the count, or Failed if the server did not
            acknowledge the command.
        """
        result = await self._database.command(
            commands.count_command(self._name, query, limit, skip)
        )
        if result.get("ok"):
            return Ok(int(result.get("n", 0)))
        if "errmsg" in result:
            return Failed(result["errmsg"])
        return Failed()

    async def drop(self) -> dict[str, Any]:
        """
        Drop the collection.

        Returns:
            The raw command result.
        """
        return await self._database.command(commands.drop_command(self._name))

    async def validate(
        self,
        full: bool = False,
        scandata: bool = False,
    ) -> Result[dict[str, Any]]:
        """
        Validate the collection on the server.

        Args:
            full: Run a full validation of the data structures.
            scandata: Also scan the collection data.

        Returns:
            Ok with the server's validation report, or Failed if the
            server returned nothing.
        """
        result = await self._database.command(
            commands.validate_command(self._name, full, scandata)
        )
        if result:
            return Ok(result)
        return Failed()

    # -- writes -------------------------------------------------------------

    async def insert(self, document: Document, options: WriteOptions | None = None) -> bool:
        """
        Insert a single document.

        A document without an _id receives one in place.

        Args:
            document: The document to insert.
            options: Write options (w, fsync, timeout, safe).

        Returns:
            True once the insert has been handed to the protocol.
        """
        return await self.batch_insert([document], options)

    async def batch_insert(
        self,
        documents: Sequence[Document],
        options: WriteOptions | None = None,
    ) -> bool:
        """
        Insert several documents in one operation.

        Every document without an _id receives one in place, so callers
        see the assigned ids after the call. Insertion stops at the first
        failing document.

        Args:
            documents: The documents to insert.
            options: Write options (w, fsync, timeout, safe).

        Returns:
            True once the insert has been handed to the protocol.

        Raises:
            DuplicateKeyError: If a document's _id already exists.
            WriteError: If the insert fails.
        """
        for document in documents:
            if document.get("_id") is None:
                document["_id"] = self._generate_id()

        await self._protocol.op_insert(self._full_name, documents, False)

        # TODO: honour the "w" option and return the server's write status
        return True

    async def update(
        self,
        criteria: Filter,
        new_object: Document,
        options: WriteOptions | None = None,
    ) -> Any:
        """
        Update documents matching the criteria.

        Args:
            criteria: Query selecting the documents to update.
            new_object: Replacement document or update operators.
            options: Update flags (upsert, multiple) and write options.

        Returns:
            The protocol's raw response.
        """
        return await self._protocol.op_update(self._full_name, criteria, new_object, options)

    async def save(self, document: Document, options: WriteOptions | None = None) -> bool:
        """
        Update the document if it has an _id, insert it otherwise.

        Upserting on update must be requested through options.

        Args:
            document: The document to save.
            options: Update flags and write options.

        Returns:
            False for an empty document (nothing is sent), True otherwise.
        """
        if not document:
            return False

        if document.get("_id") is not None:
            await self.update({"_id": document["_id"]}, document, options)
            return True

        return await self.insert(document, options)

    async def remove(
        self,
        criteria: Filter | None = None,
        options: WriteOptions | None = None,
    ) -> None:
        """
        Remove documents matching the criteria.

        Args:
            criteria: Query selecting the documents; all documents if empty.
            options: Delete flags (justOne) and write options.
        """
        await self._protocol.op_delete(self._full_name, criteria or {}, options)

    # -- queries ------------------------------------------------------------

    def find(
        self,
        query: Filter | None = None,
        fields: Projection = None,
    ) -> Cursor[T]:
        """
        Find documents matching the query.

        Args:
            query: Query filter.
            fields: Fields to include/exclude.

        Returns:
            Cursor for iterating over results. The query runs on first use.
        """
        return Cursor[T](self._protocol, self._full_name, query, fields)

    async def find_one(
        self,
        query: Filter | None = None,
        fields: Projection = None,
    ) -> T | None:
        """
        Find a single document.

        Returns:
            The first matching document, or None if nothing matches.
        """
        docs = await self.find(query, fields).limit(1).to_list()
        return docs[0] if docs else None

    # -- indexes ------------------------------------------------------------

    @staticmethod
    def to_index_string(keys: Any) -> str | None:
        """Encode index keys as an index name; None (with a warning) if invalid."""
        return to_index_string(keys, stacklevel=4)

    async def ensure_index(
        self,
        keys: Any,
        options: WriteOptions | None = None,
    ) -> bool:
        """
        Create an index unless one with the same name already exists.

        The index declaration is inserted into the database's
        ``system.indexes`` collection.

        Args:
            keys: A field name, a mapping of field to direction, or a
                  mapping with a "weights" entry for a text index.
            options: Index options (unique, sparse, name, ...). The write
                     options among them also apply to the insert.

        Returns:
            True if the declaration was sent, False if keys are invalid.
        """
        spec = parse_index_spec(keys, stacklevel=3)
        if spec is None:
            return False

        options = dict(options or {})
        index: dict[str, Any] = {
            "ns": self._full_name,
            "name": index_name(spec),
            "key": key_specification(spec),
        }
        if isinstance(spec, TextWeights):
            index["weights"] = dict(spec.weights)
        index.update(options)

        insert_options = {
            name: options[name] for name in WRITE_OPTIONS if options.get(name) is not None
        }

        indexes = self._database.indexes_collection()
        return bool(await indexes.insert(index, insert_options))

    async def delete_index(self, keys: Any) -> dict[str, Any] | None:
        """
        Drop the index built over the given keys.

        Returns:
            The raw command result, or None (with a warning) if keys are
            invalid, in which case nothing is sent.
        """
        name = to_index_string(keys, stacklevel=4)
        if name is None:
            return None

        return await self._database.command(
            commands.delete_indexes_command(self._name, name)
        )

    async def delete_indexes(self) -> bool:
        """Drop the database's index catalog collection."""
        result = await self._database.indexes_collection().drop()
        return bool(result.get("ok"))

    async def get_index_info(self) -> list[dict[str, Any]]:
        """Return the index declarations of this collection."""
        return await self._database.indexes_collection().find({"ns": self._full_name}).to_list()

    def __str__(self) -> str:
        return self._full_name

    def __repr__(self) -> str:
        return f"Collection({self._full_name!r})"
