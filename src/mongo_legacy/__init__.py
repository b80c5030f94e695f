"""
mongo-legacy - the classic MongoDB driver collection API, async.

This package provides the legacy collection interface (insert,
batch_insert, update, save, remove, ensure_index, ...) over RPC, with:
- Client-side ObjectId assignment, visible on the caller's documents
- Administrative commands (count, drop, validate, deleteIndexes)
- Index management through the system.indexes catalog
- Lazy cursors with chaining (sort, limit, skip)

Example usage:
    from mongo_legacy import MongoClient

    async def main():
        client = MongoClient("https://mongo.do")
        await client.connect()

        users = client["shop"]["users"]

        # Insert documents; _id is assigned in place
        doc = {"name": "Alice", "email": "alice@example.com"}
        await users.insert(doc)
        print(doc["_id"])

        # Indexes
        await users.ensure_index({"email": 1}, {"unique": True})
        print(await users.get_index_info())

        # Count
        result = await users.count({"name": "Alice"})
        if result:
            print(result.value)

        # Find
        user = await users.find_one({"email": "alice@example.com"})
        async for user in users.find({"status": "active"}):
            print(user["name"])

        # Update, save and remove
        await users.update({"_id": doc["_id"]}, {"$set": {"status": "vip"}})
        await users.save(doc)
        await users.remove({"_id": doc["_id"]})

        await client.close()

    import asyncio
    asyncio.run(main())
"""

from __future__ import annotations

__version__ = "0.1.0"

from .client import MongoClient
from .collection import Collection
from .cursor import Cursor
from .database import Database
from .index import FieldName, KeyMapping, TextWeights
from .protocol import Protocol
from .types import (
    ConnectionError,
    DuplicateKeyError,
    Failed,
    IndexSpecWarning,
    MongoError,
    Ok,
    OperationFailure,
    QueryError,
    WriteError,
)

__all__ = [
    # Main classes
    "MongoClient",
    "Database",
    "Collection",
    "Cursor",
    "Protocol",
    # Index specifications
    "FieldName",
    "KeyMapping",
    "TextWeights",
    # Result types
    "Ok",
    "Failed",
    # Exceptions and warnings
    "MongoError",
    "ConnectionError",
    "QueryError",
    "WriteError",
    "DuplicateKeyError",
    "OperationFailure",
    "IndexSpecWarning",
    # Version
    "__version__",
]
