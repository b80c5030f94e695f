"""
Pytest fixtures for mongo-legacy tests.

Provides a mocked RPC client implementing the legacy wire operations
in memory, and client/database/collection fixtures built on it. Every
RPC call is recorded so tests can assert what reached the transport.
"""

from __future__ import annotations

import sys
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


class MockRpcMongo:
    """Mock for the RPC mongo namespace."""

    def __init__(self) -> None:
        self._data: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _get_collection_data(self, namespace: str) -> list[dict[str, Any]]:
        """Get or create collection data."""
        return self._data.setdefault(namespace, [])

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        """Arguments of every recorded call to one RPC method."""
        return [args for name, args in self.calls if name == method]

    async def opInsert(
        self,
        namespace: str,
        documents: list[dict[str, Any]],
        flags: dict[str, Any],
    ) -> dict[str, Any]:
        """Mock opInsert."""
        self.calls.append(("opInsert", (namespace, documents, flags)))
        data = self._get_collection_data(namespace)
        for document in documents:
            for doc in data:
                if doc.get("_id") == document.get("_id"):
                    return {"error": True, "message": "E11000 duplicate key error", "code": 11000}
            data.append(dict(document))
        return {"ok": 1}

    async def opUpdate(
        self,
        namespace: str,
        criteria: dict[str, Any],
        new_object: dict[str, Any],
        options: dict[str, Any],
    ) -> dict[str, Any]:
        """Mock opUpdate."""
        self.calls.append(("opUpdate", (namespace, criteria, new_object, options)))
        data = self._get_collection_data(namespace)
        matched = 0

        for i, doc in enumerate(data):
            if self._matches(doc, criteria):
                matched += 1
                data[i] = self._apply_update(doc, new_object)
                if not options.get("multiple"):
                    break

        if matched == 0 and options.get("upsert"):
            new_doc = self._apply_update(dict(criteria), new_object)
            data.append(new_doc)

        return {"ok": 1, "n": matched}

    async def opDelete(
        self,
        namespace: str,
        criteria: dict[str, Any],
        options: dict[str, Any],
    ) -> dict[str, Any]:
        """Mock opDelete."""
        self.calls.append(("opDelete", (namespace, criteria, options)))
        data = self._get_collection_data(namespace)
        kept = []
        removed = 0
        for doc in data:
            if self._matches(doc, criteria) and not (options.get("justOne") and removed):
                removed += 1
            else:
                kept.append(doc)
        self._data[namespace] = kept
        return {"ok": 1, "n": removed}

    async def opQuery(
        self,
        namespace: str,
        query: dict[str, Any],
        fields: dict[str, Any],
        options: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Mock opQuery."""
        self.calls.append(("opQuery", (namespace, query, fields, options)))
        data = self._get_collection_data(namespace)
        results = [doc for doc in data if self._matches(doc, query)]

        if fields:
            results = [self._project(doc, fields) for doc in results]

        sort = options.get("sort")
        if sort:
            for field, direction in reversed(sort):
                results.sort(key=lambda x: x.get(field, ""), reverse=(direction == -1))

        skip = options.get("skip", 0)
        if skip:
            results = results[skip:]

        limit = options.get("limit", 0)
        if limit:
            results = results[:limit]

        return results

    async def command(
        self,
        database: str,
        command: dict[str, Any],
    ) -> dict[str, Any]:
        """Mock command."""
        self.calls.append(("command", (database, command)))
        verb = next(iter(command))
        target = f"{database}.{command[verb]}"

        if verb == "count":
            data = self._get_collection_data(target)
            matching = [doc for doc in data if self._matches(doc, command.get("query", {}))]
            matching = matching[command.get("skip", 0):]
            if command.get("limit"):
                matching = matching[: command["limit"]]
            return {"n": float(len(matching)), "ok": 1.0}

        if verb == "drop":
            if self._data.pop(target, None) is None:
                return {"ok": 0.0, "errmsg": "ns not found"}
            return {"ns": target, "ok": 1.0}

        if verb == "validate":
            return {"ns": target, "valid": True, "full": command.get("full"), "ok": 1.0}

        if verb == "deleteIndexes":
            catalog = self._get_collection_data(f"{database}.system.indexes")
            before = len(catalog)
            self._data[f"{database}.system.indexes"] = [
                doc
                for doc in catalog
                if not (doc.get("ns") == target and doc.get("name") == command.get("index"))
            ]
            return {"nIndexesWas": float(before), "ok": 1.0}

        if verb == "listDatabases":
            names = sorted({ns.split(".", 1)[0] for ns in self._data})
            return {"databases": [{"name": name} for name in names], "ok": 1.0}

        if verb == "dropDatabase":
            for ns in [ns for ns in self._data if ns.startswith(f"{database}.")]:
                del self._data[ns]
            return {"dropped": database, "ok": 1.0}

        return {"ok": 1.0}

    def _matches(self, doc: dict[str, Any], filter: dict[str, Any]) -> bool:
        """Check if document matches filter."""
        if not filter:
            return True

        for key, value in filter.items():
            doc_value = doc.get(key)

            if isinstance(value, dict) and value and next(iter(value)).startswith("$"):
                for op, op_value in value.items():
                    if op == "$eq" and doc_value != op_value:
                        return False
                    if op == "$ne" and doc_value == op_value:
                        return False
                    if op == "$gt" and (doc_value is None or doc_value <= op_value):
                        return False
                    if op == "$lt" and (doc_value is None or doc_value >= op_value):
                        return False
                    if op == "$in" and doc_value not in op_value:
                        return False
            elif doc_value != value:
                return False

        return True

    def _apply_update(self, doc: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
        """Apply update operators, or replace the document keeping its _id."""
        if not any(key.startswith("$") for key in update):
            replacement = dict(update)
            if "_id" in doc:
                replacement["_id"] = doc["_id"]
            return replacement

        for op, fields in update.items():
            if op == "$set":
                doc.update(fields)
            elif op == "$unset":
                for key in fields:
                    doc.pop(key, None)
            elif op == "$inc":
                for key, value in fields.items():
                    doc[key] = doc.get(key, 0) + value
        return doc

    def _project(
        self,
        doc: dict[str, Any],
        projection: dict[str, int],
    ) -> dict[str, Any]:
        """Apply projection to document."""
        include_mode = any(v == 1 for v in projection.values() if v != 0)

        if include_mode:
            result = {}
            for key, include in projection.items():
                if include and key in doc:
                    result[key] = doc[key]
            if "_id" in doc and projection.get("_id", 1) != 0:
                result["_id"] = doc["_id"]
            return result

        return {k: v for k, v in doc.items() if projection.get(k, 1) != 0}


class MockRpcClient:
    """Mock RPC client for testing."""

    def __init__(self) -> None:
        self.mongo = MockRpcMongo()
        self._closed = False

    async def close(self) -> None:
        """Close the mock client."""
        self._closed = True


@pytest.fixture
def mock_rpc() -> MockRpcClient:
    """Create a mock RPC client."""
    return MockRpcClient()


@pytest.fixture
def mock_connect(mock_rpc: MockRpcClient, monkeypatch: pytest.MonkeyPatch):
    """Mock the rpc_do.connect function."""
    mock_rpc_do = MagicMock()
    mock_rpc_do.connect = AsyncMock(return_value=mock_rpc)

    monkeypatch.setitem(sys.modules, "rpc_do", mock_rpc_do)

    return mock_rpc_do


@pytest.fixture
async def client(mock_connect, mock_rpc: MockRpcClient):
    """Create a connected MongoClient."""
    from mongo_legacy import MongoClient

    client = MongoClient("https://test.mongo.do")
    await client.connect()
    return client


@pytest.fixture
async def database(client):
    """Create a database."""
    return client["shop"]


@pytest.fixture
async def collection(database):
    """Create a collection."""
    return database["users"]
