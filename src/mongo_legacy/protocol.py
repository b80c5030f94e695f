"""
Protocol - wire operations over RPC.

Wraps the RPC client's ``mongo`` namespace with the legacy wire
operations (insert, update, delete, query, command). Every operation
addresses its target by fully-qualified namespace ("db.collection").
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from .types import (
    DuplicateKeyError,
    Filter,
    MongoError,
    OperationFailure,
    QueryError,
    WriteError,
    WriteOptions,
)

if TYPE_CHECKING:
    from rpc_do import RpcClient

    from .types import Document

__all__ = ["Protocol"]

logger = logging.getLogger(__name__)


def _raise_write_error(result: Any, default: str) -> None:
    if isinstance(result, dict) and result.get("error"):
        error_msg = result.get("message", default)
        if "duplicate" in error_msg.lower() or "E11000" in error_msg:
            raise DuplicateKeyError(error_msg, result.get("code"))
        raise WriteError(error_msg, result.get("code"))


class Protocol:
    """
    Legacy wire operations backed by an RPC client.

    The protocol is shared by every database and collection handle of a
    client. It does not inspect acknowledgement options: whether a write
    waits for the server is up to the RPC service.
    """

    __slots__ = ("_rpc",)

    def __init__(self, rpc: RpcClient) -> None:
        """
        Initialize the protocol.

        Args:
            rpc: The connected RPC client.
        """
        self._rpc = rpc

    async def op_insert(
        self,
        namespace: str,
        documents: Sequence[Document],
        continue_on_error: bool = False,
    ) -> Any:
        """
        Insert documents into a namespace.

        Args:
            namespace: Fully-qualified collection name.
            documents: Documents to insert, each already carrying an _id.
            continue_on_error: If False, stop at the first failing document.

        Raises:
            DuplicateKeyError: If a document's _id already exists.
            WriteError: If the insert fails.
        """
        logger.debug("opInsert %s (%d documents)", namespace, len(documents))
        try:
            result = await self._rpc.mongo.opInsert(
                namespace,
                list(documents),
                {"continueOnError": continue_on_error},
            )
        except MongoError:
            raise
        except Exception as e:
            raise WriteError(str(e)) from e

        _raise_write_error(result, "Insert failed")
        return result

    async def op_update(
        self,
        namespace: str,
        criteria: Filter,
        new_object: Document,
        options: WriteOptions | None = None,
    ) -> Any:
        """
        Update documents in a namespace.

        Args:
            namespace: Fully-qualified collection name.
            criteria: Query selecting the documents to update.
            new_object: Replacement document or update operators.
            options: Update flags (upsert, multiple) and write options.

        Raises:
            WriteError: If the update fails.
        """
        logger.debug("opUpdate %s", namespace)
        try:
            result = await self._rpc.mongo.opUpdate(
                namespace,
                dict(criteria),
                dict(new_object),
                dict(options or {}),
            )
        except MongoError:
            raise
        except Exception as e:
            raise WriteError(str(e)) from e

        _raise_write_error(result, "Update failed")
        return result

    async def op_delete(
        self,
        namespace: str,
        criteria: Filter,
        options: WriteOptions | None = None,
    ) -> Any:
        """
        Delete documents from a namespace.

        Raises:
            WriteError: If the delete fails.
        """
        logger.debug("opDelete %s", namespace)
        try:
            result = await self._rpc.mongo.opDelete(
                namespace,
                dict(criteria),
                dict(options or {}),
            )
        except MongoError:
            raise
        except Exception as e:
            raise WriteError(str(e)) from e

        _raise_write_error(result, "Delete failed")
        return result

    async def op_query(
        self,
        namespace: str,
        query: Filter,
        fields: Filter | None = None,
        options: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Run a query against a namespace.

        Args:
            namespace: Fully-qualified collection name.
            query: Query filter.
            fields: Field projection.
            options: Query modifiers (sort, skip, limit, batchSize).

        Returns:
            The matching documents.

        Raises:
            QueryError: If the query fails.
        """
        logger.debug("opQuery %s %r", namespace, options)
        try:
            result = await self._rpc.mongo.opQuery(
                namespace,
                dict(query),
                dict(fields or {}),
                options or {},
            )
        except MongoError:
            raise
        except Exception as e:
            raise QueryError(str(e)) from e

        if isinstance(result, dict) and result.get("error"):
            raise QueryError(result.get("message", "Query failed"), result.get("code"))
        return result if isinstance(result, list) else []

    async def op_command(self, database: str, command: dict[str, Any]) -> dict[str, Any]:
        """
        Run a command against a database.

        Args:
            database: Database name.
            command: Command document, verb first.

        Returns:
            The command result. An empty dict if the service returned
            something other than a document.

        Raises:
            OperationFailure: If the RPC call itself fails.
        """
        logger.debug("command %s.%s", database, next(iter(command), ""))
        try:
            result = await self._rpc.mongo.command(database, command)
        except MongoError:
            raise
        except Exception as e:
            raise OperationFailure(str(e)) from e

        return result if isinstance(result, dict) else {}

    async def close(self) -> None:
        """Close the underlying RPC connection."""
        await self._rpc.close()
