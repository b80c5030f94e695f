"""
Cursor - Async cursor for iterating over query results.

Provides a lazy cursor over the documents of one namespace. Nothing is
sent to the server until the cursor is first consumed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, AsyncIterator, Generic, TypeVar

if TYPE_CHECKING:
    from .protocol import Protocol
    from .types import Filter, Projection, Sort

T = TypeVar("T", bound=dict[str, Any])

__all__ = ["Cursor"]


class Cursor(Generic[T]):
    """
    Async cursor for iterating over query results.

    Modifiers (sort, limit, skip, batch_size, project) must be applied
    before iteration begins; once the query has run they have no effect
    until the cursor is cloned.

    Example:
        async for doc in collection.find({"status": "active"}):
            print(doc)

        # With chaining
        cursor = collection.find({}).sort("created_at", -1).limit(10)
        docs = await cursor.to_list()
    """

    __slots__ = (
        "_protocol",
        "_namespace",
        "_filter",
        "_projection",
        "_sort",
        "_limit",
        "_skip",
        "_batch_size",
        "_results",
        "_exhausted",
        "_position",
    )

    def __init__(
        self,
        protocol: Protocol,
        namespace: str,
        filter: Filter | None = None,
        projection: Projection = None,
    ) -> None:
        """
        Initialize a cursor.

        Args:
            protocol: The wire protocol used to run the query.
            namespace: Fully-qualified collection name.
            filter: Query filter.
            projection: Fields to include/exclude.
        """
        self._protocol = protocol
        self._namespace = namespace
        self._filter: Filter = filter or {}
        self._projection: Projection = projection
        self._sort: Sort = None
        self._limit: int = 0
        self._skip: int = 0
        self._batch_size: int = 100
        self._results: list[T] | None = None
        self._exhausted: bool = False
        self._position: int = 0

    @property
    def namespace(self) -> str:
        """Get the namespace this cursor queries."""
        return self._namespace

    def sort(self, key_or_list: str | list[tuple[str, int]], direction: int = 1) -> Cursor[T]:
        """
        Sort the results.

        Args:
            key_or_list: Field name or list of (field, direction) tuples.
            direction: Sort direction (1 for ascending, -1 for descending).
                       Only used if key_or_list is a string.

        Returns:
            Self for chaining.
        """
        if isinstance(key_or_list, str):
            self._sort = [(key_or_list, direction)]
        else:
            self._sort = key_or_list
        return self

    def limit(self, limit: int) -> Cursor[T]:
        """
        Limit the number of results.

        Args:
            limit: Maximum number of documents to return.

        Returns:
            Self for chaining.
        """
        self._limit = limit
        return self

    def skip(self, skip: int) -> Cursor[T]:
        """
        Skip the first N results.

        Args:
            skip: Number of documents to skip.

        Returns:
            Self for chaining.
        """
        self._skip = skip
        return self

    def batch_size(self, size: int) -> Cursor[T]:
        """Set the batch size for fetching results."""
        self._batch_size = size
        return self

    def project(self, projection: Projection) -> Cursor[T]:
        """Set field projection."""
        self._projection = projection
        return self

    def _fields(self) -> dict[str, Any]:
        if not self._projection:
            return {}
        if isinstance(self._projection, (list, tuple)):
            return {field: 1 for field in self._projection}
        return dict(self._projection)  # type: ignore[arg-type]

    async def _execute(self) -> list[T]:
        """
        Execute the query and fetch results.

        Returns:
            List of documents matching the query.
        """
        if self._results is not None:
            return self._results

        options: dict[str, Any] = {"batchSize": self._batch_size}

        if self._sort:
            options["sort"] = self._sort

        if self._limit > 0:
            options["limit"] = self._limit

        if self._skip > 0:
            options["skip"] = self._skip

        result = await self._protocol.op_query(
            self._namespace,
            self._filter,
            self._fields(),
            options,
        )

        self._results = result  # type: ignore[assignment]
        return self._results  # type: ignore[return-value]

    async def to_list(self, length: int | None = None) -> list[T]:
        """
        Convert cursor to a list.

        Args:
            length: Maximum number of documents to return.
                    If None, returns all documents.

        Returns:
            List of documents.
        """
        results = await self._execute()
        if length is not None:
            return results[:length]
        return results

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        """
        Get the next document.

        Raises:
            StopAsyncIteration: When all documents have been iterated.
        """
        if self._results is None:
            await self._execute()

        assert self._results is not None

        if self._position >= len(self._results):
            self._exhausted = True
            raise StopAsyncIteration

        doc = self._results[self._position]
        self._position += 1
        return doc

    async def next(self) -> T:
        """Get the next document."""
        return await self.__anext__()

    def clone(self) -> Cursor[T]:
        """
        Clone this cursor.

        Returns:
            A new, unexecuted cursor with the same query parameters.
        """
        cursor = Cursor[T](
            self._protocol,
            self._namespace,
            self._filter,
            self._projection,
        )
        cursor._sort = self._sort
        cursor._limit = self._limit
        cursor._skip = self._skip
        cursor._batch_size = self._batch_size
        return cursor

    @property
    def alive(self) -> bool:
        """Check if the cursor can still yield documents."""
        return not self._exhausted

    def rewind(self) -> Cursor[T]:
        """
        Rewind the cursor to the beginning.

        The next read runs the query again.

        Returns:
            Self for chaining.
        """
        self._results = None
        self._position = 0
        self._exhausted = False
        return self

    def __repr__(self) -> str:
        return f"Cursor({self._namespace!r}, {dict(self._filter)!r})"
