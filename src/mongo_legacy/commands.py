"""
Command documents for collection-level administrative commands.

A command document names its verb in the first key, mapped to the
simple collection name; the remaining keys are the command parameters.
"""

from __future__ import annotations

from typing import Any

from .types import Filter

__all__ = [
    "build_command",
    "count_command",
    "delete_indexes_command",
    "drop_command",
    "validate_command",
]


def build_command(verb: str, target: Any, **params: Any) -> dict[str, Any]:
    """
    Build a command document.

    Args:
        verb: Command name, e.g. "count".
        target: Value of the verb key, usually the collection name.
        **params: Command parameters, kept in call order.

    Returns:
        The command document with the verb first.
    """
    command: dict[str, Any] = {verb: target}
    command.update(params)
    return command


def count_command(
    name: str,
    query: Filter | None = None,
    limit: int = 0,
    skip: int = 0,
) -> dict[str, Any]:
    return build_command(
        "count",
        name,
        query=dict(query) if query else {},
        limit=limit,
        skip=skip,
    )


def drop_command(name: str) -> dict[str, Any]:
    return build_command("drop", name)


def validate_command(
    name: str,
    full: bool = False,
    scandata: bool = False,
) -> dict[str, Any]:
    return build_command("validate", name, full=full, scandata=scandata)


def delete_indexes_command(name: str, index: str) -> dict[str, Any]:
    return build_command("deleteIndexes", name, index=index)
