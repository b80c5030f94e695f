"""
Index key specifications and index naming.

Index names are used as lookup keys in the server's index catalog, so
the encoding here must stay stable: ensuring the same keys twice has to
produce the same name, or the server creates a duplicate index.

Example:
    to_index_string("address.city")         # "address_city_1"
    to_index_string({"age": 1, "name": -1}) # "age_1_name_-1"
    to_index_string({"weights": {"title": 10, "body": 5}})
                                            # "title_text_body_text"
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Mapping

from .types import IndexSpecWarning

__all__ = [
    "FieldName",
    "IndexSpec",
    "KeyMapping",
    "TextWeights",
    "index_name",
    "key_specification",
    "parse_index_spec",
    "to_index_string",
]


@dataclass(frozen=True)
class FieldName:
    """A single ascending field, given as a bare (possibly dotted) name."""

    name: str


@dataclass(frozen=True)
class KeyMapping:
    """Ordered field -> direction (or index type) mapping."""

    keys: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TextWeights:
    """Text index declared through its field weights."""

    weights: dict[str, Any] = field(default_factory=dict)


IndexSpec = FieldName | KeyMapping | TextWeights


def parse_index_spec(keys: Any, stacklevel: int = 2) -> IndexSpec | None:
    """
    Resolve caller-supplied index keys into an IndexSpec.

    Accepts a field name, a mapping, or any object whose attributes form
    the mapping. Anything else issues an IndexSpecWarning and returns None.

    Args:
        keys: The index keys as given by the caller.
        stacklevel: Passed to warnings.warn so the warning points at the
            caller's line.

    Returns:
        The resolved specification, or None if keys cannot be used.
    """
    if isinstance(keys, str):
        return FieldName(keys)

    if not isinstance(keys, Mapping):
        try:
            keys = vars(keys)
        except TypeError:
            _warn_invalid("The key needs to be either a string or a mapping", keys, stacklevel)
            return None

    keys = dict(keys)
    weights = keys.pop("weights", None)
    if weights is None:
        return KeyMapping(keys)

    if not isinstance(weights, Mapping):
        try:
            weights = vars(weights)
        except TypeError:
            _warn_invalid("The weights need to be a mapping", weights, stacklevel)
            return None
    return TextWeights(dict(weights))


def _warn_invalid(message: str, value: Any, stacklevel: int) -> None:
    warnings.warn(
        f"{message}, got {type(value).__name__}",
        IndexSpecWarning,
        stacklevel=stacklevel + 1,
    )


def _format_value(value: Any) -> str:
    # Render the way the wire protocol's reference driver does.
    if value is True:
        return "1"
    if value is False or value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _encode(fields: Mapping[str, Any], override: str | None = None) -> str:
    parts = []
    for name, value in fields.items():
        if override is not None:
            value = override
        parts.append(f"{name}_{_format_value(value)}".replace(".", "_"))
    return "_".join(parts)


def index_name(spec: IndexSpec) -> str:
    """
    Encode an index specification as its canonical index name.

    Args:
        spec: A resolved index specification.

    Returns:
        The index name, e.g. "age_1_name_-1".
    """
    if isinstance(spec, FieldName):
        return f"{spec.name}_1".replace(".", "_")
    if isinstance(spec, TextWeights):
        return _encode(spec.weights, override="text")
    return _encode(spec.keys)


def key_specification(spec: IndexSpec) -> dict[str, Any]:
    """
    Build the ``key`` document sent with an index declaration.

    Numeric directions and weights go over the wire as floats. String
    index types such as "2d" or "hashed" are sent unchanged.
    """
    if isinstance(spec, FieldName):
        return {spec.name: 1.0}
    if isinstance(spec, TextWeights):
        return {name: "text" for name in spec.weights}

    fixed: dict[str, Any] = {}
    for name, value in spec.keys.items():
        if isinstance(value, (bool, int, float)):
            fixed[name] = float(value)
        else:
            fixed[name] = value
    return fixed


def to_index_string(keys: Any, stacklevel: int = 3) -> str | None:
    """
    Encode caller-supplied index keys; None (with a warning) if invalid.

    The default stacklevel points the warning at the caller of this
    function; wrappers pass one more per frame they add.
    """
    spec = parse_index_spec(keys, stacklevel=stacklevel)
    if spec is None:
        return None
    return index_name(spec)
