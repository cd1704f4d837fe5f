"""
Tagged JSON encoding for documents.

Every node becomes an object with a ``"type"`` tag:

    {"type": "leaf", "value": ...}
    {"type": "horizontal", "cells": [...]}
    {"type": "vertical", "cells": [...]}
    {"type": "empty"}

Leaf values are passed through ``encode_value``/``decode_value`` so callers can
store values that are not JSON-native.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any

from celldoc._vendor import Err, Ok, Result
from celldoc.document import EMPTY, Document, Horizontal, Leaf, Vertical
from celldoc.errors import ParseError


def _identity(value: Any) -> Any:
    return value


def to_dict(
    doc: Document[Any], encode_value: Callable[[Any], Any] = _identity
) -> dict[str, Any]:
    return doc.cata(
        lambda value: {"type": "leaf", "value": encode_value(value)},
        lambda cells: {"type": "horizontal", "cells": cells},
        lambda cells: {"type": "vertical", "cells": cells},
        lambda: {"type": "empty"},
    )


def from_dict(
    data: Any, decode_value: Callable[[Any], Any] = _identity
) -> Document[Any]:
    """
    Rebuild a document from :func:`to_dict` output.

    Nodes are decoded depth-first, left to right, without recursion.

    Raises:
        ParseError: A node is not an object, has an unknown ``type`` tag, or
            is missing its payload.
    """

    results: list[Document[Any]] = []
    # (node, None) is still to decode; (tag, count) closes a container.
    pending: list[tuple[Any, int | None]] = [(data, None)]
    while pending:
        node, count = pending.pop()
        if count is not None:
            start = len(results) - count
            children = results[start:]
            del results[start:]
            results.append(Horizontal(children) if node == "horizontal" else Vertical(children))
            continue
        if not isinstance(node, Mapping):
            raise ParseError(f"Expected a JSON object for a document node; got {type(node).__name__}")
        tag = node.get("type")
        if tag == "leaf":
            if "value" not in node:
                raise ParseError("Leaf node is missing 'value'")
            results.append(Leaf(decode_value(node["value"])))
        elif tag in ("horizontal", "vertical"):
            cells = node.get("cells")
            if not isinstance(cells, list):
                raise ParseError(f"{tag.capitalize()} node needs a 'cells' list")
            pending.append((tag, len(cells)))
            pending.extend((cell, None) for cell in reversed(cells))
        elif tag == "empty":
            results.append(EMPTY)
        else:
            raise ParseError(f"Unknown type: {tag!r}")
    return results[0]


def to_json(doc: Document[Any], encode_value: Callable[[Any], Any] = _identity, **kwargs: Any) -> str:
    """Serialize ``doc``; extra keyword arguments go to :func:`json.dumps`."""

    return json.dumps(to_dict(doc, encode_value), **kwargs)


def from_json(text: str, decode_value: Callable[[Any], Any] = _identity) -> Document[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}") from exc
    except RecursionError as exc:
        raise ParseError("Invalid JSON: nesting is too deep") from exc
    return from_dict(data, decode_value)


def parse_document(
    text: str, decode_value: Callable[[Any], Any] = _identity
) -> Result[Document[Any]]:
    """Like :func:`from_json`, returning ``Err(ParseError)`` instead of raising."""

    try:
        return Ok(from_json(text, decode_value))
    except ParseError as exc:
        return Err(exc)


__all__ = ["from_dict", "from_json", "parse_document", "to_dict", "to_json"]
