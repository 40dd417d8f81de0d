"""Row access helpers.

The engine is generic over row shape: rows may be mappings (decoded JSON,
``csv.DictReader`` output) or plain objects (dataclasses, ORM records).
"""
from __future__ import annotations
from collections.abc import Mapping
from typing import Any

DEFAULT_ID_FIELD = "id"


def get_value(row: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from a mapping row or attribute of an object row."""
    if isinstance(row, Mapping):
        return row.get(key, default)
    return getattr(row, key, default)


def row_id(row: Any, id_field: str = DEFAULT_ID_FIELD) -> Any:
    return get_value(row, id_field)


__all__ = ["get_value", "row_id", "DEFAULT_ID_FIELD"]
