"""
CKV Converters - Convert key/value tables to/from JSON.

    to_json / from_json

JSON documents are flat objects of string -> string:
    {"EDITOR": "vim", "GREETING": "hello\\nworld"}
"""

from __future__ import annotations

import json
from typing import Any

from ckv.writer import Entries, _pairs, check_key


def to_json(entries: Entries, indent: int = 2) -> str:
    """Convert a CKV table to a JSON object string. Order is kept."""
    data: dict[str, str] = {}
    for key, value in _pairs(entries):
        data.setdefault(key, value)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def from_json(json_str: str) -> dict[str, str]:
    """Create a CKV table from a JSON object string.

    Rejects anything that could not be written back as CKV: non-object
    documents, non-string values and keys outside the CKV key alphabet.
    """
    data: Any = json.loads(json_str)

    if not isinstance(data, dict):
        raise ValueError("Invalid CKV JSON: expected a JSON object at top level")

    table: dict[str, str] = {}
    for key, val in data.items():
        if not isinstance(val, str):
            raise ValueError(
                f"Invalid CKV JSON: value of {key!r} must be a string, "
                f"got {type(val).__name__}"
            )
        check_key(key)
        table[key] = val
    return table


def convert_to(entries: Entries, fmt: str) -> str:
    """Convert a CKV table to the named format."""
    converters = {
        "json": to_json,
    }
    if fmt not in converters:
        raise ValueError(f"Unknown format: {fmt!r}. Supported: {', '.join(converters)}")
    return converters[fmt](entries)


def convert_from(data: str, fmt: str) -> dict[str, str]:
    """Convert from the named format to a CKV table."""
    converters = {
        "json": from_json,
    }
    if fmt not in converters:
        raise ValueError(f"Unknown format: {fmt!r}. Supported: {', '.join(converters)}")
    return converters[fmt](data)
