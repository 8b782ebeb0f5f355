"""
CKV Writer - Renders key/value tables back to .ckv text.

Each entry becomes:
    KEY =\\n
    \\t<value with every \\n turned into \\n\\t>\\n
    \\n

which is exactly what the value scanner folds back into the original value.
Whole-table operations (upsert, delete) work on an ordered dict, so entries
keep the order they had in the file.
"""

from __future__ import annotations

import io
import logging
from typing import IO, Iterable, Mapping, Union

from ckv.errors import (
    EqualToWithoutAKey,
    FileOpenFailed,
    InvalidCharacter,
    InvalidOutputStream,
)
from ckv.spec import ENCODING, ENCODING_ERRORS, KEY_CHARS, format_entry, is_valid_key

logger = logging.getLogger("ckv.writer")

Entries = Union[Mapping[str, str], Iterable[tuple[str, str]]]


def _pairs(entries: Entries) -> Iterable[tuple[str, str]]:
    if isinstance(entries, Mapping):
        return entries.items()
    return entries


def _table(entries: Entries) -> dict[str, str]:
    # First occurrence wins, same as reading a file with duplicate keys
    table: dict[str, str] = {}
    for key, value in _pairs(entries):
        table.setdefault(key, value)
    return table


def check_key(key: str) -> None:
    """Reject keys the reader would not accept back."""
    if is_valid_key(key):
        return
    if not key:
        raise EqualToWithoutAKey()
    raise InvalidCharacter(next(ch for ch in key if ch not in KEY_CHARS))


def check_output(out: IO | None) -> None:
    """Raise InvalidOutputStream unless out can be written to right now."""
    if out is None or not hasattr(out, "write"):
        raise InvalidOutputStream()
    if getattr(out, "closed", False):
        raise InvalidOutputStream()
    writable = getattr(out, "writable", None)
    if writable is not None and not writable():
        raise InvalidOutputStream()


def _is_binary(out: IO) -> bool:
    return isinstance(out, (io.RawIOBase, io.BufferedIOBase))


class CKVWriter:

    @staticmethod
    def dumps(entries: Entries) -> str:
        """Render entries to CKV text. Pure, does not touch the input."""
        chunks = []
        for key, value in _pairs(entries):
            check_key(key)
            chunks.append(format_entry(key, value))
        return "".join(chunks)

    @staticmethod
    def serialize(entries: Entries) -> bytes:
        """Render entries to UTF-8 bytes."""
        return CKVWriter.dumps(entries).encode(ENCODING, ENCODING_ERRORS)

    @staticmethod
    def render(entries: Entries, out: IO) -> int:
        """Write rendered entries to a text or binary sink. Returns chars/bytes written.

        The sink is checked before anything is rendered, so an unusable sink
        never receives a partial table.
        """
        check_output(out)
        text = CKVWriter.dumps(entries)
        if _is_binary(out):
            data = text.encode(ENCODING, ENCODING_ERRORS)
            out.write(data)
            return len(data)
        out.write(text)
        return len(text)

    @staticmethod
    def upsert(entries: Entries, key: str, value: str) -> dict[str, str]:
        """Return a new table with key set to value.

        An existing key keeps its position; a new key goes last.
        """
        check_key(key)
        table = _table(entries)
        table[key] = value
        return table

    @staticmethod
    def delete(entries: Entries, key: str) -> dict[str, str]:
        """Return a new table without key. Missing keys are not an error."""
        table = _table(entries)
        table.pop(key, None)
        return table

    @staticmethod
    def write(entries: Entries, path: str, mode: int = 0o644) -> int:
        """Truncate path and write the rendered table to it. Returns bytes written.

        Not atomic: a reader racing with this call can see a partial file.
        """
        import os
        data = CKVWriter.serialize(entries)
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        except OSError as e:
            raise FileOpenFailed(str(path)) from e
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return len(data)
