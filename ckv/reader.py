"""
CKV Reader - Parser front end for .ckv files.

Two ways in:
  - CKVReader.read / CKVReader.parse materialize the whole table
  - CKVReader.open returns a handle for single-key lookups that stop
    scanning as soon as the key is found

Input handling:
  - Files are decoded as UTF-8, undecodable bytes kept via surrogateescape
  - File size limit (prevents loading arbitrarily large files by accident)
  - Open failures raise FileOpenFailed, never a parse error
"""

from __future__ import annotations

import builtins
import logging
import os
from pathlib import Path

from ckv.errors import FileOpenFailed, KeyNotFound
from ckv.scanner import DocumentScanner
from ckv.spec import ENCODING, ENCODING_ERRORS, MAX_FILE_SIZE
from ckv.stream import CharStream

logger = logging.getLogger("ckv.reader")


def decode(data: bytes | str) -> str:
    """Bytes or text -> scanner input.

    Line endings are left alone: '\\r' is an ordinary value character.
    Bytes that are not UTF-8 become lone surrogates and encode back unchanged.
    """
    if isinstance(data, bytes):
        return data.decode(ENCODING, ENCODING_ERRORS)
    return data


def load_text(path: str | Path, max_size: int = MAX_FILE_SIZE) -> str:
    """Read a .ckv file into scanner input."""
    path = Path(path)
    try:
        with builtins.open(path, "rb") as f:
            file_size = os.fstat(f.fileno()).st_size
            if file_size > max_size:
                raise ValueError(
                    f"File size {file_size} exceeds maximum {max_size} bytes. "
                    f"Pass max_size= to override."
                )
            data = f.read()
    except OSError as e:
        logger.debug(f"Open failed for {path}: {e}")
        raise FileOpenFailed(str(path)) from e
    return decode(data)


def first_wins(pairs: list[tuple[str, str]]) -> dict[str, str]:
    """Build a table from scanned pairs; later duplicates are dropped."""
    table: dict[str, str] = {}
    for key, value in pairs:
        table.setdefault(key, value)
    return table


class CKVReader:
    """
    .ckv file reader.

    Usage:
        # Whole table
        table = CKVReader.read("settings.ckv")

        # Single lookups (scanning stops at the match)
        with CKVReader.open("settings.ckv") as reader:
            editor = reader.get_value("EDITOR")
    """

    @classmethod
    def read(cls, path: str | Path, max_size: int = MAX_FILE_SIZE) -> dict[str, str]:
        """Fully parse a .ckv file into a key -> value dict."""
        return cls.parse(load_text(path, max_size))

    @classmethod
    def parse(cls, data: bytes | str) -> dict[str, str]:
        """Parse bytes or text into a key -> value dict (first definition wins)."""
        return first_wins(cls.entries(data))

    @staticmethod
    def entries(data: bytes | str) -> list[tuple[str, str]]:
        """Parse into (key, value) pairs in file order, duplicates included."""
        return DocumentScanner(CharStream(decode(data))).collect_all()

    @classmethod
    def open(cls, path: str | Path, max_size: int = MAX_FILE_SIZE) -> CKVReaderHandle:
        """Open a .ckv file for repeated lookups."""
        return CKVReaderHandle(load_text(path, max_size), path=str(path))


class CKVReaderHandle:
    """
    Handle for lookups against one loaded .ckv file.

    Every call rescans from the top, so calls can come in any order. Only one
    scan runs at a time on a handle.
    """

    def __init__(self, text: str, path: str = "") -> None:
        self.path = path
        self._scanner: DocumentScanner | None = DocumentScanner(CharStream(text))

    @property
    def scanner(self) -> DocumentScanner:
        if self._scanner is None:
            raise ValueError("I/O operation on closed CKV reader")
        return self._scanner

    @property
    def line_no(self) -> int:
        return self.scanner.line_no

    def get_value(self, key: str) -> str:
        """Value of key. Raises KeyNotFound if absent."""
        return self.scanner.find(key)

    def has_key(self, key: str) -> bool:
        try:
            self.scanner.find(key)
        except KeyNotFound:
            return False
        return True

    def entries(self) -> list[tuple[str, str]]:
        return self.scanner.collect_all()

    def import_all(self) -> dict[str, str]:
        return first_wins(self.scanner.collect_all())

    @property
    def keys(self) -> list[str]:
        """Distinct keys in file order."""
        return list(self.import_all())

    def close(self) -> None:
        self._scanner = None

    def __enter__(self) -> CKVReaderHandle:
        return self

    def __exit__(self, *args) -> None:
        self.close()
