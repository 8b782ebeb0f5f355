"""
CKV Document - a .ckv file on disk and the operations on it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

from ckv.errors import FileOpenFailed
from ckv.reader import CKVReader, CKVReaderHandle
from ckv.spec import MAX_FILE_SIZE
from ckv.writer import CKVWriter, Entries, check_output

logger = logging.getLogger("ckv.document")


class CKVDocument:
    """
    A .ckv file, opened lazily on first use.

    Usage:
        doc = CKVDocument("settings.ckv")
        doc.get_value("EDITOR")                      # -> "vim"
        doc.set_value("EDITOR", "nano")              # rewrites settings.ckv
        doc.set_value("EDITOR", "nano", sys.stdout)  # file left untouched
        doc.remove_key("EDITOR")
        doc.import_all()                             # -> {"EDITOR": "nano", ...}

    Rewrites read the whole file, close it, then truncate and write it again.
    Nothing guards against another process touching the file in between.
    """

    def __init__(self, path: str | Path, max_size: int = MAX_FILE_SIZE) -> None:
        self.path = Path(path)
        self.max_size = max_size
        self._reader: CKVReaderHandle | None = None

    def _open(self) -> CKVReaderHandle:
        if self._reader is None:
            self._reader = CKVReader.open(self.path, self.max_size)
            logger.debug(f"Opened {self.path}")
        return self._reader

    @property
    def line_no(self) -> int:
        """Line of the scan in progress, 0 when no scan is running."""
        if self._reader is None:
            return 0
        return self._reader.line_no

    def get_value(self, key: str) -> str:
        """Value of key. Raises KeyNotFound, FileOpenFailed or a syntax error."""
        return self._open().get_value(key)

    def import_all(self) -> dict[str, str]:
        """Every entry of the file; the first definition of a key wins."""
        return self._open().import_all()

    def set_value(self, key: str, value: str, out: IO | None = None) -> dict[str, str]:
        """Set key to value. Returns the updated table.

        With out, the updated document is written there and the file is left
        alone. Without it, the file is rewritten (and created if missing).
        """
        if out is not None:
            table = CKVWriter.upsert(self._import_for_write(out), key, value)
            CKVWriter.render(table, out)
            return table

        try:
            current = self.import_all()
        except FileOpenFailed as e:
            # Only a missing file is created
            if not isinstance(e.__cause__, FileNotFoundError):
                raise
            logger.info(f"{self.path} does not exist yet, creating it")
            current = {}
        table = CKVWriter.upsert(current, key, value)
        self._rewrite(table)
        return table

    def remove_key(self, key: str, out: IO | None = None) -> dict[str, str]:
        """Remove key. Returns the updated table.

        With out, the updated document is written there and the file is left
        alone. Without it, the file is rewritten. Removing a key that is not
        there leaves an equivalent document.
        """
        if out is not None:
            table = CKVWriter.delete(self._import_for_write(out), key)
            CKVWriter.render(table, out)
            return table

        table = CKVWriter.delete(self.import_all(), key)
        self._rewrite(table)
        return table

    def _import_for_write(self, out: IO) -> dict[str, str]:
        # File problems are reported before sink problems
        self._open()
        check_output(out)
        return self.import_all()

    def _rewrite(self, table: Entries) -> None:
        self.close()
        nbytes = CKVWriter.write(table, str(self.path))
        logger.info(f"Rewrote {self.path} ({nbytes} bytes)")

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def __enter__(self) -> CKVDocument:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"CKVDocument(path={str(self.path)!r})"


def load(path: str | Path, max_size: int = MAX_FILE_SIZE) -> dict[str, str]:
    """Read a .ckv file into a dict."""
    return CKVReader.read(path, max_size)


def loads(data: bytes | str) -> dict[str, str]:
    """Parse CKV text into a dict."""
    return CKVReader.parse(data)


def dumps(entries: Entries) -> str:
    """Render a dict (or pairs) as CKV text."""
    return CKVWriter.dumps(entries)


def dump(entries: Entries, path: str | Path) -> int:
    """Write a dict (or pairs) to a .ckv file. Returns bytes written."""
    return CKVWriter.write(entries, str(path))
