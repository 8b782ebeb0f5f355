"""
CKV character stream and scan session.

The scanners read one character at a time with one character of lookahead.
CharStream gives them exactly that over decoded text. ScanSession binds a
stream to the line counter of one top-level scan:

    session = ScanSession(CharStream(text))
    with session:               # rewinds, line = 1
        key = KeyLineScanner.scan(session)
    session.line                # 0 again, scan finished or failed
"""

from __future__ import annotations


class CharStream:
    """Sequential reads with peek and rewind over an in-memory string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def read(self) -> str:
        """Consume one character. Returns "" at end of stream."""
        if self._pos >= len(self._text):
            return ""
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def peek(self) -> str:
        """Look at the next character without consuming it."""
        if self._pos >= len(self._text):
            return ""
        return self._text[self._pos]

    def rewind(self) -> None:
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def __len__(self) -> int:
        return len(self._text)


class ScanSession:
    """Cursor plus line counter owned by one top-level scan at a time."""

    def __init__(self, stream: CharStream) -> None:
        self.stream = stream
        self.line = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def begin(self) -> None:
        if self._active:
            raise RuntimeError("A scan is already in progress on this stream")
        self.stream.rewind()
        self.line = 1
        self._active = True

    def end(self) -> None:
        self.line = 0
        self._active = False

    def read(self) -> str:
        return self.stream.read()

    def peek(self) -> str:
        return self.stream.peek()

    def __enter__(self) -> ScanSession:
        self.begin()
        return self

    def __exit__(self, *args) -> None:
        self.end()
