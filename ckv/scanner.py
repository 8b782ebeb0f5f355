"""
CKV Scanner - character-level state machines for key lines and value blocks.

Two leaf scanners run alternately over one ScanSession:

    KeyLineScanner.scan()    -> "NAME"   (or "" when no keys are left)
    ValueBlockScanner.scan() -> "John"

DocumentScanner drives them over a whole stream, either to collect every
entry or to stop at the first entry with a given key.

Strictness:
  - Input is rejected at the first malformed character, never skipped
  - Errors carry the line the scanner was on
  - A finished or failed scan leaves the line counter at 0
"""

from __future__ import annotations

import enum
import logging

from ckv.errors import (
    CKVSyntaxError,
    EqualToWithoutAKey,
    InvalidCharacter,
    KeyNotFound,
    MissingEqualTo,
    NoValueFoundForKey,
    TrailingCharsAfterEqualTo,
    ValueWithoutAKey,
)
from ckv.spec import BLANKS, EQUALS, KEY_CHARS, NEWLINE, TAB, VALUE_LINE_STARTS
from ckv.stream import CharStream, ScanSession

logger = logging.getLogger("ckv.scanner")


class KeyState(enum.Enum):
    IDLE = "idle"                          # no key characters yet
    IN_KEY = "in_key"                      # accumulating key characters
    AWAITING_EQUALS = "awaiting_equals"    # key ended with a blank
    AWAITING_NEWLINE = "awaiting_newline"  # '=' seen


class KeyLineScanner:
    """Consumes one key line, up to and including its newline."""

    @staticmethod
    def scan(session: ScanSession) -> str:
        """Return the next key, or "" when the document has no more keys.

        On success the stream is positioned on the tab that opens the value
        block. Callers must not run ValueBlockScanner after getting "".
        """
        state = KeyState.IDLE
        key_chars: list[str] = []

        while True:
            ch = session.read()
            if not ch:
                break

            if ch == NEWLINE:
                if state is KeyState.AWAITING_NEWLINE:
                    key = "".join(key_chars)
                    if session.peek() != TAB:
                        raise NoValueFoundForKey(key, session.line)
                    session.line += 1
                    return key
                if state is not KeyState.IDLE:
                    raise MissingEqualTo(session.line)
                # Blank line
                session.line += 1
                continue

            if state is KeyState.AWAITING_NEWLINE:
                if ch not in BLANKS:
                    raise TrailingCharsAfterEqualTo(session.line)
                continue

            if ch == EQUALS:
                if not key_chars:
                    raise EqualToWithoutAKey(session.line)
                state = KeyState.AWAITING_NEWLINE
                continue

            if state is KeyState.AWAITING_EQUALS:
                if ch not in BLANKS:
                    raise MissingEqualTo(session.line)
                continue

            if ch in KEY_CHARS:
                key_chars.append(ch)
                state = KeyState.IN_KEY
            elif state is KeyState.IN_KEY and ch in BLANKS:
                state = KeyState.AWAITING_EQUALS
            elif state is KeyState.IDLE and ch.isspace():
                # Leading whitespace and whitespace-only lines
                continue
            else:
                raise InvalidCharacter(ch, session.line)

        if state is KeyState.AWAITING_NEWLINE:
            raise NoValueFoundForKey("".join(key_chars), session.line)
        if state is not KeyState.IDLE:
            raise MissingEqualTo(session.line)
        return ""


class ValueBlockScanner:
    """Folds the value lines that follow a key line into one string."""

    @staticmethod
    def scan(session: ScanSession) -> str:
        """Return the value starting at the current position.

        Stops right after the newline that precedes the first line starting
        with neither a tab nor '+'. That newline is not part of the value.
        """
        if session.read() != TAB:
            raise ValueWithoutAKey(session.line)

        parts: list[str] = []
        while True:
            ch = session.read()
            if not ch:
                # Stream ended mid-line: the unterminated value is dropped
                return ""
            if ch != NEWLINE:
                parts.append(ch)
                continue

            session.line += 1
            if session.peek() in VALUE_LINE_STARTS:
                session.read()
                parts.append(NEWLINE)
                continue
            return "".join(parts)


class DocumentScanner:
    """
    Scans a whole CKV stream.

    Usage:
        scanner = DocumentScanner(CharStream(text))
        scanner.find("NAME")        # -> "John"
        scanner.collect_all()       # -> [("NAME", "John"), ...]

    Every call starts again from the top of the stream, so a find() that
    stopped half-way never affects the next scan.
    """

    def __init__(self, stream: CharStream) -> None:
        self.session = ScanSession(stream)

    @property
    def line_no(self) -> int:
        """Line of the scan in progress, 0 when idle."""
        return self.session.line

    def find(self, target: str) -> str:
        """Return the value of the first entry named target.

        Raises KeyNotFound when the document ends first. Entries after the
        match are not scanned, so they are not validated either.
        """
        with self.session as session:
            try:
                while True:
                    key = KeyLineScanner.scan(session)
                    if not key:
                        raise KeyNotFound(target)
                    if key == target:
                        return ValueBlockScanner.scan(session)
                    ValueBlockScanner.scan(session)
            except CKVSyntaxError as e:
                logger.debug(f"Scan for {target!r} failed: {e}")
                raise

    def collect_all(self) -> list[tuple[str, str]]:
        """Return every (key, value) pair in file order, duplicates included."""
        entries: list[tuple[str, str]] = []
        with self.session as session:
            try:
                while True:
                    key = KeyLineScanner.scan(session)
                    if not key:
                        break
                    entries.append((key, ValueBlockScanner.scan(session)))
            except CKVSyntaxError as e:
                logger.debug(f"Full scan failed after {len(entries)} entries: {e}")
                raise
        return entries
