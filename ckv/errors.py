"""
CKV Errors - one class per failure condition.

Every error is fatal to the operation that raised it. Syntax errors carry
the line number the scanner was on when it gave up.
"""

from __future__ import annotations


class CKVError(Exception):
    """Base class for everything this package raises on purpose."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class CKVSyntaxError(CKVError, ValueError):
    """Malformed CKV text."""

    def __init__(self, message: str, line: int = 0) -> None:
        super().__init__(message)
        self.line = line

    def __str__(self) -> str:
        if self.line:
            return f"line {self.line}: {self.message}"
        return self.message


class EqualToWithoutAKey(CKVSyntaxError):
    def __init__(self, line: int = 0) -> None:
        super().__init__("'=' found without a key before it", line)


class InvalidCharacter(CKVSyntaxError):
    def __init__(self, char: str, line: int = 0) -> None:
        super().__init__(
            f"Invalid character {char!r} in key. "
            f"Only alphanumerics, '_' and '-' are allowed.",
            line,
        )
        self.char = char


class MissingEqualTo(CKVSyntaxError):
    def __init__(self, line: int = 0) -> None:
        super().__init__("Key is not followed by '='", line)


class NoValueFoundForKey(CKVSyntaxError):
    def __init__(self, key: str, line: int = 0) -> None:
        super().__init__(
            f"No value found for key {key!r} "
            f"(the line after the key must start with a tab)",
            line,
        )
        self.key = key


class TrailingCharsAfterEqualTo(CKVSyntaxError):
    def __init__(self, line: int = 0) -> None:
        super().__init__("Unexpected characters after '=' on the key line", line)


class ValueWithoutAKey(CKVSyntaxError):
    """Value block scanned without a key line in front of it.

    The key scanner rejects every input that could lead here, so seeing this
    from a document scan means the grammar has a hole.
    """

    def __init__(self, line: int = 0) -> None:
        super().__init__("Value block found without a key", line)


class FileOpenFailed(CKVError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Unable to open file: {path}")
        self.path = path


class InvalidOutputStream(CKVError, ValueError):
    def __init__(self) -> None:
        super().__init__("Output stream is not writable")


class KeyNotFound(CKVError, KeyError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Key not found: {key!r}")
        self.key = key
