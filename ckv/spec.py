"""
CKV Format Specification
========================

Layout:
    NAME =                       <- Key line: unindented key, optional blanks, '='
    <TAB>John                    <- Value line: tab-indented
    <TAB>Doe                     <- Further tab lines fold into the same value
    +Smith                       <- '+' continues the value without a tab
                                 <- Blank lines between entries are ignored
    EDITOR=
    <TAB>vim

Grammar:
    - Keys use only A-Z, a-z, 0-9, '_' and '-'
    - Nothing but blanks may follow '=' on the key line
    - The line after a key line MUST start with a tab
    - A value ends at the first line that starts with neither tab nor '+'

Folding:
    - Reader: each "\\n<TAB>" or "\\n+" inside a value block becomes "\\n"
    - Writer: each "\\n" in a value becomes "\\n<TAB>"
    - The writer never emits '+' lines; they are read-only

Plain UTF-8 text; other bytes pass through untouched. Only "\\n" ends a line,
so "\\r" is value data. No header, no version marker, no escaping beyond
the fold.
"""

# Key line
EQUALS = "="
NEWLINE = "\n"
BLANKS = frozenset("\t ")

# Value block
TAB = "\t"
CONTINUATION_MARKER = "+"
VALUE_LINE_STARTS = frozenset((TAB, CONTINUATION_MARKER))

# Key alphabet
KEY_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789"
    "_-"
)

# Text encoding of .ckv files
ENCODING = "utf-8"
# Non-UTF-8 bytes survive a read/write cycle as lone surrogates
ENCODING_ERRORS = "surrogateescape"

# Safety limits
MAX_FILE_SIZE = 16 * 1024 * 1024  # 16MB max file size for reader

# File extension
EXTENSION = ".ckv"


def is_valid_key(key: str) -> bool:
    """True if key is non-empty and drawn only from the key alphabet."""
    return bool(key) and all(c in KEY_CHARS for c in key)


def fold_value(value: str) -> str:
    """Turn a value into its on-disk value block (without the final newline).

    "line1\\nline2" -> "\\tline1\\n\\tline2"
    """
    return TAB + value.replace(NEWLINE, NEWLINE + TAB)


def format_entry(key: str, value: str) -> str:
    """Render one entry followed by its blank separator line."""
    return f"{key} {EQUALS}{NEWLINE}{fold_value(value)}{NEWLINE}{NEWLINE}"
