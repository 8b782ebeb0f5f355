"""
CKV - human-editable key/value configuration files.

    NAME =
    <TAB>John
"""

__version__ = "0.2.0"

from ckv.spec import EXTENSION, KEY_CHARS
from ckv.errors import (
    CKVError,
    CKVSyntaxError,
    EqualToWithoutAKey,
    FileOpenFailed,
    InvalidCharacter,
    InvalidOutputStream,
    KeyNotFound,
    MissingEqualTo,
    NoValueFoundForKey,
    TrailingCharsAfterEqualTo,
    ValueWithoutAKey,
)
from ckv.writer import CKVWriter
from ckv.reader import CKVReader
from ckv.document import CKVDocument, dump, dumps, load, loads
