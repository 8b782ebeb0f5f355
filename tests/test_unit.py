"""
Unit Tests - Test individual components in isolation.
"""

import pytest

from ckv.spec import (
    TAB,
    CONTINUATION_MARKER,
    KEY_CHARS,
    EXTENSION,
    fold_value,
    format_entry,
    is_valid_key,
)
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
from ckv.stream import CharStream, ScanSession
from ckv.scanner import KeyLineScanner, ValueBlockScanner


def started(text: str) -> ScanSession:
    session = ScanSession(CharStream(text))
    session.begin()
    return session


# =============================================================================
# Spec constants and helpers
# =============================================================================

class TestSpec:

    def test_markers(self):
        assert TAB == "\t"
        assert CONTINUATION_MARKER == "+"
        assert EXTENSION == ".ckv"

    def test_key_alphabet(self):
        for ch in "azAZ09_-":
            assert ch in KEY_CHARS
        for ch in " \t=.+#$/":
            assert ch not in KEY_CHARS

    def test_is_valid_key(self):
        assert is_valid_key("HOW_TO-OPEN9")
        assert not is_valid_key("")
        assert not is_valid_key("A.B")
        assert not is_valid_key("A B")

    def test_fold_value(self):
        assert fold_value("John") == "\tJohn"
        assert fold_value("line1\nline2") == "\tline1\n\tline2"
        assert fold_value("") == "\t"
        assert fold_value("end\n") == "\tend\n\t"

    def test_format_entry(self):
        assert format_entry("NAME", "John") == "NAME =\n\tJohn\n\n"
        assert format_entry("A", "x\ny") == "A =\n\tx\n\ty\n\n"


# =============================================================================
# Errors
# =============================================================================

class TestErrors:

    def test_syntax_errors_are_value_errors(self):
        for exc in (
            EqualToWithoutAKey(),
            InvalidCharacter("$"),
            MissingEqualTo(),
            NoValueFoundForKey("A"),
            TrailingCharsAfterEqualTo(),
            ValueWithoutAKey(),
        ):
            assert isinstance(exc, CKVSyntaxError)
            assert isinstance(exc, CKVError)
            assert isinstance(exc, ValueError)

    def test_line_in_message(self):
        assert str(MissingEqualTo(7)).startswith("line 7: ")
        assert not str(MissingEqualTo()).startswith("line")

    def test_invalid_character_carries_char(self):
        e = InvalidCharacter("$", 3)
        assert e.char == "$"
        assert e.line == 3
        assert "'$'" in str(e)

    def test_no_value_carries_key(self):
        e = NoValueFoundForKey("EDITOR", 2)
        assert e.key == "EDITOR"
        assert "EDITOR" in str(e)

    def test_key_not_found(self):
        e = KeyNotFound("MISSING")
        assert isinstance(e, KeyError)
        assert e.key == "MISSING"
        assert str(e) == "Key not found: 'MISSING'"

    def test_file_open_failed_carries_path(self):
        e = FileOpenFailed("/nope/settings.ckv")
        assert e.path == "/nope/settings.ckv"
        assert "/nope/settings.ckv" in str(e)

    def test_invalid_output_stream(self):
        assert isinstance(InvalidOutputStream(), CKVError)


# =============================================================================
# CharStream / ScanSession
# =============================================================================

class TestCharStream:

    def test_read_and_peek(self):
        s = CharStream("ab")
        assert s.peek() == "a"
        assert s.read() == "a"
        assert s.peek() == "b"
        assert s.read() == "b"
        assert s.read() == ""
        assert s.peek() == ""
        assert s.at_end

    def test_rewind(self):
        s = CharStream("xyz")
        s.read()
        s.read()
        assert s.position == 2
        s.rewind()
        assert s.position == 0
        assert s.read() == "x"

    def test_empty(self):
        s = CharStream("")
        assert len(s) == 0
        assert s.read() == ""


class TestScanSession:

    def test_begin_and_end(self):
        session = ScanSession(CharStream("abc"))
        assert session.line == 0
        session.read()
        session.begin()
        assert session.line == 1
        assert session.active
        assert session.peek() == "a"
        session.end()
        assert session.line == 0
        assert not session.active

    def test_context_manager_resets_on_error(self):
        session = ScanSession(CharStream("abc"))
        with pytest.raises(RuntimeError):
            with session:
                session.line = 9
                raise RuntimeError("boom")
        assert session.line == 0
        assert not session.active

    def test_no_nested_scans(self):
        session = ScanSession(CharStream(""))
        with session:
            with pytest.raises(RuntimeError):
                session.begin()


# =============================================================================
# KeyLineScanner
# =============================================================================

class TestKeyLineScanner:

    def test_simple_key(self):
        session = started("NAME =\n\tJohn\n")
        assert KeyLineScanner.scan(session) == "NAME"
        # Positioned on the tab that opens the value
        assert session.peek() == TAB
        assert session.line == 2

    def test_no_blank_before_equals(self):
        assert KeyLineScanner.scan(started("A=\n\tx\n")) == "A"

    def test_blanks_around_equals(self):
        assert KeyLineScanner.scan(started("KEY \t =  \t\n\tv\n")) == "KEY"

    def test_full_alphabet(self):
        assert KeyLineScanner.scan(started("a-Z_09 =\n\tv\n")) == "a-Z_09"

    def test_skips_blank_lines(self):
        session = started("\n  \n\t\nKEY =\n\tv\n")
        assert KeyLineScanner.scan(session) == "KEY"
        assert session.line == 5

    def test_leading_whitespace_before_key(self):
        assert KeyLineScanner.scan(started("   KEY =\n\tv\n")) == "KEY"

    def test_end_of_document(self):
        assert KeyLineScanner.scan(started("")) == ""

    def test_end_of_document_after_blank_lines(self):
        session = started("\n \n\n")
        assert KeyLineScanner.scan(session) == ""
        assert session.line == 4

    def test_equals_without_key(self):
        with pytest.raises(EqualToWithoutAKey) as exc:
            KeyLineScanner.scan(started("=\n\tx\n"))
        assert exc.value.line == 1

    def test_equals_without_key_after_blanks(self):
        with pytest.raises(EqualToWithoutAKey):
            KeyLineScanner.scan(started("   = x\n"))

    def test_second_word_before_equals(self):
        with pytest.raises(MissingEqualTo):
            KeyLineScanner.scan(started("A B =\n\tx\n"))

    def test_newline_before_equals(self):
        with pytest.raises(MissingEqualTo):
            KeyLineScanner.scan(started("A\n\tx\n"))

    def test_newline_after_blank_before_equals(self):
        with pytest.raises(MissingEqualTo):
            KeyLineScanner.scan(started("A  \n\tx\n"))

    def test_trailing_chars_after_equals(self):
        with pytest.raises(TrailingCharsAfterEqualTo):
            KeyLineScanner.scan(started("A =x\n"))

    def test_second_equals_is_trailing(self):
        with pytest.raises(TrailingCharsAfterEqualTo):
            KeyLineScanner.scan(started("A = =\n\tx\n"))

    @pytest.mark.parametrize("ch", ["\x0b", "\x0c", "\r", "\xa0", "\x1c"])
    def test_only_tab_or_space_after_equals(self, ch):
        with pytest.raises(TrailingCharsAfterEqualTo):
            KeyLineScanner.scan(started(f"A ={ch}\n\tx\n"))

    @pytest.mark.parametrize("ch", ["\x0b", "\x0c", "\xa0"])
    def test_only_tab_or_space_before_equals(self, ch):
        with pytest.raises(MissingEqualTo):
            KeyLineScanner.scan(started(f"A {ch}=\n\tx\n"))

    def test_other_whitespace_skipped_on_blank_lines(self):
        session = started("\x0c\r\n\xa0\nKEY =\n\tv\n")
        assert KeyLineScanner.scan(session) == "KEY"
        assert session.line == 4

    def test_next_line_not_tab(self):
        with pytest.raises(NoValueFoundForKey) as exc:
            KeyLineScanner.scan(started("A =\nB =\n\ty\n"))
        assert exc.value.key == "A"
        assert exc.value.line == 1

    def test_continuation_marker_cannot_open_value(self):
        with pytest.raises(NoValueFoundForKey):
            KeyLineScanner.scan(started("A =\n+x\n"))

    def test_eof_after_equals(self):
        with pytest.raises(NoValueFoundForKey) as exc:
            KeyLineScanner.scan(started("A ="))
        assert exc.value.key == "A"

    def test_eof_after_key_line(self):
        with pytest.raises(NoValueFoundForKey):
            KeyLineScanner.scan(started("A =\n"))

    def test_eof_in_key(self):
        with pytest.raises(MissingEqualTo):
            KeyLineScanner.scan(started("A"))

    def test_eof_after_key_and_blank(self):
        with pytest.raises(MissingEqualTo):
            KeyLineScanner.scan(started("A "))

    def test_invalid_character(self):
        with pytest.raises(InvalidCharacter) as exc:
            KeyLineScanner.scan(started("KEY.NAME =\n\tv\n"))
        assert exc.value.char == "."

    def test_comment_lines_are_not_supported(self):
        with pytest.raises(InvalidCharacter) as exc:
            KeyLineScanner.scan(started("# comment\n"))
        assert exc.value.char == "#"

    def test_invalid_character_line_number(self):
        with pytest.raises(InvalidCharacter) as exc:
            KeyLineScanner.scan(started("\n\nA$ =\n\tv\n"))
        assert exc.value.line == 3

    def test_carriage_return_inside_key(self):
        with pytest.raises(InvalidCharacter) as exc:
            KeyLineScanner.scan(started("A\r =\n\tv\n"))
        assert exc.value.char == "\r"


# =============================================================================
# ValueBlockScanner
# =============================================================================

def scan_first_value(text: str) -> tuple[ScanSession, str]:
    session = started(text)
    assert KeyLineScanner.scan(session)
    return session, ValueBlockScanner.scan(session)


class TestValueBlockScanner:

    def test_single_line(self):
        _, value = scan_first_value("NAME =\n\tJohn\n")
        assert value == "John"

    def test_tab_lines_fold(self):
        _, value = scan_first_value("A =\n\tline1\n\tline2\n")
        assert value == "line1\nline2"

    def test_continuation_marker(self):
        _, value = scan_first_value("A =\n\tfirst\n+second\n")
        assert value == "first\nsecond"

    def test_mixed_tab_and_plus(self):
        _, value = scan_first_value("A =\n\ta\n+b\n\tc\n++d\n")
        assert value == "a\nb\nc\n+d"

    def test_only_first_tab_is_stripped(self):
        _, value = scan_first_value("A =\n\t\tdouble\n\t  spaced\n")
        assert value == "\tdouble\n  spaced"

    def test_empty_value(self):
        _, value = scan_first_value("A =\n\t\nB =\n\tx\n")
        assert value == ""

    def test_trailing_empty_line_kept(self):
        _, value = scan_first_value("A =\n\tx\n\t\n")
        assert value == "x\n"

    def test_stops_before_next_key(self):
        session, value = scan_first_value("A =\n\tx\nB =\n\ty\n")
        assert value == "x"
        assert KeyLineScanner.scan(session) == "B"
        assert ValueBlockScanner.scan(session) == "y"
        assert KeyLineScanner.scan(session) == ""

    def test_stops_at_blank_line(self):
        session, value = scan_first_value("A =\n\tx\n\nB =\n\ty\n")
        assert value == "x"
        assert KeyLineScanner.scan(session) == "B"

    def test_value_at_eof_without_newline_is_lost(self):
        _, value = scan_first_value("A =\n\tlost")
        assert value == ""

    def test_multiline_value_at_eof_without_newline_is_lost(self):
        _, value = scan_first_value("A =\n\tone\n\ttwo")
        assert value == ""

    def test_value_at_eof_with_newline(self):
        _, value = scan_first_value("A =\n\tkept\n")
        assert value == "kept"

    def test_line_counting(self):
        session, _ = scan_first_value("A =\n\tl1\n\tl2\n+l3\n")
        assert session.line == 5

    def test_value_without_a_key(self):
        with pytest.raises(ValueWithoutAKey):
            ValueBlockScanner.scan(started("x\n"))

    def test_unicode(self):
        _, value = scan_first_value("GREETING =\n\tこんにちは 🌍\n")
        assert value == "こんにちは 🌍"
