"""
Tests for the tilde escape lexer and per-table unit checks.
"""

import pytest
from code128_gs1 import ErrorCode, ParseError, Table
from code128_gs1.core.tilde import UnitKind, check_table_units, lex_units


class TestLexUnits:
    """Splitting raw text into units."""

    def test_plain_text(self):
        """Every character becomes a literal unit."""
        units = lex_units("Ab1")
        assert [u.kind for u in units] == [UnitKind.CHAR] * 3
        assert [u.value for u in units] == ["A", "b", "1"]
        assert [u.position for u in units] == [0, 1, 2]

    def test_escaped_tilde(self):
        """`~~` is a single literal tilde unit."""
        units = lex_units("a~~b")
        assert [u.kind for u in units] == [UnitKind.CHAR, UnitKind.TILDE, UnitKind.CHAR]
        assert units[1].value == "~"
        assert units[2].position == 3

    @pytest.mark.parametrize("number", [1, 2, 3, 4])
    def test_function_codes(self, number):
        """`~F1` to `~F4` are function units."""
        units = lex_units(f"~F{number}12")
        assert units[0].kind is UnitKind.FUNCTION
        assert units[0].function == number
        assert units[0].source == f"~F{number}"
        assert [u.value for u in units[1:]] == ["1", "2"]

    def test_fnc1_flag(self):
        units = lex_units("~F1~F2")
        assert units[0].is_fnc1
        assert not units[1].is_fnc1

    @pytest.mark.parametrize("text", ["~F5", "~F0", "~F", "ab~Fx"])
    def test_bad_function_number(self, text):
        """Function numbers outside 1-4 are rejected."""
        with pytest.raises(ParseError) as exc_info:
            lex_units(text)
        assert exc_info.value.code is ErrorCode.BAD_TILDE
        assert "Bad ~F" in exc_info.value.message

    @pytest.mark.parametrize("text", ["~x", "abc~", "~1"])
    def test_wrong_code_after_tilde(self, text):
        """Any other character after `~`, or nothing, is an error."""
        with pytest.raises(ParseError) as exc_info:
            lex_units(text)
        assert exc_info.value.code is ErrorCode.BAD_TILDE
        assert exc_info.value.message == "Wrong code after the ~."
        assert str(exc_info.value) == "[code128] Wrong code after the ~."

    def test_tilde_disabled(self):
        """Without tilde processing `~` is an ordinary character."""
        units = lex_units("~x~F1", tilde=False)
        assert len(units) == 5
        assert all(u.kind is UnitKind.CHAR for u in units)


class TestCheckTableUnits:
    """Checks applied to segments written in an imposed table."""

    def test_table_c_even_runs(self):
        """Digit runs around functions must pair up in table C."""
        check_table_units(lex_units("12~F13456"), Table.C, "12~F13456")

    def test_table_c_odd_run(self):
        with pytest.raises(ParseError) as exc_info:
            check_table_units(lex_units("12~F1345"), Table.C, "12~F1345")
        assert exc_info.value.code is ErrorCode.ODD_TABLE_C_RUN
        assert "even number" in exc_info.value.message

    def test_table_c_only_fnc1(self):
        with pytest.raises(ParseError) as exc_info:
            check_table_units(lex_units("12~F2"), Table.C, "12~F2")
        assert exc_info.value.code is ErrorCode.UNSUPPORTED_FUNCTION
        assert "~F2" in exc_info.value.message

    def test_table_c_rejects_letters(self):
        with pytest.raises(ParseError) as exc_info:
            check_table_units(lex_units("1a"), Table.C, "1a")
        assert exc_info.value.code is ErrorCode.CHARACTER_NOT_IN_TABLE

    def test_tilde_only_in_b(self):
        """A literal tilde cannot be written in table A."""
        check_table_units(lex_units("~~"), Table.B, "~~")
        with pytest.raises(ParseError) as exc_info:
            check_table_units(lex_units("~~"), Table.A, "~~")
        assert exc_info.value.message == "The Table A doesn't contain the character ~."

    def test_lowercase_not_in_a(self):
        with pytest.raises(ParseError) as exc_info:
            check_table_units(lex_units("Abc"), Table.A, "Abc")
        assert exc_info.value.code is ErrorCode.CHARACTER_NOT_IN_TABLE
        assert "Table A" in exc_info.value.message
        assert "'b'" in exc_info.value.message

    def test_control_not_in_b(self):
        with pytest.raises(ParseError):
            check_table_units(lex_units("\x01"), Table.B, "\x01")
