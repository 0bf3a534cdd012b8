"""
Tests for the segment planner.

Verifies automatic start selection, the global optimum over latches and
shifts, and the shape of the produced plans.
"""

import pytest
from code128_gs1 import ErrorCode, ParseError, Table
from code128_gs1.core.planner import (
    EmitChar,
    EmitFunction,
    Latch,
    Shift,
    plan_forced,
    plan_units,
    select_start_table,
)
from code128_gs1.core.tilde import lex_units


def plan(text, start=None):
    units = lex_units(text)
    return plan_units(units, start or select_start_table(units))


class TestStartSelection:
    """Automatic start table."""

    @pytest.mark.parametrize("text,expected", [
        ("1234", Table.C),
        ("12345678", Table.C),
        ("123a", Table.B),
        ("12", Table.B),
        ("abc", Table.B),
        ("ABC", Table.B),
        ("\x01ABC", Table.A),
        ("~F1123", Table.B),
        ("~~", Table.B),
    ])
    def test_start_table(self, text, expected):
        assert select_start_table(lex_units(text)) is expected


class TestPlanUnits:
    """Minimum-cost cover of the units."""

    def test_table_b_text_has_no_switches(self):
        """Text entirely in table B is written without latch or shift."""
        result = plan("Hello, World!")
        assert result.start_table is Table.B
        assert result.end_table is Table.B
        assert all(step.operations == (EmitChar(),) for step in result.steps)
        assert result.codeword_count == len("Hello, World!") + 3

    @pytest.mark.parametrize("digits", ["1234", "123456", "00998877665544332211"])
    def test_even_digits_in_c(self, digits):
        """An even digit string is written in C, two digits per codeword."""
        result = plan(digits)
        assert result.start_table is Table.C
        assert result.codeword_count == len(digits) // 2 + 3
        assert not any(isinstance(op, (Latch, Shift)) for op in result.operations)

    def test_a123_stays_in_b(self):
        """A two-digit run is not worth a latch pair."""
        result = plan("a123")
        assert result.start_table is Table.B
        assert [step.table for step in result.steps] == [Table.B] * 4
        assert result.codeword_count == 7

    def test_trailing_digit_run_latches_to_c(self):
        """A later digit run justifies a latch into C."""
        result = plan("ab12345678")
        assert result.operations[2] == Latch(Table.C)
        assert result.end_table is Table.C
        assert result.codeword_count == 2 + 1 + 4 + 3

    def test_c_pair_second_digit_has_no_operations(self):
        result = plan("1234")
        assert result.steps[0].operations == (EmitChar(),)
        assert result.steps[1].operations == ()

    def test_shift_for_single_character(self):
        """One character of the other table is shifted, not latched."""
        result = plan("\x01a\x02")
        assert result.start_table is Table.A
        assert result.steps[1].operations == (Shift(Table.B), EmitChar())
        assert result.steps[1].table is Table.B
        assert result.end_table is Table.A

    def test_latch_for_several_characters(self):
        result = plan("\x01abc")
        assert result.steps[1].operations == (Latch(Table.B), EmitChar())
        assert result.end_table is Table.B

    def test_odd_digit_run_leaves_c(self):
        """The last digit of an odd run goes back to A, first in table order."""
        result = plan("12345")
        assert result.steps[4].operations == (Latch(Table.A), EmitChar())
        assert result.end_table is Table.A

    def test_fnc1_in_c(self):
        result = plan("~F10112", start=Table.C)
        assert result.steps[0].operations == (EmitFunction(1),)
        assert result.end_table is Table.C

    def test_literal_tilde_from_a_is_shifted(self):
        result = plan("~~", start=Table.A)
        assert result.steps[0].operations == (Shift(Table.B), EmitChar())

    def test_unsupported_character(self):
        with pytest.raises(ParseError) as exc_info:
            plan("abcé")
        assert exc_info.value.code is ErrorCode.UNSUPPORTED_CHARACTER
        assert "not supported" in exc_info.value.message

    def test_empty_units(self):
        result = plan_units((), Table.B)
        assert result.steps == ()
        assert result.end_table is Table.B


class TestPlanForced:
    """Segments with an imposed table."""

    def test_latch_when_table_differs(self):
        result = plan_forced(lex_units("1234"), Table.C, Table.B)
        assert result.start_table is Table.B
        assert result.steps[0].operations == (Latch(Table.C), EmitChar())
        assert result.body_length == 3

    def test_no_latch_at_symbol_start(self):
        result = plan_forced(lex_units("ABC"), Table.A)
        assert result.start_table is Table.A
        assert result.operations == [EmitChar()] * 3

    def test_functions(self):
        result = plan_forced(lex_units("~F112"), Table.C)
        assert result.operations == [EmitFunction(1), EmitChar()]
