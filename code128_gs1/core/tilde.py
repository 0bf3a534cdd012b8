"""
Tilde escape lexer for Code 128 input.

Splits raw text into units before any table is chosen:
- a literal character
- `~~`, a literal tilde (only encodable in table B)
- `~F1` to `~F4`, a function code

With tilde processing disabled every character is a literal unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from .errors import ErrorCode, ParseError, SYMBOLOGY_CODE128
from .tables import DIGITS, Table, contains, supports_function


TILDE = '~'


class UnitKind(str, Enum):
    CHAR = "char"
    TILDE = "tilde"
    FUNCTION = "function"


@dataclass(frozen=True)
class Unit:
    """
    One lexed item.

    Attributes:
        kind: What the unit stands for
        value: The character to encode ('~' for an escaped tilde, '' for functions)
        function: FNC number (1-4) for function units, 0 otherwise
        position: Offset of the unit in the source text
    """
    kind: UnitKind
    value: str = ''
    function: int = 0
    position: int = 0

    @property
    def is_digit(self) -> bool:
        return self.kind is UnitKind.CHAR and self.value in DIGITS

    @property
    def is_fnc1(self) -> bool:
        return self.kind is UnitKind.FUNCTION and self.function == 1

    @property
    def source(self) -> str:
        """The text this unit was lexed from."""
        if self.kind is UnitKind.FUNCTION:
            return f"~F{self.function}"
        if self.kind is UnitKind.TILDE:
            return '~~'
        return self.value


def extract_tilde(text: str, position: int) -> Tuple[Unit, int]:
    """
    Read the escape sequence starting at `position` (which holds a '~').

    Returns:
        (unit, number of characters consumed)
    """
    following = text[position + 1:position + 2]
    if following == TILDE:
        return Unit(UnitKind.TILDE, TILDE, 0, position), 2

    if following == 'F':
        number = text[position + 2:position + 3]
        if number not in ('1', '2', '3', '4'):
            raise ParseError(
                SYMBOLOGY_CODE128,
                "Bad ~F. You must provide a number from 1 to 4.",
                ErrorCode.BAD_TILDE,
            )
        return Unit(UnitKind.FUNCTION, '', int(number), position), 3

    raise ParseError(
        SYMBOLOGY_CODE128,
        "Wrong code after the ~.",
        ErrorCode.BAD_TILDE,
    )


def lex_units(text: str, tilde: bool = True) -> Tuple[Unit, ...]:
    """
    Lex `text` into units, left to right.

    Args:
        text: Raw input
        tilde: Whether `~` starts an escape sequence

    Returns:
        Ordered units covering the whole text
    """
    if not tilde:
        return tuple(Unit(UnitKind.CHAR, char, 0, i) for i, char in enumerate(text))

    units: List[Unit] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == TILDE:
            unit, consumed = extract_tilde(text, i)
            units.append(unit)
            i += consumed
        else:
            units.append(Unit(UnitKind.CHAR, char, 0, i))
            i += 1
    return tuple(units)


def literal_runs(units: Sequence[Unit]) -> Iterable[str]:
    """Yield the runs of literal characters between function units."""
    run: List[str] = []
    for unit in units:
        if unit.kind is UnitKind.FUNCTION:
            if run:
                yield ''.join(run)
            run = []
        else:
            run.append(unit.value)
    if run:
        yield ''.join(run)


def check_table_units(units: Sequence[Unit], table: Table, text: str) -> None:
    """
    Verify that every unit can be written in `table` without switching.

    Used for segments whose table is imposed by the caller.

    Raises:
        ParseError: On the first unit the table cannot hold
    """
    for unit in units:
        if unit.kind is UnitKind.TILDE and table is not Table.B:
            raise ParseError(
                SYMBOLOGY_CODE128,
                f"The Table {table.value} doesn't contain the character ~.",
                ErrorCode.CHARACTER_NOT_IN_TABLE,
            )
        if unit.kind is UnitKind.FUNCTION and not supports_function(table, unit.function):
            raise ParseError(
                SYMBOLOGY_CODE128,
                f"The Table {table.value} doesn't contain the function ~F{unit.function}.",
                ErrorCode.UNSUPPORTED_FUNCTION,
            )
        if unit.kind is UnitKind.CHAR and not contains(table, unit.value):
            raise ParseError(
                SYMBOLOGY_CODE128,
                f"The text '{text}' can't be parsed with the Table {table.value}. "
                f"The character '{unit.value}' is not allowed.",
                ErrorCode.CHARACTER_NOT_IN_TABLE,
            )

    if table is Table.C:
        for run in literal_runs(units):
            if len(run) % 2:
                raise ParseError(
                    SYMBOLOGY_CODE128,
                    f"The text '{text}' must have an even number of character "
                    f"to be encoded in Table C.",
                    ErrorCode.ODD_TABLE_C_RUN,
                )
