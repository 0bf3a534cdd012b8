"""
Code 128 symbol tables.

Static per-table alphabets (A, B, C) and the codeword values of the
special characters: start codes, latches, shifts and FNC1-FNC4.

Table A: space, digits, capitals, punctuation and ASCII 0-31
Table B: space, digits, capitals, lowercase and punctuation, DEL
Table C: pairs of decimal digits (00-99)

Membership sets and index maps are built once at import time.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from .errors import ErrorCode, ParseError, SYMBOLOGY_CODE128


class Table(str, Enum):
    """Code 128 character tables. AUTO lets the planner pick the start."""
    A = "A"
    B = "B"
    C = "C"
    AUTO = "AUTO"

    @classmethod
    def parse(cls, value) -> "Table":
        """Accept a Table, 'A'/'B'/'C'/'AUTO' (any case) or None for AUTO."""
        if value is None:
            return cls.AUTO
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(
                f"The starting table must be A, B, C or AUTO, got {value!r}"
            ) from None


# Tables the planner can actually emit in, in tie-break order
TABLES: Tuple[Table, ...] = (Table.A, Table.B, Table.C)

KEYS_A = (
    ' !"#$%&\'()*+,-./0123456789:;<=>?@'
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_'
    + ''.join(chr(i) for i in range(32))
)

KEYS_B = (
    ' !"#$%&\'()*+,-./0123456789:;<=>?@'
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_'
    '`abcdefghijklmnopqrstuvwxyz{|}~'
    + chr(127)
)

KEYS_C = '0123456789'

ALPHABETS: Dict[Table, str] = {
    Table.A: KEYS_A,
    Table.B: KEYS_B,
    Table.C: KEYS_C,
}

MEMBERS: Dict[Table, FrozenSet[str]] = {
    table: frozenset(keys) for table, keys in ALPHABETS.items()
}

_INDEX: Dict[Table, Dict[str, int]] = {
    Table.A: {char: i for i, char in enumerate(KEYS_A)},
    Table.B: {char: i for i, char in enumerate(KEYS_B)},
}

DIGITS = MEMBERS[Table.C]

# Special codewords
FNC3 = 96
FNC2 = 97
SHIFT = 98
CODE_C = 99
CODE_B = 100
CODE_A = 101
FNC1 = 102
FNC4_A = 101
FNC4_B = 100

START_A = 103
START_B = 104
START_C = 105
STOP = 106

START_CODES: Dict[Table, int] = {
    Table.A: START_A,
    Table.B: START_B,
    Table.C: START_C,
}

LATCH_CODES: Dict[Tuple[Table, Table], int] = {
    (Table.A, Table.B): CODE_B,
    (Table.A, Table.C): CODE_C,
    (Table.B, Table.A): CODE_A,
    (Table.B, Table.C): CODE_C,
    (Table.C, Table.A): CODE_A,
    (Table.C, Table.B): CODE_B,
}

# Shift only exists between A and B
SHIFT_CODES: Dict[Tuple[Table, Table], int] = {
    (Table.A, Table.B): SHIFT,
    (Table.B, Table.A): SHIFT,
}

FUNCTION_CODES: Dict[Table, Dict[int, int]] = {
    Table.A: {1: FNC1, 2: FNC2, 3: FNC3, 4: FNC4_A},
    Table.B: {1: FNC1, 2: FNC2, 3: FNC3, 4: FNC4_B},
    Table.C: {1: FNC1},
}


def contains(table: Table, char: str) -> bool:
    """True if `char` can be encoded directly in `table`."""
    return char in MEMBERS[table]


def supports_function(table: Table, number: int) -> bool:
    return number in FUNCTION_CODES[table]


def char_codeword(table: Table, char: str) -> int:
    """Codeword of a single character in table A or B."""
    try:
        return _INDEX[table][char]
    except KeyError:
        raise ParseError(
            SYMBOLOGY_CODE128,
            f"The Table {table.value} doesn't contain the character {char!r}.",
            ErrorCode.CHARACTER_NOT_IN_TABLE,
        ) from None


def pair_codeword(digits: str) -> int:
    """Codeword of a two-digit pair in table C."""
    if len(digits) != 2 or not all(d in DIGITS for d in digits):
        raise ParseError(
            SYMBOLOGY_CODE128,
            f"The Table C can only encode pairs of digits, got {digits!r}.",
            ErrorCode.CHARACTER_NOT_IN_TABLE,
        )
    return int(digits)


def function_codeword(table: Table, number: int) -> int:
    """Codeword of FNC`number` in `table`."""
    try:
        return FUNCTION_CODES[table][number]
    except KeyError:
        raise ParseError(
            SYMBOLOGY_CODE128,
            f"The Table {table.value} doesn't contain the function ~F{number}.",
            ErrorCode.UNSUPPORTED_FUNCTION,
        ) from None


def display_char(table: Table, value: int) -> Optional[str]:
    """
    Display form of a codeword value as used for the checksum on labels.

    Table C shows the number itself; A and B show the character at that
    index, or None when the value has no printable counterpart.
    """
    if table is Table.C:
        return str(value)
    keys = ALPHABETS[table]
    if 0 <= value < len(keys):
        return keys[value]
    return None
