"""
Code 128 checksum: weighted positional sum modulo 103.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .tables import Table, display_char

MODULO = 103


def calculate_checksum(codewords: Sequence[int]) -> int:
    """
    Compute the check codeword.

    Args:
        codewords: Start codeword followed by every data codeword, without
            checksum or stop

    Returns:
        (start + sum(codeword[i] * i)) mod 103
    """
    if not codewords:
        raise ValueError("At least the start codeword is required")

    total = codewords[0]
    for position, value in enumerate(codewords[1:], start=1):
        total += value * position
    return total % MODULO


def checksum_text(value: int, table: Table) -> Optional[str]:
    """Display form of the checksum in the table active at the end of the symbol."""
    return display_char(table, value)
