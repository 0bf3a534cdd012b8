"""
Stream assembler: turns plans into the final codeword sequence.

    START  body...  CHECKSUM  STOP

Latches change the active table until the next latch. A shift writes
exactly one unit in the other table and the active table is left as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .checksum import calculate_checksum, checksum_text
from .errors import ErrorCode, ParseError, SYMBOLOGY_CODE128
from .planner import EmitChar, EmitFunction, Latch, Plan, PlanStep, Shift
from .tables import (
    LATCH_CODES,
    SHIFT_CODES,
    START_CODES,
    STOP,
    Table,
    char_codeword,
    function_codeword,
    pair_codeword,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """
    A complete symbol, ready for bar pattern lookup.

    Attributes:
        codewords: Start code, data, checksum and stop, each in 0..106
        label: Human-readable text printed under the bars
        last_table: Table active at the last emitted character
        start_table: Table selected by the start code
        text: The text that was encoded (tilde-escaped composite for GS1-128)
    """
    codewords: Tuple[int, ...]
    label: str
    last_table: Table
    start_table: Table
    text: str = ''

    @property
    def checksum(self) -> int:
        return self.codewords[-2]

    @property
    def data_codewords(self) -> Tuple[int, ...]:
        """Codewords between the start code and the checksum."""
        return self.codewords[1:-2]

    @property
    def checksum_text(self) -> Optional[str]:
        return checksum_text(self.checksum, self.last_table)

    def compute_checksum(self) -> int:
        """Recompute the checksum from the start and data codewords."""
        return calculate_checksum(self.codewords[:-2])

    def __len__(self) -> int:
        return len(self.codewords)


def assemble_steps(steps: Sequence[PlanStep], table: Table) -> Tuple[List[int], Table]:
    """
    Emit the codewords of `steps`, starting with `table` active.

    Returns:
        (codewords, table active afterwards)
    """
    codewords: List[int] = []
    for index, step in enumerate(steps):
        shifted: Optional[Table] = None
        for op in step.operations:
            if isinstance(op, Latch):
                codewords.append(LATCH_CODES[(table, op.table)])
                table = op.table
            elif isinstance(op, Shift):
                codewords.append(SHIFT_CODES[(table, op.table)])
                shifted = op.table
            elif isinstance(op, EmitFunction):
                codewords.append(function_codeword(shifted or table, op.number))
                shifted = None
            elif isinstance(op, EmitChar):
                active = shifted or table
                if active is Table.C:
                    if index + 1 >= len(steps):
                        raise ParseError(
                            SYMBOLOGY_CODE128,
                            f"Missing the second digit of the pair starting with {step.unit.value!r}.",
                            ErrorCode.ODD_TABLE_C_RUN,
                        )
                    codewords.append(pair_codeword(step.unit.value + steps[index + 1].unit.value))
                else:
                    codewords.append(char_codeword(active, step.unit.value))
                shifted = None
    return codewords, table


def assemble(plans: Sequence[Plan]) -> Tuple[List[int], Table]:
    """
    Assemble consecutive plans into one symbol.

    The first plan's start table selects the start code; each following plan
    continues from the table the previous one left active.

    Returns:
        (codewords including start, checksum and stop, last table)
    """
    if not plans:
        raise ValueError("Nothing to assemble")

    table = plans[0].start_table
    codewords = [START_CODES[table]]
    for plan in plans:
        body, table = assemble_steps(plan.steps, table)
        codewords.extend(body)

    checksum = calculate_checksum(codewords)
    codewords.append(checksum)
    codewords.append(STOP)

    logger.debug("Assembled %d codewords, checksum %d, last table %s",
                 len(codewords), checksum, table.value)
    return codewords, table
