"""
Segment planner for Code 128.

Chooses, for a sequence of lexed units, the cheapest way to cover them with
tables A, B and C. The search is a shortest path over (position, table)
states: latches are relaxed before each unit, then each unit is emitted in
its own table, in C as a digit pair, or through a one-unit A<->B shift.
Digits pair from the start of each digit run: in "a123" only "12" can be
written in C.

Cost model (weights per unit emitted):
    A, B: 2    C: 1 per digit    latch: 1    shift: 1

Ties on weight are broken by the real number of codewords, then by table
order A, B, C.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .errors import ErrorCode, ParseError, SYMBOLOGY_CODE128
from .tables import TABLES, Table, contains
from .tilde import Unit, UnitKind

logger = logging.getLogger(__name__)


CHAR_SIZE: Dict[Table, int] = {Table.A: 2, Table.B: 2, Table.C: 1}
LATCH_COST = 1
SHIFT_COST = 1

# Number of leading digits that makes the automatic start pick table C
AUTO_C_DIGITS = 4


@dataclass(frozen=True)
class Latch:
    table: Table


@dataclass(frozen=True)
class Shift:
    table: Table


@dataclass(frozen=True)
class EmitChar:
    pass


@dataclass(frozen=True)
class EmitFunction:
    number: int


Operation = Union[Latch, Shift, EmitChar, EmitFunction]

Cost = Tuple[int, int]


@dataclass(frozen=True)
class PlanStep:
    """
    One unit of the plan.

    Attributes:
        unit: The unit covered
        table: Table the unit is written in (the shifted table for a shift)
        operations: Codeword-producing operations performed for this unit.
            The second digit of a table C pair has none.
    """
    unit: Unit
    table: Table
    operations: Tuple[Operation, ...]


@dataclass(frozen=True)
class Plan:
    """Ordered cover of a unit sequence."""
    start_table: Table
    steps: Tuple[PlanStep, ...]
    end_table: Table
    cost: Cost = (0, 0)

    @property
    def body_length(self) -> int:
        """Codewords emitted between the start code and the checksum."""
        return sum(len(step.operations) for step in self.steps)

    @property
    def codeword_count(self) -> int:
        """Start + body + checksum + stop."""
        return self.body_length + 3

    @property
    def operations(self) -> List[Operation]:
        return [op for step in self.steps for op in step.operations]


@dataclass(frozen=True)
class _Node:
    cost: Cost
    table: Table
    parent: Optional["_Node"]
    steps: Tuple[PlanStep, ...]
    pending: Tuple[Operation, ...]


def _add(cost: Cost, weight: int, codewords: int) -> Cost:
    return cost[0] + weight, cost[1] + codewords


def select_start_table(units: Sequence[Unit]) -> Table:
    """
    Pick the start table when the caller did not force one.

    C when the first four units are digits, B when the first unit is
    representable in B, A otherwise.
    """
    leading = units[:AUTO_C_DIGITS]
    if len(leading) == AUTO_C_DIGITS and all(unit.is_digit for unit in leading):
        return Table.C
    if units and units[0].kind is UnitKind.CHAR and not contains(Table.B, units[0].value):
        return Table.A
    return Table.B


def _check_supported(units: Sequence[Unit]) -> None:
    for unit in units:
        if unit.kind is UnitKind.CHAR and not (
            contains(Table.A, unit.value) or contains(Table.B, unit.value)
        ):
            raise ParseError(
                SYMBOLOGY_CODE128,
                f"Character {unit.value!r} not supported.",
                ErrorCode.UNSUPPORTED_CHARACTER,
            )


def _fits(unit: Unit, table: Table) -> bool:
    """Whether a single unit can be written in table A or B."""
    if unit.kind is UnitKind.FUNCTION:
        return True
    if unit.kind is UnitKind.TILDE:
        return table is Table.B
    return contains(table, unit.value)


def _emit_op(unit: Unit) -> Operation:
    if unit.kind is UnitKind.FUNCTION:
        return EmitFunction(unit.function)
    return EmitChar()


def _pair_starts(units: Sequence[Unit]) -> List[bool]:
    """Mark the units that open a table C digit pair."""
    starts = [False] * len(units)
    second = False
    for i, unit in enumerate(units):
        if second:
            second = False
            continue
        if unit.is_digit and i + 1 < len(units) and units[i + 1].is_digit:
            starts[i] = True
            second = True
    return starts


def _relax(states: Dict[Table, _Node], table: Table, node: _Node) -> None:
    current = states.get(table)
    if current is None or node.cost < current.cost:
        states[table] = node


def plan_units(units: Sequence[Unit], start: Table) -> Plan:
    """
    Find the minimum-cost plan covering `units`, beginning in `start`.

    Args:
        units: Lexed units
        start: Table active before the first unit (A, B or C)

    Returns:
        The optimal Plan; its end_table is the latched table after the
        last unit.

    Raises:
        ParseError: If a character exists in none of the tables
    """
    _check_supported(units)
    count = len(units)
    if not count:
        return Plan(start, (), start)

    pair_starts = _pair_starts(units)
    states: List[Dict[Table, _Node]] = [{} for _ in range(count + 1)]
    states[0][start] = _Node((0, 0), start, None, (), ())

    for i in range(count):
        here = states[i]
        if not here:
            continue

        # Latches, relaxed from a snapshot so they never chain
        for source in list(here.values()):
            for target in TABLES:
                if target is source.table:
                    continue
                _relax(here, target, _Node(
                    _add(source.cost, LATCH_COST, 1),
                    target,
                    source.parent,
                    source.steps,
                    source.pending + (Latch(target),),
                ))

        unit = units[i]
        for table in TABLES:
            node = here.get(table)
            if node is None:
                continue

            if table is Table.C:
                if pair_starts[i]:
                    steps = (
                        PlanStep(unit, Table.C, node.pending + (EmitChar(),)),
                        PlanStep(units[i + 1], Table.C, ()),
                    )
                    _relax(states[i + 2], Table.C, _Node(
                        _add(node.cost, 2 * CHAR_SIZE[Table.C], 1),
                        Table.C, node, steps, (),
                    ))
                elif unit.is_fnc1:
                    steps = (PlanStep(unit, Table.C, node.pending + (EmitFunction(1),)),)
                    _relax(states[i + 1], Table.C, _Node(
                        _add(node.cost, CHAR_SIZE[Table.C], 1),
                        Table.C, node, steps, (),
                    ))
                continue

            if _fits(unit, table):
                steps = (PlanStep(unit, table, node.pending + (_emit_op(unit),)),)
                _relax(states[i + 1], table, _Node(
                    _add(node.cost, CHAR_SIZE[table], 1),
                    table, node, steps, (),
                ))
            else:
                other = Table.B if table is Table.A else Table.A
                if _fits(unit, other):
                    steps = (PlanStep(
                        unit, other, node.pending + (Shift(other), EmitChar()),
                    ),)
                    _relax(states[i + 1], table, _Node(
                        _add(node.cost, SHIFT_COST + CHAR_SIZE[other], 2),
                        table, node, steps, (),
                    ))

    final = states[count]
    best: Optional[_Node] = None
    for table in TABLES:
        node = final.get(table)
        if node is not None and (best is None or node.cost < best.cost):
            best = node

    if best is None:
        raise ParseError(
            SYMBOLOGY_CODE128,
            "The text can't be covered by any table.",
            ErrorCode.UNSUPPORTED_CHARACTER,
        )

    chunks: List[Tuple[PlanStep, ...]] = []
    node: Optional[_Node] = best
    while node is not None:
        chunks.append(node.steps)
        node = node.parent
    steps = tuple(step for chunk in reversed(chunks) for step in chunk)

    plan = Plan(start, steps, best.table, best.cost)
    logger.debug(
        "Planned %d units from table %s to %s, cost %s",
        count, start.value, best.table.value, best.cost,
    )
    return plan


def plan_forced(units: Sequence[Unit], table: Table, current: Optional[Table] = None) -> Plan:
    """
    Plan a segment that must be written entirely in `table`.

    Units are expected to have passed check_table_units for that table.

    Args:
        units: Lexed units of the segment
        table: Imposed table
        current: Table active before the segment, None at the start of a symbol
    """
    prefix: Tuple[Operation, ...] = ()
    if current is not None and current is not table:
        prefix = (Latch(table),)
    start = current if current is not None else table

    steps: List[PlanStep] = []
    cost: Cost = (len(prefix) * LATCH_COST, len(prefix))
    i = 0
    while i < len(units):
        unit = units[i]
        pending = () if steps else prefix
        if table is Table.C and unit.kind is not UnitKind.FUNCTION:
            steps.append(PlanStep(unit, table, pending + (EmitChar(),)))
            steps.append(PlanStep(units[i + 1], table, ()))
            cost = _add(cost, 2 * CHAR_SIZE[table], 1)
            i += 2
        else:
            steps.append(PlanStep(unit, table, pending + (_emit_op(unit),)))
            cost = _add(cost, CHAR_SIZE[table], 1)
            i += 1

    return Plan(start, tuple(steps), table, cost)
