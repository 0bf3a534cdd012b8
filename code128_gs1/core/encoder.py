"""
Code 128 encoder.

Pipeline, threaded through an immutable EncodeContext:

    text -> lex_units -> plan_units / plan_forced -> assemble -> Frame

An encoder instance holds only its options; every call builds its own
context, so one instance can be shared between threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .assembler import Frame, assemble
from .errors import ErrorCode, ParseError, SYMBOLOGY_CODE128
from .planner import Plan, plan_forced, plan_units, select_start_table
from .tables import Table
from .tilde import Unit, check_table_units, lex_units

logger = logging.getLogger(__name__)


TableHint = Union[Table, str, None]
Segment = Tuple[TableHint, str]


@dataclass
class EncodeOptions:
    """
    Configuration options for Code 128 encoding.

    Attributes:
        start: Table to start in, or Table.AUTO to pick from the text
        tilde: Interpret `~~` and `~F1`-`~F4` escapes
    """
    start: Table = Table.AUTO
    tilde: bool = True

    def __post_init__(self):
        self.start = Table.parse(self.start)


@dataclass(frozen=True)
class EncodeContext:
    """State of one encode call. Each stage returns a new context."""
    segments: Tuple[Tuple[Table, str], ...]
    start: Table = Table.AUTO
    tilde: bool = True
    label: Optional[str] = None
    units: Tuple[Tuple[Unit, ...], ...] = ()
    plans: Tuple[Plan, ...] = ()
    frame: Optional[Frame] = None

    @property
    def text(self) -> str:
        return ''.join(text for _, text in self.segments)


def _normalize_segments(segments: Iterable[Segment]) -> Tuple[Tuple[Table, str], ...]:
    normalized = []
    for hint, text in segments:
        if not isinstance(text, str):
            raise TypeError(f"Segment text must be a string, got {type(text).__name__}")
        if text:
            normalized.append((Table.parse(hint), text))
    return tuple(normalized)


def lex_stage(context: EncodeContext) -> EncodeContext:
    units = tuple(lex_units(text, context.tilde) for _, text in context.segments)
    return replace(context, units=units)


def plan_stage(context: EncodeContext) -> EncodeContext:
    plans: List[Plan] = []
    current: Optional[Table] = None
    for (hint, text), units in zip(context.segments, context.units):
        if hint is Table.AUTO:
            if current is not None:
                start = current
            elif context.start is not Table.AUTO:
                start = context.start
            else:
                start = select_start_table(units)
            plan = plan_units(units, start)
        else:
            check_table_units(units, hint, text)
            plan = plan_forced(units, hint, current)
        plans.append(plan)
        current = plan.end_table
    return replace(context, plans=tuple(plans))


def assemble_stage(context: EncodeContext) -> EncodeContext:
    codewords, last_table = assemble(context.plans)
    label = context.label if context.label is not None else context.text
    frame = Frame(
        codewords=tuple(codewords),
        label=label,
        last_table=last_table,
        start_table=context.plans[0].start_table,
        text=context.text,
    )
    return replace(context, frame=frame)


class Code128Encoder:
    """
    Code 128 encoder with automatic table optimisation.

    Example:
        >>> frame = Code128Encoder().encode("a123")
        >>> frame.codewords
        (104, 65, 17, 18, 19, 24, 106)
    """

    symbology = SYMBOLOGY_CODE128

    def __init__(self, options: Optional[EncodeOptions] = None):
        self.options = options or EncodeOptions()

    def encode(self, text: str, start: TableHint = None, label: Optional[str] = None) -> Frame:
        """
        Encode `text`, optimising table switches over the whole text.

        Args:
            text: Text to encode
            start: Table the symbol starts in; defaults to the encoder's
                start option. The rest of the text is still optimised.
            label: Label to attach instead of the text itself
        """
        return self.encode_segments([(Table.AUTO, text)], start=start, label=label)

    def encode_segments(
        self,
        segments: Sequence[Segment],
        start: TableHint = None,
        label: Optional[str] = None,
    ) -> Frame:
        """
        Encode consecutive segments, each with its own table hint.

        A segment with a table is written entirely in that table; a segment
        with None or Table.AUTO is optimised, continuing from the table the
        previous segment ended in. `start` only applies when the first
        segment is optimised.
        """
        context = EncodeContext(
            segments=_normalize_segments(segments),
            start=self.options.start if start is None else Table.parse(start),
            tilde=self.options.tilde,
            label=label,
        )
        if not context.segments:
            raise ParseError(self.symbology, "No data has been entered.", ErrorCode.NO_DATA)

        for stage in (lex_stage, plan_stage, assemble_stage):
            context = stage(context)

        frame = context.frame
        logger.debug("Encoded %r in %d codewords", context.text, len(frame.codewords))
        return frame


def encode_code128(
    text: str,
    *,
    options: Optional[EncodeOptions] = None
) -> Frame:
    """
    Encode text as Code 128.

    Main entry point for the Code 128 engine.

    Args:
        text: Text to encode; `~~` and `~Fn` escapes are honoured unless
            disabled in the options
        options: Optional encoding configuration

    Returns:
        Frame with codewords, label and last table

    Examples:
        >>> encode_code128("123456").codewords
        (105, 12, 34, 56, 44, 106)
    """
    return Code128Encoder(options).encode(text)
