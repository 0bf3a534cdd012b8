"""
Core encoding modules: Code 128 engine and GS1-128 layer.
"""

from .errors import ErrorCode, ParseError
from .tables import Table
from .tilde import Unit, UnitKind, lex_units
from .planner import Plan, PlanStep, Latch, Shift, EmitChar, EmitFunction, plan_units
from .assembler import Frame, assemble
from .checksum import calculate_checksum
from .encoder import encode_code128, Code128Encoder, EncodeOptions
from .ai_dictionary_loader import load_ai_registry, AIDefinition, AIRegistry, DataKind
from .gs1128 import (
    encode_gs1,
    get_ai_content_checksum,
    AIParser,
    GS1128Encoder,
    GS1Options,
    GS1Input,
    GS1Composite,
    ParsedField,
)

__all__ = [
    "ErrorCode",
    "ParseError",
    "Table",
    "Unit",
    "UnitKind",
    "lex_units",
    "Plan",
    "PlanStep",
    "Latch",
    "Shift",
    "EmitChar",
    "EmitFunction",
    "plan_units",
    "Frame",
    "assemble",
    "calculate_checksum",
    "encode_code128",
    "Code128Encoder",
    "EncodeOptions",
    "load_ai_registry",
    "AIDefinition",
    "AIRegistry",
    "DataKind",
    "encode_gs1",
    "get_ai_content_checksum",
    "AIParser",
    "GS1128Encoder",
    "GS1Options",
    "GS1Input",
    "GS1Composite",
    "ParsedField",
]
