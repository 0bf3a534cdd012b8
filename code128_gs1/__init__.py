"""
Code 128 / GS1-128 Encoder

Turns text into the codeword stream of a Code 128 symbol, choosing table
switches (A, B, C, shifts) for the shortest symbol, and builds GS1-128
symbols from Application Identifier fields.

Based on ISO/IEC 15417 and the GS1 General Specifications.
"""

from .core.errors import ErrorCode, ParseError
from .core.tables import Table
from .core.assembler import Frame
from .core.encoder import encode_code128, Code128Encoder, EncodeOptions
from .core.ai_dictionary_loader import (
    load_ai_registry,
    save_ai_registry,
    AIDefinition,
    AIRegistry,
    DataKind,
)
from .core.gs1128 import (
    encode_gs1,
    get_ai_content_checksum,
    GS1128Encoder,
    GS1Options,
    GS1Input,
    GS1Composite,
    ParsedField,
)
from .validators.validators import (
    validate_check_digit,
    calculate_check_digit_mod10,
)
from .formatters.json_formatter import (
    frame_to_dict,
    frame_to_json,
)

__version__ = "1.0.0"
__all__ = [
    "ErrorCode",
    "ParseError",
    "Table",
    "Frame",
    "encode_code128",
    "Code128Encoder",
    "EncodeOptions",
    "load_ai_registry",
    "save_ai_registry",
    "AIDefinition",
    "AIRegistry",
    "DataKind",
    "encode_gs1",
    "get_ai_content_checksum",
    "GS1128Encoder",
    "GS1Options",
    "GS1Input",
    "GS1Composite",
    "ParsedField",
    "validate_check_digit",
    "calculate_check_digit_mod10",
    "frame_to_dict",
    "frame_to_json",
]
