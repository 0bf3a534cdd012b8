"""
Error taxonomy shared by the Code 128 engine and the GS1-128 layer.

Every failure is synchronous and total: an encode call either returns a
complete Frame or raises ParseError. The `code` attribute names the cause
so callers (and tests) can tell them apart without matching on messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes."""
    NO_DATA = "NO_DATA"
    UNSUPPORTED_CHARACTER = "UNSUPPORTED_CHARACTER"
    CHARACTER_NOT_IN_TABLE = "CHARACTER_NOT_IN_TABLE"
    BAD_TILDE = "BAD_TILDE"
    ODD_TABLE_C_RUN = "ODD_TABLE_C_RUN"
    UNSUPPORTED_FUNCTION = "UNSUPPORTED_FUNCTION"
    UNKNOWN_AI = "UNKNOWN_AI"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    INVALID_LENGTH = "INVALID_LENGTH"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_CHECK_DIGIT = "INVALID_CHECK_DIGIT"
    INVALID_DECIMAL = "INVALID_DECIMAL"
    TOO_LONG = "TOO_LONG"


SYMBOLOGY_CODE128 = "code128"
SYMBOLOGY_GS1128 = "gs1128"


class ParseError(Exception):
    """
    Raised when the input cannot be turned into a codeword stream.

    Attributes:
        symbology: Which layer rejected the input ("code128" or "gs1128")
        message: Human-readable reason
        code: ErrorCode naming the cause
        ai: Application Identifier involved, if any
    """

    def __init__(
        self,
        symbology: str,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_FORMAT,
        ai: Optional[str] = None,
    ):
        super().__init__(f"[{symbology}] {message}")
        self.symbology = symbology
        self.message = message
        self.code = code
        self.ai = ai

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            'symbology': self.symbology,
            'code': self.code.value,
            'message': self.message,
            'ai': self.ai,
        }
