"""
Validation modules for GS1-128 content.
"""

from .validators import (
    validate_check_digit,
    validate_numeric_content,
    validate_date_content,
    validate_datetime_content,
    validate_content_length,
    calculate_check_digit_mod10,
    ValidationResult,
    NUMERIC,
)

__all__ = [
    "validate_check_digit",
    "validate_numeric_content",
    "validate_date_content",
    "validate_datetime_content",
    "validate_content_length",
    "calculate_check_digit_mod10",
    "ValidationResult",
    "NUMERIC",
]
