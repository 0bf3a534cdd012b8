"""
GS1 Content Validation Functions

Conformity checks applied to Application Identifier content before it is
written into a GS1-128 symbol:
- Check digit calculation and validation (Mod10 for GTIN, SSCC, GLN, etc.)
- Numeric content, with an optional decimal point
- Dates (YYMMDD, day 00 allowed) and date-times (YYMMDDHH[MM[SS]])
- Content length against the AI limits

Based on GS1 General Specifications.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


NUMERIC = frozenset('0123456789')

_DECIMAL_RE = re.compile(r'^[0-9.]+$')
_DATE_RE = re.compile(r'^[0-9]{6}$')
_DATETIME_RE = re.compile(r'^[0-9]{8,12}$')


def calculate_check_digit_mod10(digits: str) -> int:
    """
    Calculate GS1 Mod10 check digit.

    Algorithm (GS1 General Specifications):
    1. From right to left, alternate multipliers 3 and 1
    2. Sum all products
    3. Check digit = (10 - (sum mod 10)) mod 10

    Args:
        digits: Numeric string without check digit

    Returns:
        Calculated check digit (0-9)
    """
    if not digits or not digits.isdigit():
        raise ValueError("Input must be a non-empty numeric string")

    total = 0
    for i, digit in enumerate(reversed(digits)):
        multiplier = 3 if i % 2 == 0 else 1
        total += int(digit) * multiplier

    return (10 - (total % 10)) % 10


def validate_check_digit(value: str) -> ValidationResult:
    """
    Validate the trailing GS1 check digit of `value`.

    Args:
        value: The complete value including check digit

    Returns:
        ValidationResult with the expected digit in meta
    """
    result = ValidationResult(valid=True)

    if not value or not value.isdigit():
        result.valid = False
        result.errors.append("Value must be numeric for check digit validation")
        return result

    if len(value) < 2:
        result.valid = False
        result.errors.append("Value too short for check digit validation")
        return result

    calculated_check = calculate_check_digit_mod10(value[:-1])
    provided_check = int(value[-1])

    result.meta['calculated_check_digit'] = calculated_check
    result.meta['provided_check_digit'] = provided_check
    result.meta['check_digit_valid'] = provided_check == calculated_check

    if provided_check != calculated_check:
        result.valid = False
        result.errors.append(
            f"Check digit mismatch: expected {calculated_check}, got {provided_check}"
        )

    return result


def validate_numeric_content(value: str) -> ValidationResult:
    """
    Validate numeric content. A comma is read as a decimal point.

    The normalized value is returned in meta['normalized'].
    """
    result = ValidationResult(valid=True)
    normalized = value.replace(',', '.')
    result.meta['normalized'] = normalized

    if not _DECIMAL_RE.match(normalized):
        result.valid = False
        result.errors.append(f"Value must be numeric: {value!r}")
        return result

    points = normalized.count('.')
    result.meta['decimal_points'] = points
    if points > 1:
        result.valid = False
        result.errors.append(f"Value contains {points} decimal points")

    return result


def validate_date_content(value: str) -> ValidationResult:
    """
    Validate a YYMMDD date. Day 00 is accepted (month-only dates).
    """
    result = ValidationResult(valid=True)

    if not _DATE_RE.match(value):
        result.valid = False
        result.errors.append(f"Date must be 6 digits, got {value!r}")
        return result

    mm = int(value[2:4])
    dd = int(value[4:6])

    if mm < 1 or mm > 12:
        result.valid = False
        result.errors.append(f"Invalid month: {mm}")
        return result

    if dd > 31:
        result.valid = False
        result.errors.append(f"Invalid day: {dd}")
        return result

    result.meta['year'] = int(value[0:2])
    result.meta['month'] = mm
    result.meta['day'] = dd
    return result


def validate_datetime_content(value: str) -> ValidationResult:
    """
    Validate a YYMMDDHH date-time with optional minutes and seconds.
    """
    result = ValidationResult(valid=True)

    if not _DATETIME_RE.match(value):
        result.valid = False
        result.errors.append(f"Date-time must be 8 to 12 digits, got {value!r}")
        return result

    mm = int(value[2:4])
    dd = int(value[4:6])
    hh = int(value[6:8])
    minute = int(value[8:10]) if len(value) >= 10 else None
    second = int(value[10:12]) if len(value) >= 12 else None

    if mm < 1 or mm > 12:
        result.errors.append(f"Invalid month: {mm}")
    if dd > 31:
        result.errors.append(f"Invalid day: {dd}")
    if hh > 23:
        result.errors.append(f"Invalid hour: {hh}")
    if minute is not None and minute > 59:
        result.errors.append(f"Invalid minute: {minute}")
    if second is not None and second > 59:
        result.errors.append(f"Invalid second: {second}")

    if result.errors:
        result.valid = False
        return result

    result.meta['month'] = mm
    result.meta['day'] = dd
    result.meta['hour'] = hh
    if minute is not None:
        result.meta['minute'] = minute
    if second is not None:
        result.meta['second'] = second
    return result


def validate_content_length(
    value: str,
    min_length: int,
    max_length: int,
    check_digit: bool = False
) -> ValidationResult:
    """
    Validate content length against AI limits.

    When the AI ends with a check digit, one character less than the
    minimum is accepted since the digit can be computed.
    """
    result = ValidationResult(valid=True)
    minimum = min_length - 1 if check_digit else min_length

    result.meta['length'] = len(value)
    if len(value) < minimum:
        result.valid = False
        result.errors.append(f"Length {len(value)} below minimum {minimum}")
    elif len(value) > max_length:
        result.valid = False
        result.errors.append(f"Length {len(value)} above maximum {max_length}")

    return result
