"""
GS1-128 layer.

Splits Application Identifier input into fields, checks each field against
the AI registry and composes the tilde-escaped text handed to the Code 128
engine:

    "~F1" + AI + content [+ "~F1"] + AI + content ...

Input forms accepted for one field:
- "(01)12345678901231", optionally followed by more "(AI)content" parts
- "0112345678901231" with AIs found by prefix (4 down to 2 characters)
- ("01", "12345678901231"), an explicit identifier and content

`~F1` inside the input is read as the GS group separator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..validators.validators import (
    calculate_check_digit_mod10,
    validate_content_length,
    validate_date_content,
    validate_datetime_content,
    validate_numeric_content,
)
from .ai_dictionary_loader import (
    PLACEHOLDER,
    AIDefinition,
    AIRegistry,
    DataKind,
    FoundWithPlaceholder,
    LookupResult,
    NotFound,
    load_ai_registry,
)
from .assembler import Frame
from .encoder import Code128Encoder, EncodeOptions
from .errors import ErrorCode, ParseError, SYMBOLOGY_GS1128
from .tables import Table

logger = logging.getLogger(__name__)


GS = '\x1d'
FNC1 = '~F1'

MAX_ID_FORMATTED = 6
MAX_ID_NOT_FORMATTED = 4
MAX_GS1128_CHARS = 48
MAX_DECIMALS = 9

_MISSING_AI_HINT = (
    'Have you installed the default AI with "install_default_identifiers()"? '
    'Or allow unknown identifiers with "allow_unknown_identifier=True".'
)


@dataclass(frozen=True)
class GS1Input:
    """One caller-supplied field: content with an optional explicit AI."""
    content: str
    ai: Optional[str] = None

    def to_text(self) -> str:
        if self.ai is not None:
            return f"({self.ai}){self.content}"
        return self.content


FieldInput = Union[str, GS1Input, Tuple[Optional[str], str]]


@dataclass(frozen=True)
class ParsedField:
    """
    A field as it will be written in the symbol.

    Attributes:
        ai: Resolved AI ('3102' for a 310y field), None for unknown identifiers
        content: Content after normalization (check digit added, decimal point removed)
        source_span: (start, end) offsets in the input item, after `~F1` is read as GS.
            Consecutive fields of one item cover it without gaps or overlaps.
        source_index: Index of the input item the field was read from
        definition: Registry entry governing the field
        checksum_added: The check digit was computed rather than supplied
    """
    ai: Optional[str]
    content: str
    source_span: Tuple[int, int] = (0, 0)
    source_index: int = 0
    definition: Optional[AIDefinition] = None
    checksum_added: bool = False

    @property
    def label(self) -> str:
        if self.ai is None:
            return self.content
        return f"({self.ai}){self.content}"

    def to_dict(self) -> dict:
        return {
            'ai': self.ai,
            'content': self.content,
            'source_span': list(self.source_span),
            'source_index': self.source_index,
            'title': self.definition.title if self.definition else None,
            'checksum_added': self.checksum_added,
        }


@dataclass
class GS1Options:
    """
    Configuration options for GS1-128 encoding.

    Attributes:
        strict_mode: Only insert `~F1` after variable-length fields shorter
            than their maximum. When off, every field but the last is followed
            by `~F1`.
        allow_unknown_identifier: Pass fields without a known AI through unchecked
        no_length_limit: Skip the 48 character limit
        start: Table the symbol starts in
        registry: AI registry to use (default: built-in registry)
        formatted_label: Show AIs in parentheses in the label
    """
    strict_mode: bool = True
    allow_unknown_identifier: bool = False
    no_length_limit: bool = False
    start: Table = Table.C
    registry: Optional[AIRegistry] = None
    formatted_label: bool = True

    def __post_init__(self):
        self.start = Table.parse(self.start)


@dataclass(frozen=True)
class GS1Composite:
    """Result of parsing: the text for the Code 128 engine and its label."""
    text: str
    label: str
    fields: Tuple[ParsedField, ...]

    @property
    def length(self) -> int:
        """Encodable length: each `~F1` counts once, the leading one excluded."""
        return len(_calculable(self.text)) - 1


def _calculable(text: str) -> str:
    return text.replace(FNC1, GS).replace('(', '').replace(')', '')


def get_ai_content_checksum(content: str) -> int:
    """GS1 mod-10 check digit of `content` (given without its check digit)."""
    return calculate_check_digit_mod10(content)


def _to_input(item: FieldInput) -> GS1Input:
    if isinstance(item, GS1Input):
        return item
    if isinstance(item, str):
        return GS1Input(item)
    ai, content = item
    return GS1Input(content, ai)


def normalize_inputs(fields: Union[FieldInput, Iterable[FieldInput]]) -> List[GS1Input]:
    """Accept one field or a sequence of fields in any supported form."""
    if isinstance(fields, (str, GS1Input)):
        return [_to_input(fields)]
    if isinstance(fields, tuple) and len(fields) == 2 and isinstance(fields[1], str) \
            and (fields[0] is None or isinstance(fields[0], str)):
        return [_to_input(fields)]
    return [_to_input(item) for item in fields]


class AIParser:
    """
    Parser for GS1-128 Application Identifier input.

    Fields are read one after the other from each input item; the remainder
    of an item after a field (and one optional GS) is parsed again.
    """

    def __init__(self, registry: AIRegistry, options: Optional[GS1Options] = None):
        self.registry = registry
        self.options = options or GS1Options()

    def _error(self, message: str, code: ErrorCode, ai: Optional[str] = None) -> ParseError:
        return ParseError(SYMBOLOGY_GS1128, message, code, ai)

    def parse(self, fields: Union[FieldInput, Iterable[FieldInput]]) -> Tuple[ParsedField, ...]:
        """Parse every input item into fields."""
        parsed: List[ParsedField] = []
        for index, item in enumerate(normalize_inputs(fields)):
            parsed.extend(self._parse_item(item.to_text(), index))

        if not parsed:
            raise self._error("The input did not result in any data.", ErrorCode.NO_DATA)
        return tuple(parsed)

    def _parse_item(self, text: str, index: int) -> List[ParsedField]:
        normalized = text.replace(FNC1, GS)
        fields: List[ParsedField] = []
        position = 0

        while position < len(normalized):
            start = position
            if normalized[position] == GS:
                position += 1
                if position >= len(normalized):
                    if fields:
                        last = fields[-1]
                        fields[-1] = replace(last, source_span=(last.source_span[0], position))
                    break

            parsed, consumed = self._parse_content(normalized[position:])
            position += consumed
            fields.append(replace(parsed, source_span=(start, position), source_index=index))
            logger.debug("Parsed field ai=%s content=%r", parsed.ai, parsed.content)

        return fields

    def _find_identifier(self, text: str, formatted: bool) -> Tuple[Optional[str], int, LookupResult]:
        """
        Identify the AI at the start of `text`.

        Returns:
            (identifier as written, characters taken by it, lookup result)
            The identifier is None for an allowed unknown identifier.
        """
        if formatted:
            candidate = text[:MAX_ID_FORMATTED].lower()
            pos = candidate.find(')')
            if pos == -1:
                raise self._error(
                    "Identifiers must have no more than 4 characters.",
                    ErrorCode.INVALID_IDENTIFIER,
                )
            if pos < 3:
                raise self._error(
                    "Identifiers must have at least 2 characters.",
                    ErrorCode.INVALID_IDENTIFIER,
                )

            identifier = candidate[1:pos]
            result = self.registry.lookup(identifier)
            if not isinstance(result, NotFound):
                return identifier, pos + 1, result
            if not self.options.allow_unknown_identifier:
                raise self._error(
                    f"The identifier {identifier} doesn't exist. {_MISSING_AI_HINT}",
                    ErrorCode.UNKNOWN_AI,
                    identifier,
                )
            return None, 0, result

        candidate = text[:MAX_ID_NOT_FORMATTED].lower()
        for length in range(len(candidate), 1, -1):
            result = self.registry.lookup(candidate[:length])
            if not isinstance(result, NotFound):
                return candidate[:length], length, result

        if not self.options.allow_unknown_identifier:
            raise self._error(
                f"Error in formatting, can't find an identifier in '{text}'. {_MISSING_AI_HINT}",
                ErrorCode.INVALID_IDENTIFIER,
            )
        return None, 0, NotFound(candidate)

    def _parse_content(self, text: str) -> Tuple[ParsedField, int]:
        """
        Read one field from the start of `text`.

        Returns:
            (field, number of characters of `text` it covers)
        """
        formatted = text.startswith('(')
        identifier, id_len, result = self._find_identifier(text, formatted)

        if identifier is None:
            content = text
            if formatted:
                paren = content.find('(', 1)
                if paren != -1:
                    content = content[:paren]
            separators = 0
            gs = content.find(GS)
            if gs != -1:
                content = content[:gs]
                separators = 1
            return ParsedField(None, content), len(content) + separators

        definition = result.definition
        placeholder = isinstance(result, FoundWithPlaceholder)

        body = text[id_len:]
        n = min(definition.max_length, len(body))
        content = body[:n]
        if placeholder and ('.' in content or ',' in content):
            content = body[:n + 1]

        if formatted:
            paren = content.find('(')
            if paren != -1:
                content = content[:paren]

        separators = 0
        gs = content.find(GS)
        if gs != -1:
            content = content[:gs]
            separators = 1

        content = self._check_conformity(content, identifier, definition)
        self._check_length(content, identifier, definition, placeholder)
        content, checksum_added = self._check_checksum(content, identifier, definition)
        ai, content, decimal_removed = self._check_vars(content, identifier, result)

        consumed = len(content) + id_len - int(checksum_added) + int(decimal_removed) + separators
        field = ParsedField(ai, content, definition=definition, checksum_added=checksum_added)
        return field, consumed

    def _check_conformity(
        self,
        content: str,
        identifier: str,
        definition: AIDefinition
    ) -> str:
        kind = definition.data_kind

        if kind is DataKind.NUMERIC:
            validation = validate_numeric_content(content)
            if validation.meta.get('decimal_points', 0) > 1:
                raise self._error(
                    f'The value of "{identifier}" can only contain one decimal point.',
                    ErrorCode.INVALID_DECIMAL,
                    identifier,
                )
            if not validation.valid:
                raise self._error(
                    f'The value of "{identifier}" must be numerical.',
                    ErrorCode.INVALID_FORMAT,
                    identifier,
                )
            return validation.meta['normalized']

        if kind is DataKind.DATE_TIME:
            if not validate_datetime_content(content).valid:
                raise self._error(
                    f'The value of "{identifier}" must be in YYMMDDHHMMSS format. '
                    f'Some AI might not allow seconds.',
                    ErrorCode.INVALID_FORMAT,
                    identifier,
                )
        elif kind is DataKind.DATE:
            if not validate_date_content(content).valid:
                raise self._error(
                    f'The value of "{identifier}" must be in YYMMDD format.',
                    ErrorCode.INVALID_FORMAT,
                    identifier,
                )

        return content

    def _check_length(
        self,
        content: str,
        identifier: str,
        definition: AIDefinition,
        placeholder: bool
    ) -> None:
        digits = content.replace('.', '') if placeholder else content
        validation = validate_content_length(
            digits, definition.min_length, definition.max_length, definition.has_checksum
        )
        if validation.valid:
            return

        if definition.is_fixed_length:
            message = f'The value of "{identifier}" must contain {definition.min_length} character(s).'
        else:
            message = (
                f'The value of "{identifier}" must contain between '
                f'{definition.min_length} and {definition.max_length} character(s).'
            )
        raise self._error(message, ErrorCode.INVALID_LENGTH, identifier)

    def _check_checksum(
        self,
        content: str,
        identifier: str,
        definition: AIDefinition
    ) -> Tuple[str, bool]:
        if not definition.has_checksum:
            return content, False

        length = len(content)
        if length not in (definition.min_length - 1, definition.min_length):
            return content, False

        payload = content if length == definition.min_length - 1 else content[:-1]
        if not payload.isdigit():
            raise self._error(
                f'The value of "{identifier}" must be numerical.',
                ErrorCode.INVALID_FORMAT,
                identifier,
            )

        checksum = get_ai_content_checksum(payload)
        if length == definition.min_length - 1:
            return content + str(checksum), True

        if content[-1] != str(checksum):
            raise self._error(
                f'The checksum of "({identifier}) {content}" must be: {checksum}',
                ErrorCode.INVALID_CHECK_DIGIT,
                identifier,
            )
        return content, False

    def _check_vars(
        self,
        content: str,
        identifier: str,
        result: LookupResult
    ) -> Tuple[str, str, bool]:
        """
        Resolve the `y` decimal placeholder.

        Returns:
            (resolved AI, content without decimal point, whether a point was removed)
        """
        if not isinstance(result, FoundWithPlaceholder):
            return identifier, content, False

        if result.resolved:
            if '.' in content:
                raise self._error(
                    'If you do not use any "y" variable, you have to insert a whole number.',
                    ErrorCode.INVALID_DECIMAL,
                    identifier,
                )
            return identifier, content, False

        pos = content.find('.')
        if pos == -1:
            pos = len(content) - 1
        decimals = len(content) - (pos + 1)
        if decimals > MAX_DECIMALS:
            raise self._error(
                f'The value of "{identifier}" can\'t have more than {MAX_DECIMALS} decimals.',
                ErrorCode.INVALID_DECIMAL,
                identifier,
            )

        ai = identifier.replace(PLACEHOLDER, str(decimals))
        return ai, content.replace('.', ''), '.' in content

    def compose(self, fields: Sequence[ParsedField]) -> GS1Composite:
        """
        Build the composite text and label from parsed fields.

        A `~F1` follows a field that is not the last one when its content is
        shorter than the AI maximum, or always when strict mode is off. An
        unknown-identifier field that is not last is always followed by one.
        """
        text = FNC1
        labels = []
        count = len(fields)

        for index, field in enumerate(fields):
            last = index + 1 == count
            if self.options.formatted_label:
                labels.append(field.label)
            else:
                labels.append((field.ai or '') + field.content)

            text += (field.ai or '') + field.content

            definition = field.definition
            if definition is not None:
                if (len(field.content) < definition.max_length and not last) or \
                        (not self.options.strict_mode and not last):
                    text += FNC1
            elif self.options.allow_unknown_identifier and field.ai is None and not last:
                text += FNC1

        if not self.options.no_length_limit:
            if len(_calculable(text)) - 1 > MAX_GS1128_CHARS:
                raise self._error(
                    f"The barcode can't contain more than {MAX_GS1128_CHARS} characters.",
                    ErrorCode.TOO_LONG,
                )

        composite = GS1Composite(text, ' '.join(labels), tuple(fields))
        logger.debug("GS1-128 composite %r", composite.text)
        return composite


class GS1128Encoder:
    """
    GS1-128 encoder: AI parsing on top of the Code 128 engine.

    Example:
        >>> encoder = GS1128Encoder()
        >>> encoder.encode("(01)12345678901231").label
        '(01)12345678901231'
    """

    symbology = SYMBOLOGY_GS1128

    def __init__(self, options: Optional[GS1Options] = None):
        self.options = options or GS1Options()
        self.registry: Optional[AIRegistry] = self.options.registry
        if self.registry is None:
            self.install_default_identifiers()

    def install_default_identifiers(self) -> None:
        """Use the built-in GS1 AI registry."""
        self.registry = load_ai_registry()

    def set_application_identifiers(self, definitions: Iterable[AIDefinition]) -> None:
        """Replace the registry with the given definitions."""
        self.registry = AIRegistry(definitions)

    def parse(self, fields: Union[FieldInput, Iterable[FieldInput]]) -> GS1Composite:
        """Parse and compose without encoding."""
        if self.registry is None:
            raise ParseError(self.symbology, "No application identifiers installed.", ErrorCode.UNKNOWN_AI)
        parser = AIParser(self.registry, self.options)
        return parser.compose(parser.parse(fields))

    def encode(self, fields: Union[FieldInput, Iterable[FieldInput]]) -> Frame:
        """
        Encode GS1-128 fields.

        Args:
            fields: A composite string, a GS1Input, an (ai, content) pair or a
                list of those

        Returns:
            Frame whose text is the composite and whose label shows the AIs
        """
        return self.encode_composite(self.parse(fields))

    def encode_composite(self, composite: GS1Composite) -> Frame:
        """Encode an already parsed composite through the Code 128 engine."""
        encoder = Code128Encoder(EncodeOptions(start=self.options.start, tilde=True))
        return encoder.encode(composite.text, label=composite.label)


def encode_gs1(
    fields: Union[FieldInput, Iterable[FieldInput]],
    *,
    options: Optional[GS1Options] = None
) -> Frame:
    """
    Encode GS1-128 fields.

    Main entry point for the GS1-128 layer.

    Examples:
        >>> encode_gs1([("01", "12345678901231"), ("10", "ABC")]).label
        '(01)12345678901231 (10)ABC'
    """
    return GS1128Encoder(options).encode(fields)
