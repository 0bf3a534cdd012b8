"""
AI registry for the GS1-128 layer.

Holds the Application Identifier definitions used to split and check
GS1-128 input. A trailing `y` in an identifier (e.g. 310y) is the
decimal-position placeholder: 3102 is 310y with two decimals.

The built-in table follows the GS1 Barcode Syntax Dictionary notation:

    AI      components                      # TITLE

where each component is `<type><length>[,linter...]`, type N (digits),
X (CSET 82) or Y (CSET 39), and length either fixed (`N6`) or variable
(`X..20`).

Reference: https://ref.gs1.org/tools/gs1-barcode-syntax-resource/syntax-dictionary/
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


PLACEHOLDER = 'y'


class DataKind(str, Enum):
    """Kind of content an AI carries, as far as conformity checks go."""
    NUMERIC = "numeric"
    DATE = "date"
    DATE_TIME = "date_time"
    ALPHA = "alpha"


@dataclass(frozen=True)
class AIDefinition:
    """
    A single Application Identifier.

    Attributes:
        code: AI code, lower case, 2-4 characters ('01', '310y')
        min_length: Minimum content length (check digit included)
        max_length: Maximum content length
        data_kind: Conformity class of the content
        has_checksum: Content ends with a GS1 mod-10 check digit at min_length
        has_variable_decimal: Code carries the `y` decimal placeholder
        title: Data title
    """
    code: str
    min_length: int
    max_length: int
    data_kind: DataKind = DataKind.ALPHA
    has_checksum: bool = False
    has_variable_decimal: bool = False
    title: str = ''

    @property
    def is_fixed_length(self) -> bool:
        return self.min_length == self.max_length

    def to_dict(self) -> dict:
        return {
            'code': self.code,
            'min_length': self.min_length,
            'max_length': self.max_length,
            'data_kind': self.data_kind.value,
            'has_checksum': self.has_checksum,
            'has_variable_decimal': self.has_variable_decimal,
            'title': self.title,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AIDefinition':
        code = str(data['code']).lower()
        return cls(
            code=code,
            min_length=int(data.get('min_length', 1)),
            max_length=int(data['max_length']),
            data_kind=DataKind(data.get('data_kind', DataKind.ALPHA.value)),
            has_checksum=bool(data.get('has_checksum', False)),
            has_variable_decimal=bool(
                data.get('has_variable_decimal', code.endswith(PLACEHOLDER))
            ),
            title=data.get('title', ''),
        )


@dataclass(frozen=True)
class Found:
    """The identifier is registered as is."""
    definition: AIDefinition


@dataclass(frozen=True)
class FoundWithPlaceholder:
    """
    The identifier matched a `y` definition.

    `resolved` is True when the caller already gave the decimal count
    (3102 matched 310y) and False when the `y` is still in the identifier.
    """
    definition: AIDefinition
    resolved: bool


@dataclass(frozen=True)
class NotFound:
    identifier: str


LookupResult = Union[Found, FoundWithPlaceholder, NotFound]


def _parse_syntax_spec(spec: str) -> Tuple[str, int, int, List[str]]:
    """
    Parse one component of a syntax dictionary specification.

    Examples:
        "N14" -> ('N', 14, 14, [])
        "X..20" -> ('X', 1, 20, [])
        "N6,yymmd0" -> ('N', 6, 6, ['yymmd0'])
        "N14,csum,gcppos2" -> ('N', 14, 14, ['csum', 'gcppos2'])

    Returns:
        (data_type, min_length, max_length, linters)
    """
    parts = spec.split(',')
    type_len = parts[0]
    linters = parts[1:]

    data_type = type_len[0]
    len_spec = type_len[1:]

    if '..' in len_spec:
        min_len, max_len = 1, int(len_spec.replace('..', ''))
    elif len_spec:
        min_len = max_len = int(len_spec)
    else:
        min_len = max_len = 0

    return data_type, min_len, max_len, linters


def _create_definition(code: str, components: List[str], title: str) -> AIDefinition:
    """Build an AIDefinition from the components of one dictionary line."""
    parsed = [_parse_syntax_spec(component) for component in components]

    min_length = 0
    max_length = 0
    for index, (_, low, high, _) in enumerate(parsed):
        max_length += high
        # Variable-length trailing components are optional
        if index == 0 or low == high:
            min_length += low

    csum_index = None
    for index, (_, _, _, linters) in enumerate(parsed):
        if 'csum' in linters:
            csum_index = index
            break
    has_checksum = csum_index is not None and all(
        low != high for _, low, high, _ in parsed[csum_index + 1:]
    )

    types = {data_type for data_type, _, _, _ in parsed}
    linters = {linter for _, _, _, component in parsed for linter in component}
    if types & {'X', 'Y'}:
        data_kind = DataKind.ALPHA
    elif 'yymmddhh' in linters:
        data_kind = DataKind.DATE_TIME
    elif len(parsed) == 1 and linters & {'yymmdd', 'yymmd0'}:
        data_kind = DataKind.DATE
    else:
        data_kind = DataKind.NUMERIC

    return AIDefinition(
        code=code,
        min_length=min_length,
        max_length=max_length,
        data_kind=data_kind,
        has_checksum=has_checksum,
        has_variable_decimal=code.endswith(PLACEHOLDER),
        title=title,
    )


RAW_AI_DICTIONARY = """
00      N18,csum,gcppos2                  # SSCC
01      N14,csum,gcppos2                  # GTIN
02      N14,csum,gcppos2                  # CONTENT
10      X..20                             # BATCH/LOT
11      N6,yymmd0                         # PROD DATE
12      N6,yymmd0                         # DUE DATE
13      N6,yymmd0                         # PACK DATE
15      N6,yymmd0                         # BEST BEFORE or BEST BY
16      N6,yymmd0                         # SELL BY
17      N6,yymmd0                         # USE BY or EXPIRY
20      N2                                # VARIANT
21      X..20                             # SERIAL
22      X..20                             # CPV
235     X..28                             # TPX
240     X..30                             # ADDITIONAL ID
241     X..30                             # CUST. PART No.
242     N..6                              # MTO VARIANT
243     X..20                             # PCN
250     X..30                             # SECONDARY SERIAL
251     X..30                             # REF. TO SOURCE
253     N13,csum,key X..17                # GDTI
254     X..20                             # GLN EXTENSION COMPONENT
255     N13,csum,key N..12                # GCN
30      N..8                              # VAR. COUNT
310y    N6                                # NET WEIGHT (kg)
311y    N6                                # LENGTH (m)
312y    N6                                # WIDTH (m)
313y    N6                                # HEIGHT (m)
314y    N6                                # AREA (m²)
315y    N6                                # NET VOLUME (l)
316y    N6                                # NET VOLUME (m³)
320y    N6                                # NET WEIGHT (lb)
321y    N6                                # LENGTH (in)
322y    N6                                # LENGTH (ft)
323y    N6                                # LENGTH (yd)
324y    N6                                # WIDTH (in)
325y    N6                                # WIDTH (ft)
326y    N6                                # WIDTH (yd)
327y    N6                                # HEIGHT (in)
328y    N6                                # HEIGHT (ft)
329y    N6                                # HEIGHT (yd)
330y    N6                                # GROSS WEIGHT (kg)
331y    N6                                # LENGTH (m), log
332y    N6                                # WIDTH (m), log
333y    N6                                # HEIGHT (m), log
334y    N6                                # AREA (m²), log
335y    N6                                # VOLUME (l), log
336y    N6                                # VOLUME (m³), log
337y    N6                                # KG PER m²
340y    N6                                # GROSS WEIGHT (lb)
341y    N6                                # LENGTH (in), log
342y    N6                                # LENGTH (ft), log
343y    N6                                # LENGTH (yd), log
344y    N6                                # WIDTH (in), log
345y    N6                                # WIDTH (ft), log
346y    N6                                # WIDTH (yd), log
347y    N6                                # HEIGHT (in), log
348y    N6                                # HEIGHT (ft), log
349y    N6                                # HEIGHT (yd), log
350y    N6                                # AREA (in²)
351y    N6                                # AREA (ft²)
352y    N6                                # AREA (yd²)
353y    N6                                # AREA (in²), log
354y    N6                                # AREA (ft²), log
355y    N6                                # AREA (yd²), log
356y    N6                                # NET WEIGHT (t oz)
357y    N6                                # NET VOLUME (oz)
360y    N6                                # NET VOLUME (q)
361y    N6                                # NET VOLUME (gal)
362y    N6                                # VOLUME (q), log
363y    N6                                # VOLUME (gal), log
364y    N6                                # VOLUME (in³)
365y    N6                                # VOLUME (ft³)
366y    N6                                # VOLUME (yd³)
367y    N6                                # VOLUME (in³), log
368y    N6                                # VOLUME (ft³), log
369y    N6                                # VOLUME (yd³), log
37      N..8                              # COUNT
390y    N..15                             # AMOUNT
391y    N3,iso4217 N..15                  # AMOUNT
392y    N..15                             # PRICE
393y    N3,iso4217 N..15                  # PRICE
394y    N4 N..15                          # PRCNT OFF
395y    N6                                # PRICE/UoM
400     X..30                             # ORDER NUMBER
401     X..30,csumalpha,key               # GINC
402     N17,csum,key                      # GSIN
403     X..30                             # ROUTE
410     N13,csum,key                      # SHIP TO LOC
411     N13,csum,key                      # BILL TO
412     N13,csum,key                      # PURCHASE FROM
413     N13,csum,key                      # SHIP FOR LOC
414     N13,csum,key                      # LOC No.
415     N13,csum,key                      # PAY TO
416     N13,csum,key                      # PROD/SERV LOC
417     N13,csum,key                      # PARTY
420     X..20                             # SHIP TO POST
421     N3,iso3166 X..9                   # SHIP TO POST
422     N3,iso3166                        # ORIGIN
423     N..15,iso3166list                 # COUNTRY - INITIAL PROCESS
424     N3,iso3166                        # COUNTRY - PROCESS
425     N..15,iso3166list                 # COUNTRY - DISASSEMBLY
426     N3,iso3166                        # COUNTRY - FULL PROCESS
427     X..3                              # ORIGIN SUBDIVISION
4300    X..35,pcenc                       # SHIP TO COMP
4301    X..35,pcenc                       # SHIP TO NAME
4302    X..70,pcenc                       # SHIP TO ADD1
4303    X..70,pcenc                       # SHIP TO ADD2
4304    X..70,pcenc                       # SHIP TO SUB
4305    X..70,pcenc                       # SHIP TO LOC
4306    X..70,pcenc                       # SHIP TO REG
4307    X2,iso3166alpha2                  # SHIP TO COUNTRY
4308    X..30                             # SHIP TO PHONE
4309    N20,latlong                       # SHIP TO GEO
4310    X..35,pcenc                       # RTN TO COMP
4311    X..35,pcenc                       # RTN TO NAME
4312    X..70,pcenc                       # RTN TO ADD1
4313    X..70,pcenc                       # RTN TO ADD2
4314    X..70,pcenc                       # RTN TO SUB
4315    X..70,pcenc                       # RTN TO LOC
4316    X..70,pcenc                       # RTN TO REG
4317    X2,iso3166alpha2                  # RTN TO COUNTRY
4318    X..30                             # RTN TO POST
4319    X..30                             # RTN TO PHONE
4320    X..35,pcenc                       # SRV DESCRIPTION
4321    N1,yesno                          # DANGEROUS GOODS
4322    N1,yesno                          # AUTH LEAVE
4323    N1,yesno                          # SIG REQUIRED
4324    N10,yymmddhh                      # NBEF DEL DT
4325    N10,yymmddhh                      # NAFT DEL DT
4326    N6,yymmdd                         # REL DATE
4330    X..35,pcenc                       # MAX TEMP (F)
4331    X..35,pcenc                       # MAX TEMP (C)
4332    X..35,pcenc                       # MIN TEMP (F)
4333    X..35,pcenc                       # MIN TEMP (C)
7001    N13                               # NSN
7002    X..30                             # MEAT CUT
7003    N10,yymmddhh                      # EXPIRY TIME
7004    N..4                              # ACTIVE POTENCY
7005    X..12                             # CATCH AREA
7006    N6,yymmdd                         # FIRST FREEZE DATE
7007    N6,yymmdd N..6,yymmdd             # HARVEST DATE
7008    X..3                              # AQUATIC SPECIES
7009    X..10                             # FISHING GEAR TYPE
7010    X..2                              # PROD METHOD
7011    N6,yymmdd N..4,hhmm               # TEST BY DATE
7020    X..20                             # REFURB LOT
7021    X..20                             # FUNC STAT
7022    X..20                             # REV STAT
7023    X..30                             # GIAI - ASSEMBLY
7030    N3,iso3166999 X..27               # PROCESSOR # 0
7031    N3,iso3166999 X..27               # PROCESSOR # 1
7032    N3,iso3166999 X..27               # PROCESSOR # 2
7033    N3,iso3166999 X..27               # PROCESSOR # 3
7034    N3,iso3166999 X..27               # PROCESSOR # 4
7035    N3,iso3166999 X..27               # PROCESSOR # 5
7036    N3,iso3166999 X..27               # PROCESSOR # 6
7037    N3,iso3166999 X..27               # PROCESSOR # 7
7038    N3,iso3166999 X..27               # PROCESSOR # 8
7039    N3,iso3166999 X..27               # PROCESSOR # 9
7040    N1 X1 X1 X1,importeridx           # UIC+EXT
710     X..20                             # NHRN PZN
711     X..20                             # NHRN CIP
712     X..20                             # NHRN CN
713     X..20                             # NHRN DRN
714     X..20                             # NHRN AIM
715     X..20                             # NHRN NDC
716     X..20                             # NHRN AIC
717     X..20                             # NHRN SRN
7230    X2 X..28                          # CERT # 1
7231    X2 X..28                          # CERT # 2
7232    X2 X..28                          # CERT # 3
7233    X2 X..28                          # CERT # 4
7234    X2 X..28                          # CERT # 5
7235    X2 X..28                          # CERT # 6
7236    X2 X..28                          # CERT # 7
7237    X2 X..28                          # CERT # 8
7238    X2 X..28                          # CERT # 9
7239    X2 X..28                          # CERT # 10
7240    X..20                             # PROTOCOL
7241    N2,mediatype                      # AIDC MEDIA TYPE
7242    X..25                             # VCN
8001    N14                               # DIMENSIONS
8002    X..20                             # CMT No.
8003    N1 N13,csum,key X..16             # GRAI
8004    X..30,key                         # GIAI
8005    N6                                # PRICE PER UNIT
8006    N14,csum,gcppos2 N2 N2            # ITIP
8007    X..34,iban                        # IBAN
8008    N8,yymmddhh N..4,mmoptss          # PROD TIME
8009    X..50                             # OPTSEN
8010    Y..30,key                         # CPID
8011    N..12,nozeroprefix                # CPID SERIAL
8012    X..20                             # VERSION
8013    X..25,csumalpha,key               # GMN
8017    N18,csum,key                      # GSRN - PROVIDER
8018    N18,csum,key                      # GSRN - RECIPIENT
8019    N..10                             # SRIN
8020    X..25                             # REF No.
8026    N14,csum,gcppos2 N2 N2            # ITIP CONTENT
8030    X..90                             # DIGSIG
8110    X..70,couponcode                  # COUPON CODE
8111    N4                                # POINTS
8112    X..70,couponposoffer              # COUPON OFFER
8200    X..70                             # PRODUCT URL
90      X..30                             # INTERNAL
91      X..90                             # INTERNAL
92      X..90                             # INTERNAL
93      X..90                             # INTERNAL
94      X..90                             # INTERNAL
95      X..90                             # INTERNAL
96      X..90                             # INTERNAL
97      X..90                             # INTERNAL
98      X..90                             # INTERNAL
99      X..90                             # INTERNAL
"""


def _parse_raw_dictionary() -> List[AIDefinition]:
    """Parse the raw AI dictionary text into AIDefinition objects."""
    definitions = []

    for line in RAW_AI_DICTIONARY.strip().split('\n'):
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        main_part, _, title = line.partition('#')
        tokens = main_part.split()
        if len(tokens) < 2:
            continue

        definitions.append(_create_definition(tokens[0].lower(), tokens[1:], title.strip()))

    return definitions


class AIRegistry:
    """
    Read-only set of known Application Identifiers, fixed at construction.

    Codes are stored in lower case so that `310Y` and `310y` are the same
    identifier.
    """

    def __init__(self, definitions: Optional[Iterable[AIDefinition]] = None):
        self._definitions: Dict[str, AIDefinition] = {
            definition.code.lower(): definition for definition in definitions or ()
        }

    def get(self, code: str) -> Optional[AIDefinition]:
        """Get a definition by its exact code."""
        return self._definitions.get(code.lower())

    def lookup(self, identifier: str) -> LookupResult:
        """
        Two-step lookup of an identifier.

        1. The identifier itself. If its fourth character is the `y`
           placeholder the decimal count is still to be resolved.
        2. Otherwise, for 4-character identifiers, the same code with the
           last character replaced by `y` (3102 -> 310y).
        """
        identifier = identifier.lower()
        has_placeholder = len(identifier) > 3 and identifier[3] == PLACEHOLDER

        definition = self._definitions.get(identifier)
        if definition is not None:
            if has_placeholder:
                return FoundWithPlaceholder(definition, resolved=False)
            return Found(definition)

        if not has_placeholder and len(identifier) > 3 and identifier[-1].isdigit():
            definition = self._definitions.get(identifier[:-1] + PLACEHOLDER)
            if definition is not None:
                return FoundWithPlaceholder(definition, resolved=True)

        return NotFound(identifier)

    def definition_for(self, ai: str) -> Optional[AIDefinition]:
        """Definition governing a resolved AI (3103 is governed by 310y)."""
        definition = self.get(ai)
        if definition is None and len(ai) > 3:
            definition = self.get(ai[:-1] + PLACEHOLDER)
        return definition

    def __contains__(self, code: str) -> bool:
        return code.lower() in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[AIDefinition]:
        return iter(self._definitions.values())

    def all_definitions(self) -> Dict[str, AIDefinition]:
        """Return all AI definitions."""
        return self._definitions.copy()

    def to_json(self) -> str:
        """Export registry to JSON."""
        data = {code: definition.to_dict() for code, definition in self._definitions.items()}
        return json.dumps(data, indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'AIRegistry':
        """Load registry from JSON."""
        data = json.loads(json_str)
        definitions = []
        for code, info in data.items():
            info = dict(info)
            info.setdefault('code', code)
            definitions.append(AIDefinition.from_dict(info))
        return cls(definitions)


# Global cached registry instance
_cached_registry: Optional[AIRegistry] = None


def load_ai_registry(
    json_path: Optional[Path] = None,
    force_reload: bool = False
) -> AIRegistry:
    """
    Load the AI registry, using cache when possible.

    Args:
        json_path: Optional path to a JSON registry file.
        force_reload: Force reload even if cached.

    Returns:
        AIRegistry instance ready for use.
    """
    global _cached_registry

    if _cached_registry is not None and not force_reload and json_path is None:
        return _cached_registry

    if json_path is not None:
        json_path = Path(json_path)
        if not json_path.exists():
            raise FileNotFoundError(f"AI registry file not found: {json_path}")
        with open(json_path, 'r', encoding='utf-8') as f:
            registry = AIRegistry.from_json(f.read())
        logger.debug("Loaded %d AI definitions from %s", len(registry), json_path)
        return registry

    _cached_registry = AIRegistry(_parse_raw_dictionary())
    logger.debug("Built default AI registry with %d definitions", len(_cached_registry))
    return _cached_registry


def save_ai_registry(registry: AIRegistry, json_path: Path) -> None:
    """Save AI registry to a JSON file."""
    with open(json_path, 'w', encoding='utf-8') as f:
        f.write(registry.to_json())
