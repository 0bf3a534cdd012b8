"""
JSON Formatter for encoded frames.

Provides the codeword contract consumed by bar renderers:
- Codewords in emission order (start, data, checksum, stop)
- Start and last table
- Checksum and its display character
- The label and, for GS1-128, the parsed fields
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..core.assembler import Frame
from ..core.gs1128 import GS1Composite


def frame_to_dict(frame: Frame, composite: Optional[GS1Composite] = None) -> Dict[str, Any]:
    """
    Convert a Frame to a plain dictionary.

    Args:
        frame: Encoded frame
        composite: GS1-128 parse result the frame was encoded from, if any

    Returns:
        Dictionary with label, codewords, start_table, last_table, checksum,
        checksum_text and composite
    """
    output: Dict[str, Any] = {
        "label": frame.label,
        "codewords": list(frame.codewords),
        "start_table": frame.start_table.value,
        "last_table": frame.last_table.value,
        "checksum": frame.checksum,
        "checksum_text": frame.checksum_text,
        "composite": frame.text,
    }

    if composite is not None:
        output["fields"] = composite_to_dict(composite)["fields"]

    return output


def composite_to_dict(composite: GS1Composite) -> Dict[str, Any]:
    """Convert a GS1-128 parse result to a dictionary."""
    return {
        "text": composite.text,
        "label": composite.label,
        "length": composite.length,
        "fields": [field.to_dict() for field in composite.fields],
    }


def frame_to_json(
    frame: Frame,
    composite: Optional[GS1Composite] = None,
    indent: Optional[int] = 2
) -> str:
    """
    Format a Frame as JSON.

    Example:
        >>> print(frame_to_json(encode_code128("123456")))
        {
          "label": "123456",
          "codewords": [105, 12, 34, 56, 44, 106],
          ...
        }
    """
    return json.dumps(frame_to_dict(frame, composite), ensure_ascii=False, indent=indent)
