"""
Output formatters for encoded frames.
"""

from .json_formatter import (
    frame_to_dict,
    frame_to_json,
    composite_to_dict,
)

__all__ = [
    "frame_to_dict",
    "frame_to_json",
    "composite_to_dict",
]
