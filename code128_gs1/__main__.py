"""
CLI interface for the Code 128 / GS1-128 encoder.

Usage:
    python -m code128_gs1 "<text>" [options]
    python -m code128_gs1 --gs1 "(01)12345678901231" "(10)ABC" [options]

Options:
    --gs1                 Encode the arguments as GS1-128 fields
    --start {A,B,C}       Table the symbol starts in
    --no-tilde            Don't interpret ~~ and ~F1-~F4 escapes
    --not-strict          Always put ~F1 between GS1-128 fields
    --allow-unknown       Pass unknown AIs through unchecked
    --no-length-limit     Skip the 48 character GS1-128 limit
    --ai-json PATH        Use an AI registry exported as JSON
    --json                Output as JSON
    --verbose             Debug logging
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.assembler import Frame
from .core.ai_dictionary_loader import load_ai_registry
from .core.encoder import Code128Encoder, EncodeOptions
from .core.errors import ParseError
from .core.gs1128 import GS1128Encoder, GS1Composite, GS1Options
from .core.tables import Table
from .formatters.json_formatter import frame_to_dict


def format_frame(frame: Frame, composite: Optional[GS1Composite] = None) -> str:
    """Format an encoded frame for display."""
    lines = [
        "=" * 60,
        "GS1-128 Symbol" if composite is not None else "Code 128 Symbol",
        "=" * 60,
        f"Label: {frame.label}",
        f"Encoded Text: {frame.text!r}",
        f"Start Table: {frame.start_table.value}",
        f"Last Table: {frame.last_table.value}",
        f"Checksum: {frame.checksum} ({frame.checksum_text!r})",
        f"Codewords ({len(frame.codewords)}):",
        "  " + " ".join(str(value) for value in frame.codewords),
    ]

    if composite is not None:
        lines.extend([
            "",
            "Fields:",
            "-" * 40,
        ])
        for field in composite.fields:
            title = field.definition.title if field.definition else "UNKNOWN"
            lines.append(f"  AI({field.ai or '?'}): {title}")
            lines.append(f"    Content: {field.content!r}")
            if field.checksum_added:
                lines.append("    Check digit added")

    return '\n'.join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='code128_gs1',
        description='Encode text as Code 128 or GS1-128 codewords'
    )

    parser.add_argument(
        'text',
        nargs='+',
        help='Text to encode (one argument per field with --gs1)'
    )

    parser.add_argument(
        '--gs1',
        action='store_true',
        help='Encode as GS1-128 Application Identifier fields'
    )

    parser.add_argument(
        '--start',
        choices=['A', 'B', 'C'],
        default=None,
        help='Table the symbol starts in (default: automatic, C for GS1-128)'
    )

    parser.add_argument(
        '--no-tilde',
        action='store_true',
        help='Disable ~~ and ~F1-~F4 escapes (Code 128 only)'
    )

    parser.add_argument(
        '--not-strict',
        action='store_true',
        help='Insert ~F1 between every GS1-128 field'
    )

    parser.add_argument(
        '--allow-unknown',
        action='store_true',
        help='Accept fields whose AI is not in the registry'
    )

    parser.add_argument(
        '--no-length-limit',
        action='store_true',
        help='Disable the 48 character GS1-128 limit'
    )

    parser.add_argument(
        '--ai-json',
        default=None,
        help='Path to an AI registry JSON file'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Output result as JSON'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    composite: Optional[GS1Composite] = None
    try:
        if args.gs1:
            registry = load_ai_registry(Path(args.ai_json)) if args.ai_json else None
            options = GS1Options(
                strict_mode=not args.not_strict,
                allow_unknown_identifier=args.allow_unknown,
                no_length_limit=args.no_length_limit,
                start=args.start or Table.C,
                registry=registry,
            )
            encoder = GS1128Encoder(options)
            composite = encoder.parse(args.text)
            frame = encoder.encode_composite(composite)
        else:
            options = EncodeOptions(
                start=args.start or Table.AUTO,
                tilde=not args.no_tilde,
            )
            frame = Code128Encoder(options).encode_segments(
                [(None, text) for text in args.text]
            )
    except ParseError as e:
        if args.json:
            output = e.to_dict()
            output['error'] = output.pop('message')
            output['input'] = args.text
            print(json.dumps(output, indent=2, ensure_ascii=False))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(frame_to_dict(frame, composite), indent=2, ensure_ascii=False))
    else:
        print(format_frame(frame, composite))

    return 0


if __name__ == '__main__':
    sys.exit(main())
