"""
Demo: JSON Output

Shows the codeword JSON handed to bar renderers for a few Code 128 and
GS1-128 symbols.
"""

from code128_gs1 import GS1128Encoder, encode_code128, frame_to_json


def demo_code128():
    """Plain Code 128 symbols and the tables they end up in."""

    print("=" * 80)
    print("  CODE 128")
    print("=" * 80)

    test_cases = [
        ("Short digit run stays in B", "a123"),
        ("Digits only", "123456"),
        ("Latch into C", "ab12345678"),
        ("Shift between control characters", "\x01a\x02"),
        ("FNC1 escape", "~F1abc"),
    ]

    for title, text in test_cases:
        print(f"\n{title}")
        print("-" * 80)
        print(f"Input: {text!r}")
        print(frame_to_json(encode_code128(text)))


def demo_gs1():
    """GS1-128 symbols with their parsed fields."""

    print("\n\n" + "=" * 80)
    print("  GS1-128")
    print("=" * 80)

    encoder = GS1128Encoder()
    test_cases = [
        ("GTIN", "(01)12345678901231"),
        ("GTIN without check digit", [("01", "1234567890123")]),
        ("GTIN, batch and expiry", "(01)12345678901231(10)ABC(17)250101"),
        ("Net weight with decimals", "(310y)12.3456"),
    ]

    for title, fields in test_cases:
        print(f"\n{title}")
        print("-" * 80)
        print(f"Input: {fields!r}")
        composite = encoder.parse(fields)
        print(frame_to_json(encoder.encode_composite(composite), composite))


if __name__ == "__main__":
    demo_code128()
    demo_gs1()
