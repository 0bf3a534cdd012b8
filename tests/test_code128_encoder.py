"""
Tests for the Code 128 encoder.

Covers exact codeword streams for reference inputs, checksum behaviour,
forced tables and segments, and decoding the produced frames back to text.
"""

import pytest
from code128_gs1 import (
    Code128Encoder,
    EncodeOptions,
    ErrorCode,
    ParseError,
    Table,
    encode_code128,
)
from code128_gs1.core.checksum import calculate_checksum
from code128_gs1.core.tables import KEYS_A, KEYS_B


def decode(codewords):
    """Decode a frame without function codes back to its text."""
    table = {103: Table.A, 104: Table.B, 105: Table.C}[codewords[0]]
    shifted = None
    text = []
    for value in codewords[1:-2]:
        active = shifted or table
        if active is Table.C:
            if value < 100:
                text.append(f"{value:02d}")
            elif value == 100:
                table = Table.B
            elif value == 101:
                table = Table.A
            continue

        if value == 98 and shifted is None:
            shifted = Table.B if table is Table.A else Table.A
            continue
        if value == 99:
            table = Table.C
        elif active is Table.A and value == 100:
            table = Table.B
        elif active is Table.B and value == 101:
            table = Table.A
        else:
            text.append((KEYS_A if active is Table.A else KEYS_B)[value])
        shifted = None
    return ''.join(text)


class TestReferenceStreams:
    """Exact codeword streams."""

    def test_a123(self):
        """Lower-case start with a short digit run stays in table B."""
        frame = encode_code128("a123")
        assert frame.codewords == (104, 65, 17, 18, 19, 24, 106)
        assert len(frame) == 7
        assert frame.start_table is Table.B
        assert frame.last_table is Table.B
        assert frame.checksum == 24
        assert frame.checksum_text == "8"
        assert frame.label == "a123"
        assert frame.data_codewords == (65, 17, 18, 19)

    def test_even_digits(self):
        frame = encode_code128("123456")
        assert frame.codewords == (105, 12, 34, 56, 44, 106)
        assert frame.last_table is Table.C
        assert frame.checksum_text == "44"

    def test_shift(self):
        """A single lower-case letter between control characters is shifted."""
        frame = encode_code128("\x01a\x02")
        assert frame.codewords == (103, 65, 98, 65, 66, 102, 106)
        assert frame.last_table is Table.A
        assert frame.checksum_text is None

    def test_latch_to_c(self):
        frame = encode_code128("ab12345678")
        assert frame.codewords == (104, 65, 66, 99, 12, 34, 56, 78, 50, 106)
        assert frame.last_table is Table.C
        assert frame.checksum_text == "50"

    def test_odd_digit_run(self):
        frame = encode_code128("12345")
        assert frame.codewords == (105, 12, 34, 101, 21, 57, 106)
        assert frame.last_table is Table.A

    def test_forced_start_still_optimised(self):
        """Starting in C with letters latches out immediately."""
        frame = Code128Encoder().encode("abc", start=Table.C)
        assert frame.codewords == (105, 100, 65, 66, 67, 77, 106)
        assert frame.start_table is Table.C
        assert frame.last_table is Table.B

    def test_start_from_options(self):
        frame = Code128Encoder(EncodeOptions(start="C")).encode("abc")
        assert frame.codewords[0] == 105


class TestFunctionsAndTilde:
    """Function codes and tilde handling."""

    def test_fnc1_in_b(self):
        frame = encode_code128("~F1abc")
        assert frame.codewords[:5] == (104, 102, 65, 66, 67)

    def test_fnc1_in_c(self):
        frame = Code128Encoder().encode("~F10112", start="C")
        assert frame.codewords[:4] == (105, 102, 1, 12)

    @pytest.mark.parametrize("start,number,expected", [
        (Table.A, 2, 97),
        (Table.A, 3, 96),
        (Table.A, 4, 101),
        (Table.B, 2, 97),
        (Table.B, 3, 96),
        (Table.B, 4, 100),
    ])
    def test_function_codewords(self, start, number, expected):
        frame = Code128Encoder().encode(f"~F{number}", start=start)
        assert frame.codewords[1] == expected

    def test_literal_tilde(self):
        frame = encode_code128("~~")
        assert frame.codewords[:2] == (104, 94)

    def test_literal_tilde_shifted_from_a(self):
        frame = Code128Encoder().encode("~~", start=Table.A)
        assert frame.codewords == (103, 98, 94, 80, 106)
        assert frame.last_table is Table.A

    def test_tilde_disabled(self):
        frame = encode_code128("~x", options=EncodeOptions(tilde=False))
        assert frame.codewords[:3] == (104, 94, 88)

    def test_bad_tilde(self):
        with pytest.raises(ParseError) as exc_info:
            encode_code128("ab~q")
        assert exc_info.value.code is ErrorCode.BAD_TILDE
        assert exc_info.value.symbology == "code128"


class TestSegments:
    """Segments with per-segment table hints."""

    def test_forced_then_auto(self):
        """The auto segment continues from the forced table."""
        frame = Code128Encoder().encode_segments([(Table.A, "ABC"), (None, "abc")])
        assert frame.codewords == (103, 33, 34, 35, 100, 65, 66, 67, 45, 106)
        assert frame.last_table is Table.B
        assert frame.label == "ABCabc"

    def test_auto_then_forced_c(self):
        frame = Code128Encoder().encode_segments([(None, "ab"), ("C", "1234")])
        assert frame.codewords == (104, 65, 66, 99, 12, 34, 95, 106)
        assert frame.last_table is Table.C
        assert frame.checksum_text == "95"

    def test_forced_c_odd(self):
        with pytest.raises(ParseError) as exc_info:
            Code128Encoder().encode_segments([(Table.C, "123")])
        assert exc_info.value.code is ErrorCode.ODD_TABLE_C_RUN

    def test_forced_a_rejects_lowercase(self):
        with pytest.raises(ParseError) as exc_info:
            Code128Encoder().encode_segments([(Table.A, "abc")])
        assert exc_info.value.code is ErrorCode.CHARACTER_NOT_IN_TABLE

    def test_empty_segments_skipped(self):
        frame = Code128Encoder().encode_segments([(None, ""), (None, "123456")])
        assert frame.codewords == (105, 12, 34, 56, 44, 106)


class TestErrors:
    """Input that cannot be encoded."""

    def test_empty_input(self):
        with pytest.raises(ParseError) as exc_info:
            encode_code128("")
        assert exc_info.value.code is ErrorCode.NO_DATA
        assert exc_info.value.message == "No data has been entered."

    def test_unsupported_character(self):
        with pytest.raises(ParseError) as exc_info:
            encode_code128("café")
        assert exc_info.value.code is ErrorCode.UNSUPPORTED_CHARACTER

    def test_invalid_start_option(self):
        with pytest.raises(ValueError):
            EncodeOptions(start="D")


class TestChecksum:
    """Modulo 103 checksum."""

    def test_formula(self):
        assert calculate_checksum([104, 65, 17, 18, 19]) == 24

    def test_recompute_is_stable(self):
        frame = encode_code128("Code 128 Test")
        assert frame.compute_checksum() == frame.checksum
        assert frame.compute_checksum() == frame.compute_checksum()

    def test_matches_weighted_sum(self):
        frame = encode_code128("ABCdef0123456789")
        values = frame.codewords[:-2]
        expected = (values[0] + sum(v * i for i, v in enumerate(values[1:], start=1))) % 103
        assert frame.checksum == expected

    def test_requires_start(self):
        with pytest.raises(ValueError):
            calculate_checksum([])


class TestRoundTrip:
    """Decoding frames reconstructs the input text."""

    @pytest.mark.parametrize("text", [
        "Hello, World!",
        "a123",
        "ab12345678cd",
        "\x01a\x02",
        "\x01abc\x02\x03DEF",
        "0123456789",
        "12345",
        "X1234Y5678Z",
        "~x",
    ])
    def test_decode(self, text):
        frame = encode_code128(text, options=EncodeOptions(tilde=False))
        assert decode(frame.codewords) == text

    def test_all_b_text_has_no_switches(self):
        text = "The quick brown fox {}"
        frame = encode_code128(text)
        assert frame.codewords[0] == 104
        assert len(frame) == len(text) + 3

    def test_even_digits_length(self):
        digits = "98765432109876543210"
        frame = encode_code128(digits)
        assert frame.codewords[0] == 105
        assert len(frame) == len(digits) // 2 + 3
