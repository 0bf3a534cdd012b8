"""
Tests for JSON output and the command line interface.

The JSON document is the contract handed to bar renderers: codewords in
emission order plus the tables, checksum and label.
"""

import json

import pytest
from code128_gs1 import (
    AIDefinition,
    AIRegistry,
    DataKind,
    GS1128Encoder,
    encode_code128,
    encode_gs1,
    frame_to_dict,
    frame_to_json,
    save_ai_registry,
)
from code128_gs1.__main__ import main


class TestFrameOutput:
    """Dictionary and JSON rendering of frames."""

    def test_code128_dict(self):
        data = frame_to_dict(encode_code128("a123"))
        assert data == {
            "label": "a123",
            "codewords": [104, 65, 17, 18, 19, 24, 106],
            "start_table": "B",
            "last_table": "B",
            "checksum": 24,
            "checksum_text": "8",
            "composite": "a123",
        }

    def test_json_is_valid(self):
        data = json.loads(frame_to_json(encode_code128("123456")))
        assert data["codewords"] == [105, 12, 34, 56, 44, 106]
        assert data["start_table"] == "C"

    def test_compact_json(self):
        output = frame_to_json(encode_code128("123456"), indent=None)
        assert "\n" not in output

    def test_no_display_character(self):
        data = frame_to_dict(encode_code128("\x01a\x02"))
        assert data["checksum_text"] is None

    def test_gs1_fields(self):
        encoder = GS1128Encoder()
        fields = [("01", "1234567890123"), ("10", "ABC")]
        composite = encoder.parse(fields)
        data = frame_to_dict(encoder.encode_composite(composite), composite)

        assert data["label"] == "(01)12345678901231 (10)ABC"
        assert data["composite"] == "~F1011234567890123110ABC"
        assert [f["ai"] for f in data["fields"]] == ["01", "10"]
        assert data["fields"][0]["title"] == "GTIN"
        assert data["fields"][0]["checksum_added"] is True
        assert data["fields"][1]["source_index"] == 1

    def test_no_fields_without_composite(self):
        assert "fields" not in frame_to_dict(encode_gs1("(10)ABC"))


class TestCLI:
    """`python -m code128_gs1`."""

    def test_plain_output(self, capsys):
        assert main(["123456"]) == 0
        out = capsys.readouterr().out
        assert "Code 128 Symbol" in out
        assert "105 12 34 56 44 106" in out

    def test_json_output(self, capsys):
        assert main(["--json", "a123"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["codewords"] == [104, 65, 17, 18, 19, 24, 106]

    def test_segments_from_arguments(self, capsys):
        assert main(["--json", "ab", "12345678"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["codewords"] == [104, 65, 66, 99, 12, 34, 56, 78, 50, 106]
        assert data["label"] == "ab12345678"

    def test_start_table(self, capsys):
        assert main(["--json", "--start", "C", "abc"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["codewords"][:2] == [105, 100]

    def test_no_tilde(self, capsys):
        assert main(["--json", "--no-tilde", "~x"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["codewords"][:3] == [104, 94, 88]

    def test_gs1(self, capsys):
        assert main(["--gs1", "--json", "(01)12345678901231", "(10)ABC"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["composite"] == "~F1011234567890123110ABC"
        assert len(data["fields"]) == 2

    def test_gs1_plain_output(self, capsys):
        assert main(["--gs1", "(01)12345678901231"]) == 0
        out = capsys.readouterr().out
        assert "GS1-128 Symbol" in out
        assert "AI(01): GTIN" in out

    def test_gs1_not_strict(self, capsys):
        assert main(["--gs1", "--json", "--not-strict", "(01)12345678901231", "(10)ABC"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["composite"] == "~F10112345678901231~F110ABC"

    def test_gs1_error_json(self, capsys):
        assert main(["--gs1", "--json", "(01)12345678901232"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["code"] == "INVALID_CHECK_DIGIT"
        assert data["symbology"] == "gs1128"
        assert data["ai"] == "01"
        assert "must be: 1" in data["error"]
        assert data["input"] == ["(01)12345678901232"]

    def test_error_on_stderr(self, capsys):
        assert main(["ab~q"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: [code128]")

    def test_allow_unknown(self, capsys):
        assert main(["--gs1", "--allow-unknown", "--json", "(9999)ABC"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["fields"][0]["ai"] is None

    def test_ai_json(self, tmp_path, capsys):
        path = tmp_path / "ai.json"
        save_ai_registry(AIRegistry([AIDefinition("99", 1, 5, DataKind.ALPHA)]), path)

        assert main(["--gs1", "--json", "--ai-json", str(path), "(99)AB"]) == 0
        assert json.loads(capsys.readouterr().out)["label"] == "(99)AB"

        assert main(["--gs1", "--json", "--ai-json", str(path), "(01)12345678901231"]) == 1
        assert json.loads(capsys.readouterr().out)["code"] == "UNKNOWN_AI"

    def test_invalid_start_choice(self):
        with pytest.raises(SystemExit):
            main(["--start", "D", "abc"])
