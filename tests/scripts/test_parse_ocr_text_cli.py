"""
Tests for scripts/parse_ocr_text.py command line entry point.
"""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "parse_ocr_text.py"


@pytest.fixture
def cli():
    spec = importlib.util.spec_from_file_location("parse_ocr_text", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestParseOcrTextCli:
    """Tests for main()."""

    def test_main_when_text_file_then_json_drafts(self, cli, tmp_path, capsys):
        # Arrange
        source = tmp_path / "scan.txt"
        source.write_text("Q1. What is 2 + 2?\nA) 3\nB) 4\nC) 5\nD) 6", encoding="utf-8")

        # Act
        code = cli.main([str(source)])

        # Assert
        assert code == 0
        drafts = json.loads(capsys.readouterr().out)
        assert len(drafts) == 1
        assert drafts[0]["question_text"] == "What is 2 + 2?"
        assert [o["label"] for o in drafts[0]["options"]] == ["A", "B", "C", "D"]

    def test_main_when_single_then_one_draft_for_two_questions(self, cli, tmp_path, capsys):
        source = tmp_path / "scan.txt"
        source.write_text("1. Pick\nA x\nB y\n2. Pick\nA p\nB q", encoding="utf-8")

        assert cli.main(["--single", str(source)]) == 0

        assert len(json.loads(capsys.readouterr().out)) == 1

    def test_main_when_missing_file_then_exit_code_one(self, cli, tmp_path, capsys):
        code = cli.main([str(tmp_path / "missing.txt")])

        assert code == 1
        assert capsys.readouterr().out == ""
