import io
import sys

import pytest

from quizdeck.cli import main


GOOD_BANK = "Question\nQ\n===\nA.foo\nB.bar\nAnswer\nB\n\nQuestion\nR\nAnswer\nyes\n"


@pytest.fixture
def bank_file(tmp_path):
    path = tmp_path / "bank.txt"
    path.write_text(GOOD_BANK, encoding="utf-8")
    return path


def test_usage_without_arguments(capsys):
    with pytest.raises(SystemExit) as e:
        main([])
    assert e.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_extra_arguments_rejected(bank_file):
    with pytest.raises(SystemExit) as e:
        main([str(bank_file), "extra"])
    assert e.value.code != 0


def test_unreadable_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_malformed_bank(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("Questions\nQ\nAnswer\nA\n", encoding="utf-8")
    assert main([str(path), "--check"]) == 1
    assert "missing Question header" in capsys.readouterr().err


def test_check_prints_overview(bank_file, capsys):
    assert main([str(bank_file), "--check"]) == 0
    out = capsys.readouterr().out
    assert "2 questions" in out
    assert "multiple-choice" in out
    assert "Free-text: 1" in out


def test_require_reason_flag(bank_file, capsys):
    assert main([str(bank_file), "--check", "--require-reason"]) == 1
    assert "empty reason" in capsys.readouterr().err


def test_quiz_runs_on_piped_input(bank_file, capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO(" \n"))
    assert main([str(bank_file), "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "Session Complete" in out
    assert "Questions seen: 2" in out


def test_bad_config_file(bank_file, tmp_path, capsys):
    config = tmp_path / "config.json"
    config.write_text('{"unknown": 1}', encoding="utf-8")
    assert main([str(bank_file), "--config", str(config)]) == 1
    assert "bad config" in capsys.readouterr().err


def test_wrongly_typed_config_value(bank_file, tmp_path, capsys):
    config = tmp_path / "config.json"
    config.write_text('{"max_options": "26"}', encoding="utf-8")
    assert main([str(bank_file), "--config", str(config), "--check"]) == 1
    assert "max_options must be an integer" in capsys.readouterr().err
