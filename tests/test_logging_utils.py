import json

from sewergen.logging_utils import current_level, get_logger


def test_key_value_output(monkeypatch, capsys):
    monkeypatch.delenv("SEWER_LOG_JSON", raising=False)
    monkeypatch.setenv("SEWER_LOG_LEVEL", "info")
    get_logger("t").info(event="sewer_generated", note="two words", skipped=None, attempts=3)
    line = capsys.readouterr().err.strip()
    assert line.startswith("level=info ts=")
    assert "event=sewer_generated" in line
    assert "note=two_words" in line
    assert "attempts=3" in line
    assert "skipped" not in line
    assert "logger=t" in line


def test_level_filtering(monkeypatch, capsys):
    monkeypatch.setenv("SEWER_LOG_LEVEL", "warn")
    log = get_logger("t")
    log.info(event="hidden")
    log.warn(event="shown")
    out = capsys.readouterr().err
    assert "hidden" not in out
    assert "shown" in out


def test_unknown_level_defaults_to_info(monkeypatch):
    monkeypatch.setenv("SEWER_LOG_LEVEL", "chatty")
    assert current_level() == 20


def test_json_mode_on_stderr(monkeypatch, capsys):
    monkeypatch.setenv("SEWER_LOG_JSON", "1")
    monkeypatch.setenv("SEWER_LOG_LEVEL", "debug")
    get_logger("t").error(event="boom", attempts=2)
    captured = capsys.readouterr()
    assert captured.out == ""
    rec = json.loads(captured.err)
    assert rec["event"] == "boom" and rec["level"] == "error" and rec["attempts"] == 2


def test_loggers_are_cached():
    assert get_logger("same") is get_logger("same")
