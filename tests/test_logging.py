"""Tests for logging setup and formatters."""

import json
import logging

from node_packages.logging import (
    ColoredFormatter, LoggerConfig, StructuredFormatter, get_logging_stats, setup_logging
)


def make_record(msg="scanned", level=logging.WARNING, **extra):
    return logging.makeLogRecord({
        "name": "node_packages.test",
        "levelno": level,
        "levelname": logging.getLevelName(level),
        "msg": msg,
        **extra,
    })


def test_structured_formatter_promotes_scan_context():
    line = StructuredFormatter().format(make_record(manager="npm", path="/c", attempt=2))

    entry = json.loads(line)
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "node_packages.test"
    assert entry["message"] == "scanned"
    assert entry["manager"] == "npm"
    assert entry["path"] == "/c"
    assert entry["extra"] == {"attempt": 2}


def test_structured_formatter_without_extras():
    entry = json.loads(StructuredFormatter().format(make_record()))

    assert "extra" not in entry
    assert "manager" not in entry


def test_colored_formatter_colors_level_only():
    record = make_record(level=logging.ERROR)

    text = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert text == f"{ColoredFormatter.COLORS['ERROR']}ERROR{ColoredFormatter.RESET} scanned"
    assert record.levelname == "ERROR"


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "logs" / "inventory.log"

    setup_logging(LoggerConfig(level="INFO", file_path=str(log_file), enable_console=False))
    logging.getLogger("node_packages.test").info("written to file")

    stats = get_logging_stats()
    assert stats["configured"] is True
    assert stats["handlers_active"] == ["file"]
    assert stats["current_level"] == "INFO"
    assert "written to file" in log_file.read_text(encoding="utf-8")


def test_structured_file_output(tmp_path):
    log_file = tmp_path / "inventory.jsonl"

    setup_logging(LoggerConfig(
        level="WARNING", file_path=str(log_file), enable_console=False, enable_structured=True
    ))
    logging.getLogger("node_packages.test").warning("root skipped", extra={"manager": "yarn"})

    entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert entry["message"] == "root skipped"
    assert entry["manager"] == "yarn"


def test_setup_logging_runs_once():
    setup_logging(LoggerConfig(level="ERROR", enable_console=True))
    setup_logging(LoggerConfig(level="DEBUG", enable_console=True))

    assert get_logging_stats()["current_level"] == "ERROR"
