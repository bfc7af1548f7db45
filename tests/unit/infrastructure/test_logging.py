import json
import logging

import pytest

from utils import logging as lore_logging

@pytest.fixture
def record():
    return logging.LogRecord(
        name="services.analyzer",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Analyzed chapter %s",
        args=(3,),
        exc_info=None
    )

def test_json_formatter_includes_context(record):
    record.context = {"chapter_id": 3, "session_id": "pytest_1"}
    entry = json.loads(lore_logging.JsonFormatter().format(record))
    assert entry["level"] == "INFO"
    assert entry["name"] == "services.analyzer"
    assert entry["message"] == "Analyzed chapter 3"
    assert entry["chapter_id"] == 3
    assert entry["session_id"] == "pytest_1"
    assert "location" not in entry

def test_json_formatter_adds_location_for_debug(record):
    record.levelno = logging.DEBUG
    entry = json.loads(lore_logging.JsonFormatter().format(record))
    assert entry["location"].endswith(":10")

def test_console_formatter(record):
    formatted = lore_logging.SimpleConsoleFormatter().format(record)
    assert "INFO - services.analyzer: Analyzed chapter 3" in formatted

def test_contextual_logger_merges_context():
    adapter = lore_logging.ContextualLogger(logging.getLogger("test"), {"session_id": "s1", "novel_id": 1})
    _, kwargs = adapter.process("msg", {"extra": {"context": {"novel_id": 2}}})
    # Per-call context wins over the adapter's
    assert kwargs["extra"]["context"] == {"novel_id": 2, "session_id": "s1"}

def test_get_logger_carries_session_id():
    logger = lore_logging.get_logger("tests.logging", {"operation": "check"})
    assert logger.extra["session_id"] == lore_logging.SessionLogger.get_current_session()
    assert logger.extra["operation"] == "check"

def test_start_session_replaces_only_session_handlers(tmp_path, monkeypatch):
    monkeypatch.setattr(lore_logging, "LOGS_DIR", tmp_path)
    foreign = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(foreign)
    try:
        session_id = lore_logging.SessionLogger.start_session("unit")
        assert session_id.startswith("unit_")
        assert foreign in root.handlers
        assert sum(1 for h in root.handlers if getattr(h, "_session_handler", False)) == 2
        assert lore_logging.SessionLogger.get_session_log_file().startswith(str(tmp_path))
    finally:
        root.removeHandler(foreign)
        monkeypatch.undo()
        lore_logging.SessionLogger.start_session("tests")
