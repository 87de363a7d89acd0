import json
import logging
import sys
from enum import Enum

import pytest
import structlog

from shared.logging import _serialize_enums, bind_command_context, configure_structlog, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger, and restore the test pipeline."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    configure_structlog(timestamps=False)


class TestSetupLogging:
    def test_configures_stderr_handler(self):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1

        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_level_by_name(self):
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_adds_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "ledger.log"
        setup_logging(log_file=log_file)
        root = logging.getLogger()

        assert len(root.handlers) == 2
        file_handler = root.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert file_handler.baseFilename == str(log_file)

    def test_writes_to_file(self, tmp_path):
        log_file = tmp_path / "ledger.log"
        setup_logging(log_file=log_file)

        structlog.get_logger("test.writes_to_file").info("session settled", transfers=3)

        assert "session settled" in log_file.read_text(encoding="utf-8")

    def test_file_is_appended_across_runs(self, tmp_path):
        log_file = tmp_path / "ledger.log"

        setup_logging(log_file=log_file)
        structlog.get_logger("test.append").info("first run")
        setup_logging(log_file=log_file)
        structlog.get_logger("test.append").info("second run")

        content = log_file.read_text(encoding="utf-8")
        assert "first run" in content
        assert "second run" in content

    def test_records_below_level_are_dropped(self, tmp_path):
        log_file = tmp_path / "ledger.log"
        setup_logging(level="WARNING", log_file=log_file)

        structlog.get_logger("test.level").info("session settled")
        structlog.get_logger("test.level").warning("expense skipped")

        content = log_file.read_text(encoding="utf-8")
        assert "session settled" not in content
        assert "expense skipped" in content

    def test_json_lines_carry_command_context(self, tmp_path):
        log_file = tmp_path / "ledger.log"
        setup_logging(log_format="json", log_file=log_file)

        bind_command_context("settle", session_id="s1")
        structlog.get_logger("test.json").info("session settled", transfers=2)

        parsed = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[0])
        assert parsed["event"] == "session settled"
        assert parsed["command"] == "settle"
        assert parsed["session_id"] == "s1"
        assert parsed["transfers"] == 2
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_json_keeps_non_ascii_member_names(self, tmp_path):
        log_file = tmp_path / "ledger.log"
        setup_logging(log_format="json", log_file=log_file)

        structlog.get_logger("test.unicode").warning("expense skipped", member="たろう")

        assert '"member": "たろう"' in log_file.read_text(encoding="utf-8")

    def test_console_output_to_file(self, tmp_path):
        log_file = tmp_path / "ledger.log"
        setup_logging(log_file=log_file)

        structlog.get_logger("test.console").info("saved session", member="たろう")

        content = log_file.read_text(encoding="utf-8")
        assert "saved session" in content
        assert "たろう" in content


class TestBindCommandContext:
    def test_replaces_previous_context(self):
        structlog.contextvars.bind_contextvars(stale="value")

        bind_command_context("stats", member="Alice")

        assert structlog.contextvars.get_contextvars() == {"command": "stats", "member": "Alice"}


class TestSerializeEnums:
    class _Status(Enum):
        ACTIVE = "active"
        SETTLED = "settled"

    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"status": self._Status.SETTLED, "msg": "hello"})
        assert result == {"status": "settled", "msg": "hello"}

    def test_replaces_enum_inside_dict_value(self):
        result = _serialize_enums(None, "", {"data": {"status": self._Status.ACTIVE, "rounds": 3}})
        assert result["data"] == {"status": "active", "rounds": 3}

    def test_replaces_enum_inside_sequence(self):
        result = _serialize_enums(None, "", {"statuses": (self._Status.ACTIVE, self._Status.SETTLED)})
        assert result["statuses"] == ["active", "settled"]

    def test_leaves_non_enum_values_unchanged(self):
        result = _serialize_enums(None, "", {"count": 42, "name": "test"})
        assert result == {"count": 42, "name": "test"}
