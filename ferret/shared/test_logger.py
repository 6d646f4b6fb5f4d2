"""
Unit tests for Ferret logger module.

Tests JsonFormatter JSON output structure, SearchLogger run ID generation,
event logging with payloads, and the optional per-run log file.
"""

import json
import logging
import os
import tempfile
import unittest
import uuid

from ferret.shared.logger import JsonFormatter, SearchLogger, TextFormatter


def _record(msg="my_event"):
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestJsonFormatter(unittest.TestCase):
    """Tests for JsonFormatter class."""

    def setUp(self):
        self.formatter = JsonFormatter()

    def test_format_includes_required_fields(self):
        record = _record()
        record.component = "orchestrator"
        record.run_id = "run-abc-123"
        record.event = "search_started"
        record.payload = {"provider": "github"}

        parsed = json.loads(self.formatter.format(record))

        self.assertEqual(parsed["level"], "INFO")
        self.assertEqual(parsed["component"], "orchestrator")
        self.assertEqual(parsed["run_id"], "run-abc-123")
        self.assertEqual(parsed["event"], "search_started")
        self.assertEqual(parsed["payload"], {"provider": "github"})
        self.assertTrue(parsed["timestamp"].endswith("Z"))

    def test_format_defaults_for_plain_records(self):
        parsed = json.loads(self.formatter.format(_record("plain message")))

        self.assertEqual(parsed["component"], "unknown")
        self.assertEqual(parsed["event"], "plain message")
        self.assertEqual(parsed["payload"], {})


class TestTextFormatter(unittest.TestCase):

    def test_format_is_single_line(self):
        record = _record()
        record.component = "cli"
        record.event = "search_completed"
        record.payload = {"results": 3}

        line = TextFormatter().format(record)

        self.assertIn("[cli] search_completed results=3", line)
        self.assertNotIn("\n", line)


class TestSearchLogger(unittest.TestCase):
    """Tests for SearchLogger class."""

    def _component(self):
        return f"test-{uuid.uuid4().hex[:8]}"

    def test_generates_run_id(self):
        logger = SearchLogger(self._component(), level="INFO", log_format="json")

        self.assertTrue(logger.run_id)
        uuid.UUID(logger.run_id)

    def test_writes_jsonl_file_when_directory_is_configured(self):
        with tempfile.TemporaryDirectory() as log_dir:
            logger = SearchLogger(
                self._component(),
                run_id="run-1",
                level="INFO",
                log_format="json",
                log_directory=log_dir,
            )
            logger.log("search_started", {"provider": "github"})
            for handler in logger.logger.handlers:
                handler.flush()

            with open(os.path.join(log_dir, "run-1.jsonl")) as f:
                lines = [json.loads(line) for line in f]

            for handler in list(logger.logger.handlers):
                handler.close()
                logger.logger.removeHandler(handler)

        self.assertEqual(lines[0]["event"], "search_started")
        self.assertEqual(lines[0]["run_id"], "run-1")
        self.assertEqual(lines[0]["payload"], {"provider": "github"})

    def test_log_passes_extra_fields(self):
        logger = SearchLogger(self._component(), run_id="run-2", level="INFO", log_format="json")

        with self.assertLogs(logger.logger, level="INFO") as captured:
            logger.log("goto_opened", {"link": "http://a"})

        record = captured.records[0]
        self.assertEqual(record.event, "goto_opened")
        self.assertEqual(record.run_id, "run-2")
        self.assertEqual(record.payload, {"link": "http://a"})

    def test_level_filters_events(self):
        logger = SearchLogger(self._component(), level="WARNING", log_format="json")

        self.assertFalse(logger.logger.isEnabledFor(logging.INFO))
        logger.set_level("info")
        self.assertTrue(logger.logger.isEnabledFor(logging.INFO))

    def test_settings_supply_defaults(self):
        logger = SearchLogger(self._component())

        # conftest exports FERRET_LOG_LEVEL=CRITICAL
        self.assertEqual(logger.logger.level, logging.CRITICAL)

    def test_set_run_id(self):
        logger = SearchLogger(self._component(), level="INFO", log_format="text")
        logger.set_run_id("new-id")

        self.assertEqual(logger.run_id, "new-id")


if __name__ == '__main__':
    unittest.main()
