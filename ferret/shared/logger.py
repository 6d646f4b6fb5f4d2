import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class JsonFormatter(logging.Formatter):
    """
    Formatter to output logs as JSON Lines.
    """
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "component": getattr(record, "component", "unknown"),
            "run_id": getattr(record, "run_id", "unknown"),
            "event": getattr(record, "event", record.getMessage()),
            "payload": getattr(record, "payload", {})
        }
        return json.dumps(log_record, default=str)


class TextFormatter(logging.Formatter):
    """Single-line human readable variant of JsonFormatter."""

    def format(self, record):
        component = getattr(record, "component", "unknown")
        event = getattr(record, "event", record.getMessage())
        payload = getattr(record, "payload", {})
        details = " ".join(f"{k}={v}" for k, v in payload.items())
        line = f"{self.formatTime(record)} {record.levelname} [{component}] {event}"
        return f"{line} {details}" if details else line


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "text":
        return TextFormatter()
    return JsonFormatter()


class SearchLogger:
    def __init__(
        self,
        component_name: str,
        run_id: Optional[str] = None,
        level: Optional[str] = None,
        log_format: Optional[str] = None,
        log_directory: Optional[str] = None,
    ):
        self.component = component_name
        self.run_id = run_id or str(uuid.uuid4())
        self.logger = logging.getLogger(f"ferret.{component_name}")

        if level is None or log_format is None:
            from ferret.shared.settings import get_settings
            settings = get_settings()
            level = level or settings.log_level
            log_format = log_format or settings.log_format
            log_directory = log_directory or settings.log_directory

        self.logger.setLevel(level.upper())

        # Ensure we don't add multiple handlers if initialized multiple times
        if not self.logger.handlers:
            formatter = _build_formatter(log_format)

            if log_directory:
                os.makedirs(log_directory, exist_ok=True)
                # File handler: writes to <log_directory>/<run_id>.jsonl
                log_file = os.path.join(log_directory, f"{self.run_id}.jsonl")
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)

            stream_handler = logging.StreamHandler()
            stream_handler.setFormatter(formatter)
            self.logger.addHandler(stream_handler)

    def log(self, event: str, payload: Dict[str, Any] = None, level: int = logging.INFO):
        """
        Log a specific search event.

        :param event: The name of the event (e.g., 'search_started', 'goto_opened')
        :param payload: Dictionary containing the specific data
        :param level: stdlib logging level
        """
        if payload is None:
            payload = {}

        extra = {
            "component": self.component,
            "run_id": self.run_id,
            "event": event,
            "payload": payload
        }

        # We pass 'event' as the message, but the formatter uses the 'event' attribute
        self.logger.log(level, event, extra=extra)

    def set_level(self, level: str):
        self.logger.setLevel(level.upper())

    def set_run_id(self, run_id: str):
        """Update the run_id, e.g. one per HTTP request."""
        self.run_id = run_id
