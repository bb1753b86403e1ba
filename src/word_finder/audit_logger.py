"""
Audit Logger module for the word finder system.

Writes structured log entries as JSON lines, human-readable text, or both.
Entries below the configured level are dropped. Payloads are masked for
credential-like keys and long word sequences are abbreviated so a loaded
dictionary never ends up in a log line.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from word_finder.enums import LogLevel


_SEVERITY = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}

OUTPUT_FORMATS = ("json", "text", "both")


@dataclass
class LogEntry:
    """A single structured log record."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "component": self.component,
            "message": self.message,
            "data": self.data,
        }


def _encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


class AuditLogger:
    """
    Structured logger shared by the dictionary and filter components.

    Components log through their own small _log_* helpers and pass their
    class name as the component, so a single stream can be followed across
    a load, a cache hit and a filter run.
    """

    # Substrings that mark a payload key as sensitive
    SENSITIVE_KEYS = frozenset({
        'token', 'secret', 'password', 'api_key', 'auth', 'authorization',
        'credential', 'credentials', 'private_key', 'cookie',
    })

    MASK_VALUE = "***MASKED***"

    # Lists and tuples longer than this are cut down before logging
    MAX_SEQUENCE_ITEMS = 20

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        min_level: LogLevel = LogLevel.INFO,
    ):
        """
        Initialize the audit logger.

        Args:
            output_format: 'json', 'text', or 'both'
            output_stream: Where entries are written (defaults to sys.stderr)
            min_level: Entries below this level are discarded
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {output_format}")

        self._output_format = output_format
        self._stream = output_stream or sys.stderr
        self._min_level = min_level
        self._entries: list[LogEntry] = []

    @classmethod
    def from_config(cls, level: str, output_format: str) -> "AuditLogger":
        """Build a logger from LoggingConfig values."""
        return cls(output_format=output_format, min_level=LogLevel(level.lower()))

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Entries written so far, oldest first."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Record an entry and write it in the configured format(s).

        Returns:
            The recorded LogEntry, or None if the level is filtered out
        """
        if _SEVERITY[level] < _SEVERITY[self._min_level]:
            return None

        payload = self._abbreviate(self.mask_sensitive_data(data or {}))
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=payload,
        )
        self._entries.append(entry)
        self._write(entry)
        return entry

    def debug(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, component, message, data)

    def info(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, component, message, data)

    def warn(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, component, message, data)

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[BaseException] = None,
        request_url: Optional[str] = None,
        response_status_code: Optional[int] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log an error together with the exception and request context.

        WordFinderError subclasses contribute their code as error_code.
        """
        data = dict(additional_data or {})

        if error is not None:
            data["error_type"] = type(error).__name__
            data["error_message"] = str(error)
            code = getattr(error, "code", None)
            if isinstance(code, str):
                data["error_code"] = code
        if request_url is not None:
            data["request_url"] = request_url
        if response_status_code is not None:
            data["response_status_code"] = response_status_code

        return self.log(LogLevel.ERROR, component, message, data)

    def mask_sensitive_data(self, data: Any) -> Any:
        """
        Return a copy of data with sensitive values replaced by MASK_VALUE.

        Dicts are walked recursively, including dicts inside lists and tuples.
        """
        if isinstance(data, dict):
            return {
                key: self.MASK_VALUE if self._is_sensitive(key) else self.mask_sensitive_data(value)
                for key, value in data.items()
            }
        if isinstance(data, (list, tuple)):
            return [self.mask_sensitive_data(item) for item in data]
        return data

    def _is_sensitive(self, key: Any) -> bool:
        lowered = str(key).lower()
        return any(pattern in lowered for pattern in self.SENSITIVE_KEYS)

    def _abbreviate(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: self._abbreviate(item) for key, item in value.items()}
        if isinstance(value, list):
            if len(value) <= self.MAX_SEQUENCE_ITEMS:
                return [self._abbreviate(item) for item in value]
            hidden = len(value) - self.MAX_SEQUENCE_ITEMS
            return value[:self.MAX_SEQUENCE_ITEMS] + [f"... {hidden} more"]
        return value

    def _write(self, entry: LogEntry) -> None:
        if self._output_format != "text":
            self._stream.write(_encode(entry.to_dict()) + "\n")
        if self._output_format != "json":
            self._stream.write(self._render_text(entry) + "\n")
        self._stream.flush()

    def _render_text(self, entry: LogEntry) -> str:
        # [TIMESTAMP] LEVEL [Component] message key=value ...
        line = f"[{entry.timestamp}] {entry.level.value.upper()} [{entry.component}] {entry.message}"
        fields = " ".join(f"{key}={_encode(value)}" for key, value in entry.data.items())
        return f"{line} {fields}" if fields else line

    def clear_entries(self) -> None:
        self._entries.clear()
