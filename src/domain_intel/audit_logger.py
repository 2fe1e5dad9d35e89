"""
Audit Logger module for the domain intelligence engine.

Every pipeline component reports through one AuditLogger: provider fetch
failures, RDAP/WHOIS problems, completed analyses and API requests. Entries
are written as JSON lines, plain text, or both, and the most recent ones are
kept in a bounded in-memory buffer. Values under sensitive keys are masked
before an entry is stored, so neither the stream nor the buffer ever holds
them.
"""

import json
import sys
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from domain_intel.config import LoggingConfig
from domain_intel.enums import LogLevel


LEVEL_ORDER = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}

OUTPUT_FORMATS = ("json", "text", "both")


@dataclass
class LogEntry:
    """One structured log record."""

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


class AuditLogger:
    """
    Structured logger shared by the pipeline components.

    Supports:
    - JSON and human-readable text output formats
    - Minimum-level filtering
    - Masking of credentials, cookies and session values at any depth
    - Failure context (exception, request URL, status code) via log_error
    """

    # Substrings that mark a key as sensitive, compared case-insensitively
    SENSITIVE_KEYS = frozenset({
        "token", "secret", "password", "api_key", "auth", "authorization",
        "cookie", "set-cookie", "credential", "private_key", "session",
    })

    MASK_VALUE = "***MASKED***"

    def __init__(
        self,
        output_format: str = "both",
        output_stream: Optional[TextIO] = None,
        min_level: LogLevel = LogLevel.DEBUG,
        max_entries: Optional[int] = 1000,
    ):
        """
        Initialize the audit logger.

        Args:
            output_format: 'json', 'text', or 'both'
            output_stream: Destination stream (defaults to sys.stderr)
            min_level: Entries below this level are dropped
            max_entries: Size of the in-memory buffer; oldest entries are
                evicted first. None keeps everything.

        Raises:
            ValueError: If output_format is not recognised
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {output_format}")

        self._output_format = output_format
        self._stream = output_stream or sys.stderr
        self._min_level = min_level
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    @classmethod
    def from_config(
        cls,
        config: LoggingConfig,
        output_stream: Optional[TextIO] = None,
    ) -> "AuditLogger":
        """Build a logger from a LoggingConfig; unknown levels mean INFO."""
        try:
            min_level = LogLevel(config.level.lower())
        except ValueError:
            min_level = LogLevel.INFO
        return cls(
            config.output_format,
            output_stream,
            min_level,
            max_entries=config.retained_entries,
        )

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def entries(self) -> list[LogEntry]:
        """Snapshot of the retained entries, oldest first."""
        return list(self._entries)

    def clear_entries(self) -> None:
        self._entries.clear()

    def is_enabled_for(self, level: LogLevel) -> bool:
        return LEVEL_ORDER[level] >= LEVEL_ORDER[self._min_level]

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Record and write one entry.

        Returns:
            The stored LogEntry, or None when the level is filtered out
        """
        if not self.is_enabled_for(level):
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=self.mask_sensitive_data(data or {}),
        )
        self._entries.append(entry)

        for line in self.render(entry):
            self._stream.write(line + "\n")
        self._stream.flush()
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
        level: LogLevel = LogLevel.ERROR,
    ) -> Optional[LogEntry]:
        """
        Log a failure together with whatever context is known about it.

        Args:
            component: Component reporting the failure
            message: Human-readable description
            error: Exception that caused the failure, if any
            request_url: URL of the failed request
            response_status_code: HTTP status of the failed response
            additional_data: Extra context merged into the entry (not mutated)
            level: Severity; failures that are recovered from use WARN
        """
        context = {
            "error_type": type(error).__name__ if error is not None else None,
            "error_message": str(error) if error is not None else None,
            "request_url": request_url,
            "response_status_code": response_status_code,
        }
        data = dict(additional_data or {})
        data.update({key: value for key, value in context.items() if value is not None})
        return self.log(level, component, message, data)

    def is_sensitive_key(self, key: Any) -> bool:
        lowered = str(key).lower()
        return any(fragment in lowered for fragment in self.SENSITIVE_KEYS)

    def mask_sensitive_data(self, data: dict) -> dict:
        """Return a copy of data with sensitive values replaced at any depth."""
        if not isinstance(data, dict):
            return data
        return self._mask(data)

    def _mask(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                key: self.MASK_VALUE if self.is_sensitive_key(key) else self._mask(item)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [self._mask(item) for item in value]
        return value

    def render(self, entry: LogEntry) -> list[str]:
        """Lines written for an entry, one per configured format."""
        lines = []
        if self._output_format in ("json", "both"):
            lines.append(self.format_json(entry))
        if self._output_format in ("text", "both"):
            lines.append(self.format_text(entry))
        return lines

    @staticmethod
    def format_json(entry: LogEntry) -> str:
        return json.dumps(entry.to_dict(), ensure_ascii=False, default=str)

    @staticmethod
    def format_text(entry: LogEntry) -> str:
        """[TIMESTAMP] LEVEL [COMPONENT] MESSAGE {data}"""
        text = f"[{entry.timestamp}] {entry.level.value.upper()} [{entry.component}] {entry.message}"
        if entry.data:
            text += " " + json.dumps(entry.data, ensure_ascii=False, default=str)
        return text
