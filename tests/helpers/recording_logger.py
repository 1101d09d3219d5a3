"""A femtologging stand-in that keeps every record in memory."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(slots=True)
class LogRecord:
    """Captured log call."""

    level: str
    message: str
    exc_info: object | None = None


class RecordingLogger:
    """Collects ``log`` calls for assertions.

    Swap it in for a module's ``logger`` attribute with ``monkeypatch``.
    """

    def __init__(self) -> None:
        self.records: list[LogRecord] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        """Store the record."""
        del stack_info
        self.records.append(LogRecord(level=level, message=message, exc_info=exc_info))
        return message

    def messages(self, level: str | None = None) -> list[str]:
        """Return captured messages, optionally filtered by level."""
        return [
            record.message
            for record in self.records
            if level is None or record.level == level
        ]
