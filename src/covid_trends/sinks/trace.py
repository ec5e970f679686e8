"""HTTP trace sink writing one JSON line per upstream request."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class TraceRecord:
    """Metadata for one upstream request.

    Attributes:
        ts: ISO 8601 timestamp of when the record was created.
        method: HTTP method.
        url: Request URL.
        status: HTTP status code, when a response was received.
        duration_ms: Elapsed time in milliseconds.
        error: Error message, when the request failed.
    """

    ts: str
    method: str
    url: str
    status: int | None = None
    duration_ms: int | None = None
    error: str | None = None

    @classmethod
    def create(
        cls,
        method: str,
        url: str,
        status: int | None = None,
        duration_ms: int | None = None,
        error: str | None = None,
    ) -> "TraceRecord":
        """Create a record stamped with the current time."""
        return cls(
            ts=datetime.now(UTC).isoformat(),
            method=method,
            url=url,
            status=status,
            duration_ms=duration_ms,
            error=error,
        )

    def to_json_line(self) -> str:
        """Convert record to a JSONL line, omitting unset fields.

        Returns:
            JSON string with no trailing newline.
        """
        payload = {key: value for key, value in asdict(self).items() if value is not None}
        return json.dumps(payload, separators=(",", ":"))


class TraceSink(ABC):
    """Best-effort consumer of request trace records.

    Implementations must not raise from record().
    """

    @abstractmethod
    def record(self, entry: TraceRecord) -> None:
        """Record a trace entry."""


class NullTraceSink(TraceSink):
    """Trace sink that discards everything."""

    def record(self, entry: TraceRecord) -> None:  # noqa: ARG002
        return None


class JSONLTraceSink(TraceSink):
    """Append trace records to a JSONL file.

    The parent directory is created on first write. Write failures are
    logged and dropped.

    Example:
        sink = JSONLTraceSink(Path("server/logs/http_trace.jsonl"))
        sink.record(TraceRecord.create("GET", url, status=200, duration_ms=42))
    """

    def __init__(self, path: Path) -> None:
        """Initialize trace sink.

        Args:
            path: Path to JSONL file.
        """
        self.path = path

    def record(self, entry: TraceRecord) -> None:
        """Append a record to the trace file.

        Args:
            entry: Trace record to write.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a") as f:
                f.write(entry.to_json_line() + "\n")
        except OSError as e:
            logger.error("Failed to write to trace file %s: %s", self.path, e)

    @staticmethod
    def count_records(path: Path) -> int:
        """Count records in an existing trace file.

        Args:
            path: Path to JSONL file.

        Returns:
            Number of non-empty lines. Returns 0 if file doesn't exist.
        """
        if not path.exists():
            return 0

        with path.open() as f:
            return sum(1 for line in f if line.strip())
