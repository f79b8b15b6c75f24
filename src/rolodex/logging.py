"""JSONL event log for contact store activity."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DEFAULT_LOG_DIR = Path.home() / ".rolodex" / "logs"


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    contact_id: str | None = None
    count: int | None = None
    path: str | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {}}


class JSONLLogger:
    """Logger that writes structured events in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "events.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = DEFAULT_LOG_DIR
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        contact_id: str | None = None,
        count: int | None = None,
        path: str | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            contact_id=contact_id,
            count=count,
            path=path,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_load(self, path: str, count: int, *, warning: str | None = None) -> None:
        """Log the outcome of loading a snapshot."""
        if warning:
            self.log("load_warning", path=path, count=count, error=warning)
        else:
            self.log("contacts_loaded", path=path, count=count)

    def log_save(self, path: str, count: int, *, error: str | None = None) -> None:
        """Log the outcome of writing a snapshot."""
        if error:
            self.log("save_failed", path=path, count=count, error=error)
        else:
            self.log("contacts_saved", path=path, count=count)

    def log_mutation(self, action: str, contact_id: str, **extra: Any) -> None:
        """Log an add, update or delete."""
        self.log(f"contact_{action}", contact_id=contact_id, **extra)
