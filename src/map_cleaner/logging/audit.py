"""Structured JSONL run log of destructive actions."""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class RunEvent:
    """One recorded action of a cleaning run."""

    timestamp: str
    run_id: str
    action: str
    path: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_run_id() -> str:
    """Return a short random identifier grouping the events of one run."""
    return f"run-{uuid.uuid4().hex[:12]}"


class JsonlRunLogger:
    """Append-only JSONL run logger and bounded reader."""

    def __init__(self, path: Path, run_id: str | None = None) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._run_id = run_id or new_run_id()

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    @property
    def run_id(self) -> str:
        return self._run_id

    def record(
        self, action: str, path: str | None = None, metadata: dict[str, object] | None = None
    ) -> RunEvent:
        """Build and append one event for the current run."""
        event = RunEvent(
            timestamp=utc_timestamp(),
            run_id=self._run_id,
            action=action,
            path=path,
            metadata=dict(metadata or {}),
        )
        self.append(event)
        return event

    def append(self, event: RunEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(self, run_id: str | None = None, limit: int = 1000) -> list[dict[str, object]]:
        """Read recent events, optionally restricted to one run."""
        if limit < 1:
            return []
        entries: list[dict[str, object]] = []
        if not self._path.exists():
            return entries
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if run_id is not None and record.get("run_id") != run_id:
                    continue
                entries.append(record)
        if len(entries) <= limit:
            return entries
        return entries[-limit:]
