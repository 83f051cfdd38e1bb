"""Structured JSONL audit log of build outcomes."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

OUTCOMES = ("built", "unchanged", "skipped", "cycle_detected", "failed")


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Single target outcome recorded by the build engine."""

    timestamp: str
    target: str
    rule: str
    outcome: str
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlAuditLogger:
    """Append-only JSONL audit logger and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def record(
        self,
        target: str,
        rule: str,
        outcome: str,
        metadata: dict[str, object] | None = None,
    ) -> AuditEvent:
        """Build, append and return one event stamped with the current time."""
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown audit outcome: {outcome}")
        event = AuditEvent(
            timestamp=utc_timestamp(),
            target=target,
            rule=rule,
            outcome=outcome,
            metadata=dict(sorted((metadata or {}).items())),
        )
        self.append(event)
        return event

    def append(self, event: AuditEvent) -> None:
        """Append an event as one JSON object per line."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(self, since: str | None = None, limit: int = 50) -> list[dict[str, object]]:
        """Read recent events, optionally filtered by timestamp lower bound."""
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
                if since is not None:
                    ts = record.get("timestamp")
                    if not isinstance(ts, str) or ts < since:
                        continue
                entries.append(record)
        if len(entries) <= limit:
            return entries
        return entries[-limit:]
