"""Typed models for build traces."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Dependency:
    """One tracked read recorded while a target was computed."""

    path: str
    kind: str
    stamp: str


@dataclass(slots=True, frozen=True)
class Trace:
    """Inputs observed and output produced by the last run of a target."""

    target: str
    result_stamp: str
    dependencies: tuple[Dependency, ...]


@dataclass(slots=True, frozen=True)
class BuildReport:
    """Outcome of one engine build."""

    requested: tuple[str, ...]
    built: tuple[str, ...]
    unchanged: tuple[str, ...]
    skipped: tuple[str, ...]
    duration_ms: int

    def to_dict(self) -> dict[str, object]:
        """Return serializable report."""
        return {
            "requested": list(self.requested),
            "built": list(self.built),
            "unchanged": list(self.unchanged),
            "skipped": list(self.skipped),
            "duration_ms": self.duration_ms,
        }
