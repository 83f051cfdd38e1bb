"""Persistent build-trace storage."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from import_cache.engine.models import Dependency, Trace

DATABASE_SCHEMA_VERSION = 1


@dataclass(slots=True, frozen=True)
class DatabaseStatus:
    """Current build database status snapshot."""

    status: str
    last_build_timestamp: str | None
    target_count: int


@dataclass(slots=True, frozen=True)
class BuildDatabaseSchemaError(Exception):
    """Raised when stored traces do not match the supported schema version."""

    found: int
    expected: int


class BuildDatabase:
    """Stores one trace per target as deterministic JSON files."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir.resolve()
        self._manifest_path = self._data_dir / "manifest.json"
        self._traces_path = self._data_dir / "traces.jsonl"

    @property
    def data_dir(self) -> Path:
        """Return on-disk database directory."""
        return self._data_dir

    def status(self) -> DatabaseStatus:
        """Return status derived from manifest, if present."""
        manifest = self._read_manifest()
        if manifest is None:
            return DatabaseStatus(status="not_built", last_build_timestamp=None, target_count=0)
        schema = manifest.get("schema_version")
        if not isinstance(schema, int) or schema != DATABASE_SCHEMA_VERSION:
            return DatabaseStatus(
                status="schema_mismatch", last_build_timestamp=None, target_count=0
            )
        timestamp = manifest.get("last_build_timestamp")
        count = manifest.get("target_count")
        return DatabaseStatus(
            status="ready",
            last_build_timestamp=timestamp if isinstance(timestamp, str) else None,
            target_count=count if isinstance(count, int) else 0,
        )

    def load(self, allow_schema_mismatch: bool = False) -> dict[str, Trace]:
        """Load stored traces keyed by target.

        With allow_schema_mismatch, traces from another schema version are
        discarded instead of raising.
        """
        manifest = self._read_manifest()
        if manifest is None:
            return {}
        schema = manifest.get("schema_version")
        if not isinstance(schema, int) or schema != DATABASE_SCHEMA_VERSION:
            if allow_schema_mismatch:
                return {}
            found = schema if isinstance(schema, int) else -1
            raise BuildDatabaseSchemaError(found=found, expected=DATABASE_SCHEMA_VERSION)
        if not self._traces_path.exists():
            return {}

        traces: dict[str, Trace] = {}
        for obj in self._read_jsonl(self._traces_path):
            trace = _trace_from_json(obj)
            if trace is not None:
                traces[trace.target] = trace
        return traces

    def save(self, traces: dict[str, Trace]) -> None:
        """Atomically persist all traces plus a manifest."""
        self._data_dir.mkdir(parents=True, exist_ok=True)
        rows = [_trace_to_json(traces[target]) for target in sorted(traces)]
        self._atomic_write_jsonl(self._traces_path, rows)
        manifest = {
            "schema_version": DATABASE_SCHEMA_VERSION,
            "last_build_timestamp": _utc_now_iso(),
            "target_count": len(rows),
        }
        self._atomic_write_json(self._manifest_path, manifest)

    def _read_manifest(self) -> dict[str, object] | None:
        if not self._manifest_path.exists():
            return None
        with self._manifest_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            return None
        return payload

    @staticmethod
    def _read_jsonl(path: Path) -> list[dict[str, object]]:
        output: list[dict[str, object]] = []
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                stripped = raw_line.strip()
                if not stripped:
                    continue
                try:
                    obj = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if isinstance(obj, dict):
                    output.append(obj)
        return output

    @staticmethod
    def _atomic_write_json(path: Path, payload: dict[str, object]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, sort_keys=True)
            handle.write("\n")
        tmp.replace(path)

    @staticmethod
    def _atomic_write_jsonl(path: Path, rows: list[dict[str, object]]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            for row in rows:
                handle.write(json.dumps(row, sort_keys=True))
                handle.write("\n")
        tmp.replace(path)


def _trace_to_json(trace: Trace) -> dict[str, object]:
    return {
        "target": trace.target,
        "result_stamp": trace.result_stamp,
        "dependencies": [
            {"path": dep.path, "kind": dep.kind, "stamp": dep.stamp}
            for dep in trace.dependencies
        ],
    }


def _trace_from_json(obj: dict[str, object]) -> Trace | None:
    target = obj.get("target")
    result_stamp = obj.get("result_stamp")
    raw_dependencies = obj.get("dependencies")
    if not isinstance(target, str):
        return None
    if not isinstance(result_stamp, str):
        return None
    if not isinstance(raw_dependencies, list):
        return None
    dependencies: list[Dependency] = []
    for raw in raw_dependencies:
        if not isinstance(raw, dict):
            return None
        path = raw.get("path")
        kind = raw.get("kind")
        stamp = raw.get("stamp")
        if not isinstance(path, str) or not isinstance(kind, str) or not isinstance(stamp, str):
            return None
        dependencies.append(Dependency(path=path, kind=kind, stamp=stamp))
    return Trace(target=target, result_stamp=result_stamp, dependencies=tuple(dependencies))


def _utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
