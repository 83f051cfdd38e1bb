from __future__ import annotations

import json
from pathlib import Path

import pytest

from import_cache.engine import (
    DATABASE_SCHEMA_VERSION,
    Action,
    BuildDatabase,
    BuildDatabaseSchemaError,
    BuildEngine,
    Rules,
)


def _copy(action: Action) -> None:
    action.write_changed(action.target, action.read_text("in.txt"))


def _engine(root: Path) -> BuildEngine:
    rules = Rules()
    rules.add("copy", lambda t: t == "gen/out", _copy)
    return BuildEngine(project_root=root, rules=rules, database=BuildDatabase(root / ".db"))


def test_save_writes_manifest_and_sorted_traces(tmp_path: Path) -> None:
    (tmp_path / "in.txt").write_text("data\n", encoding="utf-8")
    _engine(tmp_path).build(["gen/out"])

    manifest = json.loads((tmp_path / ".db" / "manifest.json").read_text(encoding="utf-8"))
    rows = [
        json.loads(line)
        for line in (tmp_path / ".db" / "traces.jsonl").read_text(encoding="utf-8").splitlines()
    ]

    assert manifest["schema_version"] == DATABASE_SCHEMA_VERSION
    assert manifest["target_count"] == 1
    assert isinstance(manifest["last_build_timestamp"], str)
    assert rows[0]["target"] == "gen/out"
    assert rows[0]["dependencies"][0]["path"] == "in.txt"
    assert rows[0]["dependencies"][0]["kind"] == "content"


def test_status_moves_from_not_built_to_ready(tmp_path: Path) -> None:
    (tmp_path / "in.txt").write_text("data\n", encoding="utf-8")
    database = BuildDatabase(tmp_path / ".db")

    before = database.status()
    _engine(tmp_path).build(["gen/out"])
    after = database.status()

    assert before.status == "not_built"
    assert before.target_count == 0
    assert after.status == "ready"
    assert after.target_count == 1


def test_schema_mismatch_raises_until_forced(tmp_path: Path) -> None:
    (tmp_path / "in.txt").write_text("data\n", encoding="utf-8")
    engine = _engine(tmp_path)
    engine.build(["gen/out"])
    manifest_path = tmp_path / ".db" / "manifest.json"
    manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    manifest["schema_version"] = 99
    manifest_path.write_text(json.dumps(manifest), encoding="utf-8")

    assert BuildDatabase(tmp_path / ".db").status().status == "schema_mismatch"
    with pytest.raises(BuildDatabaseSchemaError) as exc_info:
        engine.build(["gen/out"])
    assert exc_info.value.found == 99
    assert exc_info.value.expected == DATABASE_SCHEMA_VERSION

    report = engine.build(["gen/out"], force=True)

    assert report.unchanged == ("gen/out",)
    assert BuildDatabase(tmp_path / ".db").status().status == "ready"


def test_malformed_trace_rows_are_ignored(tmp_path: Path) -> None:
    (tmp_path / "in.txt").write_text("data\n", encoding="utf-8")
    engine = _engine(tmp_path)
    engine.build(["gen/out"])
    traces_path = tmp_path / ".db" / "traces.jsonl"
    traces_path.write_text("not json\n{\"target\": 3}\n", encoding="utf-8")

    assert BuildDatabase(tmp_path / ".db").load() == {}
    report = engine.build(["gen/out"])
    assert report.unchanged == ("gen/out",)
