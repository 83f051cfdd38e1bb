from __future__ import annotations

from pathlib import Path

import pytest

from import_cache.engine import BuildDatabase, BuildEngine, Rules
from import_cache.imports import register_module_imports, register_native_imports
from import_cache.paths import (
    PathOutsideRootError,
    join_search_root,
    normalize_project_path,
    normalize_search_roots,
)


def test_absolute_inputs_do_not_normalize() -> None:
    assert normalize_project_path("/abs/src") is None
    assert normalize_project_path("C:\\work\\src") is None
    assert normalize_project_path("\\\\server\\share") is None
    assert normalize_project_path("./src//lib/") == "src/lib"


def test_absolute_reference_never_joins_a_root() -> None:
    assert join_search_root("include", "/usr/include/stdio.h") is None
    assert join_search_root("include", "../shared/api.h") == "shared/api.h"


def test_search_roots_are_normalized_or_rejected() -> None:
    assert normalize_search_roots(["./src/", "lib", "."]) == ("src", "lib", ".")

    with pytest.raises(PathOutsideRootError) as exc_info:
        normalize_search_roots(["src", "/abs/src"])
    assert exc_info.value.path == "/abs/src"
    assert "does not start with the project root" in str(exc_info.value)


def test_registering_absolute_search_root_fails(tmp_path: Path) -> None:
    rules = Rules()

    with pytest.raises(PathOutsideRootError):
        register_module_imports(rules, "_build", [str(tmp_path / "src")])
    with pytest.raises(PathOutsideRootError):
        register_native_imports(rules, "_build", ["../vendor"])
    assert rules.names() == ()


def test_registering_absolute_output_root_fails(tmp_path: Path) -> None:
    with pytest.raises(PathOutsideRootError):
        register_module_imports(Rules(), str(tmp_path / "_build"), ["."])


def test_absolute_build_target_fails(tmp_path: Path) -> None:
    rules = Rules()
    register_module_imports(rules, "_build", ["src"])
    engine = BuildEngine(project_root=tmp_path, rules=rules, database=BuildDatabase(tmp_path))

    with pytest.raises(PathOutsideRootError) as exc_info:
        engine.build([str(tmp_path / "_build" / "Main.hs.directImports")])
    assert exc_info.value.expected_prefix == str(tmp_path.resolve())


def test_relative_search_root_resolves_after_normalization(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Foo.hs").write_text("module Foo where\n", encoding="utf-8")
    (tmp_path / "Main.hs").write_text("import Foo\n", encoding="utf-8")
    rules = Rules()
    register_module_imports(rules, "./_build/", ["./src/"])
    database = BuildDatabase(tmp_path / ".db")
    engine = BuildEngine(project_root=tmp_path, rules=rules, database=database)

    engine.build(["_build/Main.hs.directImports"])

    artifact = tmp_path / "_build" / "Main.hs.directImports"
    assert artifact.read_text(encoding="utf-8") == "src/Foo.hs\n"
