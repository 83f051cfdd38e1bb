from __future__ import annotations

from pathlib import Path

from import_cache.config import load_effective_config
from import_cache.engine import Action
from import_cache.imports import ImportCache, direct_imports, transitive_imports


def _write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _cache_with_consumers(root: Path) -> ImportCache:
    cache = ImportCache(load_effective_config(root))
    output_root = cache.config.output_root

    def compile_object(action: Action) -> None:
        source = action.target[len("obj/") : -len(".o")]
        imports = direct_imports(action, output_root, source)
        action.need(imports)
        action.write_changed(action.target, f"{source}: {' '.join(imports)}\n")

    def link_program(action: Action) -> None:
        main = action.target[len("bin/") :] + ".hs"
        sources = [main, *transitive_imports(action, output_root, main)]
        objects = [f"obj/{path}.o" for path in sources]
        action.need(objects)
        action.write_changed(action.target, "\n".join(objects) + "\n")

    cache.rules.add("objects", lambda t: t.startswith("obj/") and t.endswith(".o"), compile_object)
    cache.rules.add("programs", lambda t: t.startswith("bin/"), link_program)
    return cache


def test_consumer_rule_reads_direct_imports(tmp_path: Path) -> None:
    _write(tmp_path, "Main.hs", "import Foo\n")
    _write(tmp_path, "Foo.hs", "module Foo where\n")
    cache = _cache_with_consumers(tmp_path)

    cache.engine.build(["obj/Main.hs.o"])

    assert (tmp_path / "obj" / "Main.hs.o").read_text(encoding="utf-8") == "Main.hs: Foo.hs\n"


def test_consumer_reruns_when_dependency_set_changes(tmp_path: Path) -> None:
    _write(tmp_path, "Main.hs", "import Foo\n")
    _write(tmp_path, "Foo.hs", "module Foo where\n")
    _write(tmp_path, "Bar.hs", "module Bar where\n")
    cache = _cache_with_consumers(tmp_path)
    cache.engine.build(["obj/Main.hs.o"])

    _write(tmp_path, "Main.hs", "import Foo\nimport Bar\n")
    report = cache.engine.build(["obj/Main.hs.o"])

    assert "obj/Main.hs.o" in report.built
    assert (tmp_path / "obj" / "Main.hs.o").read_text(encoding="utf-8") == (
        "Main.hs: Foo.hs Bar.hs\n"
    )


def test_consumer_skipped_when_import_set_is_stable(tmp_path: Path) -> None:
    _write(tmp_path, "Main.hs", "import Foo\n")
    _write(tmp_path, "Foo.hs", "module Foo where\n")
    cache = _cache_with_consumers(tmp_path)
    cache.engine.build(["obj/Main.hs.o"])

    _write(tmp_path, "Main.hs", "import Foo\nmain = pure ()\n")
    report = cache.engine.build(["obj/Main.hs.o"])

    assert report.unchanged == ("_build/Main.hs.directImports",)
    assert report.skipped == ("obj/Main.hs.o",)


def test_consumer_reruns_when_needed_import_changes(tmp_path: Path) -> None:
    _write(tmp_path, "Main.hs", "import Foo\n")
    _write(tmp_path, "Foo.hs", "module Foo where\n")
    cache = _cache_with_consumers(tmp_path)
    cache.engine.build(["obj/Main.hs.o"])

    _write(tmp_path, "Foo.hs", "module Foo where\nfoo = 2\n")
    report = cache.engine.build(["obj/Main.hs.o"])

    assert report.unchanged == ("obj/Main.hs.o",)


def test_link_rule_uses_transitive_imports(tmp_path: Path) -> None:
    _write(tmp_path, "App.hs", "import Lib.Core\n")
    _write(tmp_path, "Lib/Core.hs", "import Lib.Util\n")
    _write(tmp_path, "Lib/Util.hs", "module Lib.Util where\n")
    cache = _cache_with_consumers(tmp_path)

    cache.engine.build(["bin/App"])

    assert (tmp_path / "bin" / "App").read_text(encoding="utf-8") == (
        "obj/App.hs.o\nobj/Lib/Core.hs.o\nobj/Lib/Util.hs.o\n"
    )
