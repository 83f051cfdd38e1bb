"""Direct- and transitive-import rules registered with the build engine."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Sequence

from import_cache.config import (
    DEFAULT_MODULE_EXTENSIONS,
    DEFAULT_NATIVE_EXTENSIONS,
    BuildConfig,
)
from import_cache.engine import Action, Rules
from import_cache.extractors import (
    DottedModuleExtractor,
    ImportExtractor,
    QuotedIncludeExtractor,
    build_extractor_registry,
)
from import_cache.imports.artifacts import parse_paths, serialize_paths, unique_paths
from import_cache.imports.direct import DirectImportsCallback, direct_imports_callback
from import_cache.paths import (
    DIRECT_IMPORTS,
    TRANSITIVE_IMPORTS,
    artifact_path,
    is_under,
    normalize_search_roots,
    require_project_path,
    source_path_for,
)

SourcePredicate = Callable[[str], bool]


def register_import_rules(
    rules: Rules,
    output_root: str,
    applies: SourcePredicate,
    direct_imports_of: DirectImportsCallback,
    name: str = "imports",
) -> None:
    """Register direct and transitive import rules for sources accepted by applies."""
    output_root = require_project_path(output_root)

    def is_direct_key(target: str) -> bool:
        return _is_artifact_key(output_root, target, DIRECT_IMPORTS, applies)

    def build_direct(action: Action) -> None:
        source = source_path_for(output_root, action.target, DIRECT_IMPORTS)
        imports = direct_imports_of(action, source)
        action.write_changed(action.target, serialize_paths(imports))

    def is_transitive_key(target: str) -> bool:
        return _is_artifact_key(output_root, target, TRANSITIVE_IMPORTS, applies)

    def read_direct(action: Action, source: str) -> list[str]:
        return parse_paths(action.read_text(artifact_path(output_root, source, DIRECT_IMPORTS)))

    def build_transitive(action: Action) -> None:
        source = source_path_for(output_root, action.target, TRANSITIVE_IMPORTS)
        direct = read_direct(action, source)
        collected = list(direct)
        pending = deque(direct)
        expanded = {source}
        while pending:
            imported = pending.popleft()
            if imported in expanded:
                continue
            expanded.add(imported)
            imported_target = artifact_path(output_root, imported, TRANSITIVE_IMPORTS)
            if not action.has_rule(imported_target):
                # no rule family handles this file type: it is a leaf
                continue
            if action.in_progress(imported_target):
                # back-edge: its closure is not written yet, walk its direct imports
                action.note("cycle_detected", {"via": imported_target})
                nested = read_direct(action, imported)
                collected.extend(nested)
                pending.extend(nested)
                continue
            collected.extend(parse_paths(action.read_text(imported_target)))
        action.write_changed(action.target, serialize_paths(unique_paths(collected, source)))

    rules.add(f"{name}.{DIRECT_IMPORTS}", is_direct_key, build_direct)
    rules.add(f"{name}.{TRANSITIVE_IMPORTS}", is_transitive_key, build_transitive)


def register_extractor_rules(
    rules: Rules,
    output_root: str,
    extractor: ImportExtractor,
    search_roots: Sequence[str],
) -> None:
    """Register import rules for every source the extractor supports."""
    roots = normalize_search_roots(search_roots)
    register_import_rules(
        rules,
        output_root,
        applies=extractor.supports_path,
        direct_imports_of=direct_imports_callback(extractor, roots),
        name=extractor.name,
    )


def register_module_imports(
    rules: Rules,
    output_root: str,
    search_roots: Sequence[str],
    extensions: tuple[str, ...] = DEFAULT_MODULE_EXTENSIONS,
) -> None:
    """Register import rules for dotted-module sources."""
    register_extractor_rules(
        rules, output_root, DottedModuleExtractor(extensions=extensions), search_roots
    )


def register_native_imports(
    rules: Rules,
    output_root: str,
    search_roots: Sequence[str],
    extensions: tuple[str, ...] = DEFAULT_NATIVE_EXTENSIONS,
) -> None:
    """Register import rules for sources using quoted includes."""
    register_extractor_rules(
        rules, output_root, QuotedIncludeExtractor(extensions=extensions), search_roots
    )


def register_default_rules(rules: Rules, config: BuildConfig) -> None:
    """Register one rule family per enabled extractor, in registry order."""
    for entry in build_extractor_registry(config).entries():
        register_extractor_rules(rules, config.output_root, entry.extractor, entry.search_roots)


def _is_artifact_key(
    output_root: str, target: str, kind: str, applies: SourcePredicate
) -> bool:
    suffix = f".{kind}"
    if not target.endswith(suffix):
        return False
    if not is_under(output_root, target[: -len(suffix)]):
        return False
    return applies(source_path_for(output_root, target, kind))
