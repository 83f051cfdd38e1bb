"""Tracked accessors for persisted import artifacts."""

from __future__ import annotations

from import_cache.engine import Action
from import_cache.imports.artifacts import parse_paths
from import_cache.paths import DIRECT_IMPORTS, TRANSITIVE_IMPORTS, artifact_path


def direct_imports(action: Action, output_root: str, source: str) -> list[str]:
    """Return the direct imports of source, building the artifact on demand.

    A rule calling this depends on the artifact and reruns when the
    import set of source changes. Call `action.need` on the result before
    compiling source.
    """
    return parse_paths(action.read_text(artifact_path(output_root, source, DIRECT_IMPORTS)))


def transitive_imports(action: Action, output_root: str, source: str) -> list[str]:
    """Return every file source depends on directly or indirectly, e.g. for linking."""
    return parse_paths(action.read_text(artifact_path(output_root, source, TRANSITIVE_IMPORTS)))
