"""Resolve extracted import references against ordered search roots."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from import_cache.engine import Action
from import_cache.extractors import ImportExtractor
from import_cache.paths import ExistsCheck, resolve_in_roots

DirectImportsCallback = Callable[[Action, str], list[str]]


def compute_direct_imports(
    source_text: str,
    extractor: ImportExtractor,
    search_roots: Sequence[str],
    exists: ExistsCheck,
) -> list[str]:
    """Return resolved imports of source_text in extraction order.

    References that resolve under no search root are dropped.
    """
    resolved: list[str] = []
    for reference in extractor.extract(source_text):
        candidate = extractor.candidate_path(reference)
        found = resolve_in_roots(search_roots, candidate, exists)
        if found is not None:
            resolved.append(found)
    return resolved


def direct_imports_callback(
    extractor: ImportExtractor, search_roots: Sequence[str]
) -> DirectImportsCallback:
    """Bind an extractor and search roots into a tracked direct-imports callback."""
    roots = tuple(search_roots)

    def direct_imports_of(action: Action, source: str) -> list[str]:
        text = action.read_text(source)
        return compute_direct_imports(text, extractor, roots, action.file_exists)

    return direct_imports_of
