"""Ordered search-root resolution."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from import_cache.paths.layout import (
    is_absolute_path,
    normalize_project_path,
    require_project_path,
)

ExistsCheck = Callable[[str], bool]


def normalize_search_roots(roots: Sequence[str]) -> tuple[str, ...]:
    """Normalize search roots in order, raising on absolute or escaping entries."""
    return tuple(require_project_path(root) for root in roots)


def join_search_root(root: str, relative_path: str) -> str | None:
    """Join a search root and a relative path into a normalized project path.

    Returns None when relative_path is absolute or the result would escape
    the project root.
    """
    if is_absolute_path(relative_path):
        return None
    joined = normalize_project_path(f"{root}/{relative_path}")
    if joined is None or joined == ".":
        return None
    return joined


def find_search_root(
    roots: Sequence[str], relative_path: str, exists: ExistsCheck
) -> str | None:
    """Return the first root containing relative_path, else None."""
    for root in roots:
        candidate = join_search_root(root, relative_path)
        if candidate is None:
            continue
        if exists(candidate):
            return root
    return None


def resolve_in_roots(
    roots: Sequence[str], relative_path: str, exists: ExistsCheck
) -> str | None:
    """Return the project path of relative_path under the first root holding it."""
    root = find_search_root(roots, relative_path, exists)
    if root is None:
        return None
    return join_search_root(root, relative_path)
