"""Project-relative path handling and search-root resolution."""

from .layout import (
    DIRECT_IMPORTS,
    TRANSITIVE_IMPORTS,
    PathOutsideRootError,
    artifact_path,
    is_absolute_path,
    is_under,
    normalize_project_path,
    require_project_path,
    source_path_for,
    strip_output_root,
    to_project_path,
)
from .resolver import (
    ExistsCheck,
    find_search_root,
    join_search_root,
    normalize_search_roots,
    resolve_in_roots,
)

__all__ = [
    "DIRECT_IMPORTS",
    "ExistsCheck",
    "PathOutsideRootError",
    "TRANSITIVE_IMPORTS",
    "artifact_path",
    "find_search_root",
    "is_absolute_path",
    "is_under",
    "join_search_root",
    "normalize_project_path",
    "normalize_search_roots",
    "require_project_path",
    "resolve_in_roots",
    "source_path_for",
    "strip_output_root",
    "to_project_path",
]
