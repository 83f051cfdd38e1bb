"""Project-relative paths and artifact naming under the output root."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")

DIRECT_IMPORTS: Final[str] = "directImports"
TRANSITIVE_IMPORTS: Final[str] = "transitiveImports"
ARTIFACT_KINDS: Final[tuple[str, ...]] = (DIRECT_IMPORTS, TRANSITIVE_IMPORTS)


class PathOutsideRootError(Exception):
    """Raised when a path does not live under the root it is expected under."""

    def __init__(self, path: str, expected_prefix: str) -> None:
        super().__init__(f"{path} does not start with {expected_prefix}")
        self.path = path
        self.expected_prefix = expected_prefix


def _normalize_separators(candidate: str) -> tuple[str, bool]:
    """Normalize path separators and detect absolute-style inputs."""
    normalized = candidate.replace("\\", "/")
    if normalized.startswith("/"):
        return normalized, True
    if WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        return normalized, True
    return normalized, False


def is_absolute_path(candidate: str) -> bool:
    """Return True for POSIX, UNC or drive-letter absolute paths."""
    return _normalize_separators(candidate)[1]


def normalize_project_path(candidate: str) -> str | None:
    """Collapse '.', '..' and duplicate separators of a relative path.

    Returns None when the path is absolute or climbs above its starting
    directory. The project root itself normalizes to '.'.
    """
    normalized, is_absolute_style = _normalize_separators(candidate)
    if is_absolute_style:
        return None
    parts: list[str] = []
    for part in normalized.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not parts:
                return None
            parts.pop()
            continue
        parts.append(part)
    if not parts:
        return "."
    return "/".join(parts)


def to_project_path(project_root: Path, candidate: str) -> str:
    """Convert a relative or absolute path to a project-relative POSIX path."""
    root = project_root.resolve()
    normalized, is_absolute_style = _normalize_separators(candidate)
    if is_absolute_style:
        resolved_absolute = Path(normalized).resolve(strict=False)
        if not resolved_absolute.is_relative_to(root):
            raise PathOutsideRootError(path=candidate, expected_prefix=str(root))
        relative = resolved_absolute.relative_to(root).as_posix()
        return relative or "."

    project_path = normalize_project_path(normalized)
    if project_path is None:
        raise PathOutsideRootError(path=candidate, expected_prefix=str(root))
    return project_path


def require_project_path(candidate: str) -> str:
    """Normalize a relative path, raising when it is absolute or escapes the root."""
    project_path = normalize_project_path(candidate)
    if project_path is None:
        raise PathOutsideRootError(path=candidate, expected_prefix="the project root")
    return project_path


def _components(path: str) -> list[str]:
    normalized = normalize_project_path(path)
    if normalized is None or normalized == ".":
        return []
    return normalized.split("/")


def is_under(output_root: str, path: str) -> bool:
    """Return True when path lies strictly below output_root."""
    prefix = _components(output_root)
    parts = _components(path)
    return len(parts) > len(prefix) and parts[: len(prefix)] == prefix


def strip_output_root(output_root: str, path: str) -> str:
    """Drop the output-root prefix from path, component by component."""
    if not is_under(output_root, path):
        raise PathOutsideRootError(path=path, expected_prefix=output_root)
    prefix = _components(output_root)
    return "/".join(_components(path)[len(prefix) :])


def artifact_path(output_root: str, source: str, kind: str) -> str:
    """Return the artifact location for a project-relative source file."""
    if kind not in ARTIFACT_KINDS:
        raise ValueError(f"Unknown artifact kind: {kind}")
    prefix = _components(output_root)
    return "/".join([*prefix, *_components(source)]) + f".{kind}"


def source_path_for(output_root: str, artifact: str, kind: str) -> str:
    """Recover the source file path an artifact was derived from."""
    suffix = f".{kind}"
    if not artifact.endswith(suffix):
        raise ValueError(f"Artifact {artifact} does not end with {suffix}")
    return strip_output_root(output_root, artifact[: -len(suffix)])
