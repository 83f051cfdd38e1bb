"""Line-oriented artifact format: one project-relative path per line."""

from __future__ import annotations

from collections.abc import Iterable


def serialize_paths(paths: Iterable[str]) -> str:
    """Render paths one per line with a trailing newline; empty input is ''."""
    lines: list[str] = []
    for path in paths:
        if "\n" in path or "\r" in path:
            raise ValueError(f"Artifact entries must not contain newlines: {path!r}")
        lines.append(path)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def parse_paths(text: str) -> list[str]:
    """Return every non-empty line as a literal path."""
    return [line for line in text.split("\n") if line]


def unique_paths(paths: Iterable[str], exclude: str | None = None) -> list[str]:
    """Drop duplicates keeping first occurrence, optionally dropping one path."""
    seen: set[str] = set()
    output: list[str] = []
    for path in paths:
        if path == exclude or path in seen:
            continue
        seen.add(path)
        output.append(path)
    return output
