"""Core extractor protocol."""

from __future__ import annotations

from typing import Protocol


class ImportExtractor(Protocol):
    """Protocol implemented by per-language import extractors."""

    name: str

    def supports_path(self, path: str) -> bool:
        """Return True when extractor handles a source file path."""

    def extract(self, text: str) -> list[str]:
        """Return raw import references in source order."""

    def candidate_path(self, reference: str) -> str:
        """Map a raw reference to a relative file path candidate."""


def has_extension(path: str, extensions: tuple[str, ...]) -> bool:
    """Return True when path ends with one of the extensions."""
    return path.lower().endswith(tuple(extension.lower() for extension in extensions))


def source_lines(text: str) -> list[str]:
    """Split on '\\n' only, dropping one trailing '\\r' from each line."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
