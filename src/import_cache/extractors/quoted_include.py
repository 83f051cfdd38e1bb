"""Lexical extractor for quoted include directives."""

from __future__ import annotations

from import_cache.extractors.base import has_extension, source_lines


class QuotedIncludeExtractor:
    """Extract `#include "path"` directives; angle-bracket includes are ignored."""

    name = "quoted_include"

    def __init__(
        self,
        extensions: tuple[str, ...] = (".cpp",),
        keyword: str = "#include",
    ) -> None:
        self._extensions = extensions
        self._keyword = keyword

    @property
    def extensions(self) -> tuple[str, ...]:
        """Extensions handled by this extractor."""
        return self._extensions

    def supports_path(self, path: str) -> bool:
        """Return True when path carries one of the native extensions."""
        return has_extension(path, self._extensions)

    def extract(self, text: str) -> list[str]:
        """Return quoted include paths in source order."""
        references: list[str] = []
        for line in source_lines(text):
            tokens = line.split()
            if len(tokens) != 2 or tokens[0] != self._keyword:
                continue
            literal = tokens[1]
            if len(literal) > 2 and literal.startswith('"') and literal.endswith('"'):
                references.append(literal[1:-1])
        return references

    def candidate_path(self, reference: str) -> str:
        """Quoted includes already name a relative path."""
        return reference
