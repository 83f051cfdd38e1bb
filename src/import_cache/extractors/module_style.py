"""Lexical extractor for dotted-module import statements."""

from __future__ import annotations

import re

from import_cache.extractors.base import has_extension, source_lines

_MODULE_CHAR_RE = re.compile(r"[\w.]+")


class DottedModuleExtractor:
    """Extract `import Some.Module` references line by line.

    A line is an import when it starts with the keyword followed by
    whitespace. The module name is the longest run of alphanumerics, dots
    and underscores beginning at the first uppercase letter after the
    keyword, so qualifiers such as `qualified` are skipped.
    """

    name = "dotted_module"

    def __init__(self, extensions: tuple[str, ...] = (".hs",), keyword: str = "import") -> None:
        if not extensions:
            raise ValueError("DottedModuleExtractor needs at least one extension.")
        self._extensions = extensions
        self._line_re = re.compile(rf"^{re.escape(keyword)}\s")

    @property
    def extensions(self) -> tuple[str, ...]:
        """Extensions handled; the first one is appended to module paths."""
        return self._extensions

    def supports_path(self, path: str) -> bool:
        """Return True when path carries one of the module extensions."""
        return has_extension(path, self._extensions)

    def extract(self, text: str) -> list[str]:
        """Return module names in source order."""
        references: list[str] = []
        for line in source_lines(text):
            match = self._line_re.match(line)
            if match is None:
                continue
            module = _module_token(line[match.end() :])
            if module:
                references.append(module)
        return references

    def candidate_path(self, reference: str) -> str:
        """Map `Foo.Bar` to `Foo/Bar.<ext>`."""
        return reference.replace(".", "/") + self._extensions[0]


def _module_token(rest: str) -> str:
    for index, char in enumerate(rest):
        if char.isupper():
            match = _MODULE_CHAR_RE.match(rest, index)
            return match.group(0) if match is not None else ""
    return ""
