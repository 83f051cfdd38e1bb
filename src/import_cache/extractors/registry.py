"""Extractor registry with deterministic ordering."""

from __future__ import annotations

from dataclasses import dataclass, field

from import_cache.extractors.base import ImportExtractor


@dataclass(slots=True, frozen=True)
class RegisteredExtractor:
    """Extractor paired with the roots its references are resolved against."""

    extractor: ImportExtractor
    search_roots: tuple[str, ...]


@dataclass(slots=True)
class ExtractorRegistry:
    """Ordered extractor registry; earlier entries win for shared extensions."""

    _entries: list[RegisteredExtractor] = field(default_factory=list)

    def register(self, extractor: ImportExtractor, search_roots: tuple[str, ...]) -> None:
        """Register an extractor in deterministic insertion order."""
        if extractor.name in self.names():
            raise ValueError(f"Extractor already registered: {extractor.name}")
        self._entries.append(RegisteredExtractor(extractor=extractor, search_roots=search_roots))

    def entries(self) -> tuple[RegisteredExtractor, ...]:
        """Return registered extractors in deterministic order."""
        return tuple(self._entries)

    def names(self) -> tuple[str, ...]:
        """Return registered extractor names in deterministic order."""
        return tuple(entry.extractor.name for entry in self._entries)
