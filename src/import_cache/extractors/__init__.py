"""Per-language import extractors."""

from .base import ImportExtractor, has_extension, source_lines
from .module_style import DottedModuleExtractor
from .quoted_include import QuotedIncludeExtractor
from .registry import ExtractorRegistry, RegisteredExtractor
from .runtime import build_extractor_registry, module_extractor, native_extractor

__all__ = [
    "DottedModuleExtractor",
    "ExtractorRegistry",
    "ImportExtractor",
    "QuotedIncludeExtractor",
    "RegisteredExtractor",
    "build_extractor_registry",
    "has_extension",
    "module_extractor",
    "native_extractor",
    "source_lines",
]
