"""Runtime extractor registry construction."""

from __future__ import annotations

from import_cache.config import BuildConfig
from import_cache.extractors.module_style import DottedModuleExtractor
from import_cache.extractors.quoted_include import QuotedIncludeExtractor
from import_cache.extractors.registry import ExtractorRegistry


def module_extractor(config: BuildConfig) -> DottedModuleExtractor:
    """Build the dotted-module extractor from effective config."""
    return DottedModuleExtractor(
        extensions=config.module.extensions,
        keyword=config.module.keyword,
    )


def native_extractor(config: BuildConfig) -> QuotedIncludeExtractor:
    """Build the quoted-include extractor from effective config."""
    return QuotedIncludeExtractor(
        extensions=config.native.extensions,
        keyword=config.native.keyword,
    )


def build_extractor_registry(config: BuildConfig) -> ExtractorRegistry:
    """Build the registry of enabled extractor families from effective config."""
    registry = ExtractorRegistry()
    if config.module.enabled:
        registry.register(module_extractor(config), config.module.search_roots)
    if config.native.enabled:
        registry.register(native_extractor(config), config.native.search_roots)
    return registry
