"""Direct and transitive import caching."""

from .artifacts import parse_paths, serialize_paths, unique_paths
from .cache import ALL_KINDS, ImportCache, create_cache
from .direct import DirectImportsCallback, compute_direct_imports, direct_imports_callback
from .query import direct_imports, transitive_imports
from .rules import (
    register_default_rules,
    register_extractor_rules,
    register_import_rules,
    register_module_imports,
    register_native_imports,
)

__all__ = [
    "ALL_KINDS",
    "DirectImportsCallback",
    "ImportCache",
    "compute_direct_imports",
    "create_cache",
    "direct_imports",
    "direct_imports_callback",
    "parse_paths",
    "register_default_rules",
    "register_extractor_rules",
    "register_import_rules",
    "register_module_imports",
    "register_native_imports",
    "serialize_paths",
    "transitive_imports",
    "unique_paths",
]
