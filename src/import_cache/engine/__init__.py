"""Incremental build engine: rules, tracked reads, persisted traces."""

from .database import (
    DATABASE_SCHEMA_VERSION,
    BuildDatabase,
    BuildDatabaseSchemaError,
    DatabaseStatus,
)
from .engine import (
    Action,
    BuildEngine,
    BuildFailedError,
    CyclicDependencyError,
    SourceReadError,
)
from .models import BuildReport, Dependency, Trace
from .rules import NoRuleError, Rule, RuleAction, Rules, TargetPredicate

__all__ = [
    "Action",
    "BuildDatabase",
    "BuildDatabaseSchemaError",
    "BuildEngine",
    "BuildFailedError",
    "BuildReport",
    "CyclicDependencyError",
    "DATABASE_SCHEMA_VERSION",
    "DatabaseStatus",
    "Dependency",
    "NoRuleError",
    "Rule",
    "RuleAction",
    "Rules",
    "SourceReadError",
    "TargetPredicate",
    "Trace",
]
