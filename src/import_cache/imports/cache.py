"""Import cache facade over the build engine."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from import_cache.config import BuildConfig, CliOverrides, load_effective_config
from import_cache.engine import BuildDatabase, BuildEngine, BuildReport, Rules
from import_cache.imports.artifacts import parse_paths
from import_cache.imports.rules import register_default_rules
from import_cache.logging import JsonlAuditLogger
from import_cache.paths import DIRECT_IMPORTS, TRANSITIVE_IMPORTS, artifact_path, to_project_path

ALL_KINDS = (DIRECT_IMPORTS, TRANSITIVE_IMPORTS)


class ImportCache:
    """Builds and reads import artifacts for one project."""

    def __init__(self, config: BuildConfig) -> None:
        self._config = config
        self._rules = Rules()
        register_default_rules(self._rules, config)
        self._database = BuildDatabase(config.data_dir)
        self._audit_logger = JsonlAuditLogger(config.data_dir / "audit.jsonl")
        self._engine = BuildEngine(
            project_root=config.project_root,
            rules=self._rules,
            database=self._database,
            audit_logger=self._audit_logger,
        )

    @property
    def config(self) -> BuildConfig:
        """Return effective configuration."""
        return self._config

    @property
    def rules(self) -> Rules:
        """Return the rule table, open for further registrations."""
        return self._rules

    @property
    def engine(self) -> BuildEngine:
        """Return the underlying build engine."""
        return self._engine

    @property
    def database(self) -> BuildDatabase:
        """Return the build trace database."""
        return self._database

    @property
    def audit_logger(self) -> JsonlAuditLogger:
        """Return the audit logger."""
        return self._audit_logger

    def artifact(self, source: str, kind: str) -> str:
        """Return the project-relative artifact path for source."""
        return artifact_path(
            self._config.output_root,
            to_project_path(self._config.project_root, source),
            kind,
        )

    def build(
        self,
        sources: Iterable[str],
        kinds: tuple[str, ...] = ALL_KINDS,
        force: bool = False,
    ) -> BuildReport:
        """Bring the requested artifacts of every source up to date."""
        targets = [self.artifact(source, kind) for source in sources for kind in kinds]
        return self._engine.build(targets, force=force)

    def direct_imports(self, source: str, force: bool = False) -> list[str]:
        """Build and return the direct imports of source."""
        return self._read(source, DIRECT_IMPORTS, force)

    def transitive_imports(self, source: str, force: bool = False) -> list[str]:
        """Build and return the transitive imports of source."""
        return self._read(source, TRANSITIVE_IMPORTS, force)

    def _read(self, source: str, kind: str, force: bool) -> list[str]:
        target = self.artifact(source, kind)
        self._engine.build([target], force=force)
        path = self._config.project_root / target
        return parse_paths(path.read_text(encoding="utf-8"))


def create_cache(project_root: str, cli_overrides: CliOverrides | None = None) -> ImportCache:
    """Create an import cache from effective configuration."""
    config = load_effective_config(project_root=Path(project_root), overrides=cli_overrides)
    return ImportCache(config)
