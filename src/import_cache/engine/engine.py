"""Incremental build engine with tracked reads and early cutoff."""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from import_cache.engine.database import BuildDatabase
from import_cache.engine.models import BuildReport, Dependency, Trace
from import_cache.engine.rules import NoRuleError, Rule, Rules
from import_cache.engine.stamps import (
    ABSENT,
    CONTENT,
    EXISTS,
    MISSING,
    PRESENT,
    content_stamp,
    current_stamp,
    sha256_bytes,
)
from import_cache.logging import JsonlAuditLogger
from import_cache.paths import PathOutsideRootError, normalize_project_path


class BuildFailedError(Exception):
    """Raised when a target cannot be produced."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__(f"{target}: {message}")
        self.target = target
        self.message = message


class CyclicDependencyError(BuildFailedError):
    """Raised when a target is requested while it is still being built."""

    def __init__(self, stack: list[str]) -> None:
        super().__init__(target=stack[-1], message="cycle: " + " -> ".join(stack))
        self.stack = tuple(stack)


class SourceReadError(Exception):
    """Raised when a tracked read hits a missing or unreadable file."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(slots=True)
class _BuildRun:
    """Mutable state of one build invocation."""

    force: bool
    traces: dict[str, Trace]
    stack: list[str] = field(default_factory=list)
    outcomes: dict[str, str] = field(default_factory=dict)


class Action:
    """Context handed to a rule while it computes one target.

    Every read and existence check goes through this object so it is
    recorded as an input of the target. Reading a path that is itself a
    target builds it first.
    """

    def __init__(self, engine: BuildEngine, run: _BuildRun, target: str, rule: Rule) -> None:
        self._engine = engine
        self._run = run
        self._target = target
        self._rule = rule
        self._dependencies: dict[tuple[str, str], Dependency] = {}
        self._written: set[str] = set()

    @property
    def target(self) -> str:
        """Target being computed."""
        return self._target

    @property
    def dependencies(self) -> tuple[Dependency, ...]:
        """Tracked reads in first-observed order."""
        return tuple(self._dependencies.values())

    def wrote(self, path: str) -> bool:
        """Return True when write_changed actually rewrote path."""
        return self._engine.project_path(path) in self._written

    def need(self, targets: Iterable[str]) -> None:
        """Build targets and depend on their content.

        Paths no rule produces are plain source files and must exist.
        """
        for target in targets:
            path = self._engine.project_path(target)
            if self._engine.has_rule(path):
                self._engine.need(self._run, path)
            elif not self._engine.absolute(path).is_file():
                raise NoRuleError(target=path)
            self._track(path, CONTENT, content_stamp(self._engine.absolute(path)))

    def has_rule(self, path: str) -> bool:
        """Return True when some rule produces path."""
        return self._engine.has_rule(self._engine.project_path(path))

    def in_progress(self, target: str) -> bool:
        """Return True when target is on the current build stack."""
        return self._engine.project_path(target) in self._run.stack

    def read_text(self, path: str) -> str:
        """Read a file as UTF-8 text, building it first when it is a target."""
        project_path = self._engine.project_path(path)
        if self._engine.has_rule(project_path):
            self._engine.need(self._run, project_path)
        full_path = self._engine.absolute(project_path)
        try:
            payload = full_path.read_bytes()
        except OSError as exc:
            self._track(project_path, CONTENT, MISSING)
            raise SourceReadError(path=project_path, reason=exc.strerror or str(exc)) from exc
        self._track(project_path, CONTENT, sha256_bytes(payload))
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SourceReadError(path=project_path, reason="not valid UTF-8") from exc

    def file_exists(self, path: str) -> bool:
        """Return True when path is a regular file, tracking only existence."""
        project_path = self._engine.project_path(path)
        if self._engine.has_rule(project_path):
            self._engine.need(self._run, project_path)
        exists = self._engine.absolute(project_path).is_file()
        self._track(project_path, EXISTS, PRESENT if exists else ABSENT)
        return exists

    def write_changed(self, path: str, text: str) -> bool:
        """Write text only when it differs from the file on disk."""
        project_path = self._engine.project_path(path)
        full_path = self._engine.absolute(project_path)
        payload = text.encode("utf-8")
        if full_path.is_file() and full_path.read_bytes() == payload:
            return False
        full_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = full_path.with_name(full_path.name + ".tmp")
        tmp.write_bytes(payload)
        tmp.replace(full_path)
        self._written.add(project_path)
        return True

    def note(self, outcome: str, metadata: dict[str, object]) -> None:
        """Record an audit event for the current target."""
        self._engine.audit(self._target, self._rule.name, outcome, metadata)

    def _track(self, path: str, kind: str, stamp: str) -> None:
        key = (path, kind)
        if key not in self._dependencies:
            self._dependencies[key] = Dependency(path=path, kind=kind, stamp=stamp)


class BuildEngine:
    """Builds targets through registered rules, skipping clean ones."""

    def __init__(
        self,
        project_root: Path,
        rules: Rules,
        database: BuildDatabase,
        audit_logger: JsonlAuditLogger | None = None,
    ) -> None:
        self._project_root = project_root.resolve()
        self._rules = rules
        self._database = database
        self._audit_logger = audit_logger

    @property
    def project_root(self) -> Path:
        """Directory every target and tracked path is relative to."""
        return self._project_root

    def build(self, targets: Iterable[str], force: bool = False) -> BuildReport:
        """Bring targets up to date; each target runs at most once per build."""
        started = time.perf_counter()
        requested = tuple(self.project_path(target) for target in targets)
        run = _BuildRun(
            force=force,
            traces=self._database.load(allow_schema_mismatch=force),
        )
        try:
            for target in requested:
                self.need(run, target)
        finally:
            self._database.save(run.traces)
        return BuildReport(
            requested=requested,
            built=_with_outcome(run, "built"),
            unchanged=_with_outcome(run, "unchanged"),
            skipped=_with_outcome(run, "skipped"),
            duration_ms=int((time.perf_counter() - started) * 1000),
        )

    def need(self, run: _BuildRun, target: str) -> None:
        """Ensure target is up to date within run."""
        if target in run.outcomes:
            return
        if target in run.stack:
            raise CyclicDependencyError([*run.stack, target])
        rule = self._rules.match(target)
        if rule is None:
            raise NoRuleError(target=target)

        run.stack.append(target)
        try:
            if self._is_clean(run, target):
                outcome = "skipped"
            else:
                outcome = self._execute(run, target, rule)
        finally:
            run.stack.pop()
        run.outcomes[target] = outcome
        self.audit(target, rule.name, outcome, {})

    def has_rule(self, path: str) -> bool:
        """Return True when some rule produces path."""
        return self._rules.match(path) is not None

    def project_path(self, path: str) -> str:
        """Normalize a project-relative path, rejecting escapes."""
        normalized = normalize_project_path(path)
        if normalized is None or normalized == ".":
            raise PathOutsideRootError(path=path, expected_prefix=str(self._project_root))
        return normalized

    def absolute(self, path: str) -> Path:
        """Return the on-disk location of a project-relative path."""
        return self._project_root / path

    def audit(self, target: str, rule: str, outcome: str, metadata: dict[str, object]) -> None:
        """Forward an event to the audit log when one is configured."""
        if self._audit_logger is not None:
            self._audit_logger.record(target=target, rule=rule, outcome=outcome, metadata=metadata)

    def _is_clean(self, run: _BuildRun, target: str) -> bool:
        if run.force:
            return False
        trace = run.traces.get(target)
        if trace is None:
            return False
        if content_stamp(self.absolute(target)) != trace.result_stamp:
            return False
        for dependency in trace.dependencies:
            if self.has_rule(dependency.path):
                if dependency.path in run.stack:
                    return False
                self.need(run, dependency.path)
            if current_stamp(self._project_root, dependency.path, dependency.kind) != (
                dependency.stamp
            ):
                return False
        return True

    def _execute(self, run: _BuildRun, target: str, rule: Rule) -> str:
        action = Action(self, run, target, rule)
        try:
            rule.run(action)
        except BuildFailedError:
            raise
        except Exception as exc:
            self.audit(target, rule.name, "failed", {"error": str(exc)})
            raise BuildFailedError(target=target, message=str(exc)) from exc
        result_stamp = content_stamp(self.absolute(target))
        if result_stamp == MISSING:
            self.audit(target, rule.name, "failed", {"error": "rule did not write target"})
            raise BuildFailedError(target=target, message="rule did not write target")
        run.traces[target] = Trace(
            target=target,
            result_stamp=result_stamp,
            dependencies=action.dependencies,
        )
        return "built" if action.wrote(target) else "unchanged"


def _with_outcome(run: _BuildRun, outcome: str) -> tuple[str, ...]:
    return tuple(target for target, value in run.outcomes.items() if value == outcome)
