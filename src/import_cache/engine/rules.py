"""Target rule registration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from import_cache.engine.engine import Action

TargetPredicate = Callable[[str], bool]
RuleAction = Callable[["Action"], None]


@dataclass(slots=True, frozen=True)
class Rule:
    """Computation producing every target its predicate accepts."""

    name: str
    matches: TargetPredicate
    run: RuleAction


class NoRuleError(LookupError):
    """Raised when a requested target has no rule and is not a source file."""

    def __init__(self, target: str) -> None:
        super().__init__(f"no rule builds {target}")
        self.target = target


@dataclass(slots=True)
class Rules:
    """Ordered rule table; the first matching rule wins."""

    _rules: list[Rule] = field(default_factory=list)

    def add(self, name: str, matches: TargetPredicate, run: RuleAction) -> None:
        """Register a rule in deterministic insertion order."""
        self._rules.append(Rule(name=name, matches=matches, run=run))

    def match(self, target: str) -> Rule | None:
        """Return the first rule accepting target, else None."""
        for rule in self._rules:
            if rule.matches(target):
                return rule
        return None

    def names(self) -> tuple[str, ...]:
        """Return registered rule names in deterministic order."""
        return tuple(rule.name for rule in self._rules)
