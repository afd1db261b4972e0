"""Data models for lint rules and their findings."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from curriculum_lint.corpus.models import Module
from curriculum_lint.utils.config import LintConfig

CORPUS_ENTITY = "<corpus>"


class Severity(Enum):
    """How much a finding counts against the curriculum."""

    VIOLATION = "violation"  # Hard finding
    ADVISORY = "advisory"  # Best-effort heuristic


@dataclass(frozen=True)
class Violation:
    """A single finding.

    Attributes:
        rule: Name of the rule that produced it
        severity: Severity of that rule
        module: Offending module id, or "<corpus>" for corpus-wide findings
        message: Human-readable description
        remediation: Suggested fix
    """

    rule: str
    severity: Severity
    module: str
    message: str
    remediation: str = ""

    @property
    def is_hard(self) -> bool:
        return self.severity is Severity.VIOLATION

    def to_dict(self) -> dict[str, Any]:
        return {
            "module": self.module,
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
            "remediation": self.remediation,
        }


# A check returns one message per finding; an empty list means the module passes.
ModuleCheck = Callable[[Module, LintConfig], list[str]]


@dataclass(frozen=True)
class Rule:
    """Declarative per-module rule.

    Attributes:
        name: Rule name as it appears in reports
        severity: Severity of every finding it produces
        description: What the rule checks
        remediation: Suggested fix attached to every finding
        check: Predicate over a module returning finding messages
    """

    name: str
    severity: Severity
    description: str
    remediation: str
    check: ModuleCheck

    def evaluate(self, module: Module, config: LintConfig) -> list[Violation]:
        """Apply the rule to one module."""
        return [
            Violation(
                rule=self.name,
                severity=self.severity,
                module=module.module_id,
                message=message,
                remediation=self.remediation,
            )
            for message in self.check(module, config)
        ]
