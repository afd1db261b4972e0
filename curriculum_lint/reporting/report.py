"""Aggregation of findings into a single lint report."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from curriculum_lint.corpus.models import ParseFailure
from curriculum_lint.rules.models import Severity, Violation


@dataclass
class Report:
    """Outcome of one lint run.

    Attributes:
        violations: Findings in corpus order
        unparsed: Documents that could not be parsed
        modules_checked: Number of modules that were parsed and checked
        strict: Whether advisory findings count as failures
    """

    violations: list[Violation] = field(default_factory=list)
    unparsed: list[ParseFailure] = field(default_factory=list)
    modules_checked: int = 0
    strict: bool = False

    @property
    def total(self) -> int:
        return len(self.violations)

    @property
    def hard_count(self) -> int:
        return sum(1 for violation in self.violations if violation.severity is Severity.VIOLATION)

    @property
    def advisory_count(self) -> int:
        return sum(1 for violation in self.violations if violation.severity is Severity.ADVISORY)

    def counts_by_rule(self) -> dict[str, int]:
        """Violation counts per rule name, sorted by rule name."""
        counts = Counter(violation.rule for violation in self.violations)
        return dict(sorted(counts.items()))

    def by_module(self) -> dict[str, list[Violation]]:
        """Violations grouped by module, in report order."""
        grouped: dict[str, list[Violation]] = {}
        for violation in self.violations:
            grouped.setdefault(violation.module, []).append(violation)
        return grouped

    def rows(self) -> list[tuple[str, str, str]]:
        """Flat (module, rule, message) rows in report order."""
        return [(v.module, v.rule, v.message) for v in self.violations]

    @property
    def exit_code(self) -> int:
        """Completion status for the caller.

        Returns:
            0 when nothing fails the run, 1 on hard violations, unparsed
            documents, or (in strict mode) advisory findings
        """
        if self.hard_count or self.unparsed:
            return 1
        if self.strict and self.advisory_count:
            return 1
        return 0

    def to_dict(self) -> dict[str, Any]:
        """Convert the report to a dictionary for JSON serialization."""
        return {
            "summary": {
                "modules_checked": self.modules_checked,
                "total_violations": self.total,
                "hard_violations": self.hard_count,
                "advisories": self.advisory_count,
                "unparsed": len(self.unparsed),
                "strict": self.strict,
                "exit_code": self.exit_code,
                "counts_by_rule": self.counts_by_rule(),
            },
            "modules": {
                module: [violation.to_dict() for violation in violations]
                for module, violations in self.by_module().items()
            },
            "violations": [violation.to_dict() for violation in self.violations],
            "unparsed": [
                {"module": failure.module_id, "message": failure.message}
                for failure in self.unparsed
            ],
        }


class ReportGenerator:
    """Build a Report from rule-engine and cross-reference findings.

    Pure aggregation: findings are ordered by the module's position in the
    curriculum; findings for the same module keep the order they arrived in.
    Corpus-wide findings go last.
    """

    def __init__(self, module_order: list[str], strict: bool = False) -> None:
        """Initialize generator.

        Args:
            module_order: Every document id in curriculum order
            strict: Whether advisory findings fail the run
        """
        self._positions = {module_id: position for position, module_id in enumerate(module_order)}
        self.strict = strict

    def generate(
        self,
        violations: list[Violation],
        unparsed: list[ParseFailure] | None = None,
        modules_checked: int = 0,
    ) -> Report:
        """Aggregate findings into a report.

        Args:
            violations: Rule-engine findings followed by cross-reference findings
            unparsed: Documents that failed to parse
            modules_checked: Number of parsed modules

        Returns:
            Report with ordered violations
        """
        fallback = len(self._positions)
        ordered = sorted(
            violations,
            key=lambda violation: self._positions.get(violation.module, fallback),
        )
        failures = sorted(
            unparsed or [],
            key=lambda failure: self._positions.get(failure.module_id, fallback),
        )
        return Report(
            violations=ordered,
            unparsed=failures,
            modules_checked=modules_checked,
            strict=self.strict,
        )
