"""Text and JSON rendering of lint reports."""

import json

from curriculum_lint.reporting.report import Report


def render_text(report: Report) -> str:
    """Render a report as human-readable text, one line per violation, grouped by module."""
    lines: list[str] = []

    for module, violations in report.by_module().items():
        lines.append(module)
        for violation in violations:
            lines.append(f"  [{violation.severity.value}] {violation.rule}: {violation.message}")
        lines.append("")

    if report.unparsed:
        lines.append("Could not parse")
        for failure in report.unparsed:
            lines.append(f"  {failure.module_id}: {failure.message}")
        lines.append("")

    lines.append("-" * 80)
    lines.append("Summary")
    lines.append("-" * 80)
    lines.append(f"  Modules Checked: {report.modules_checked}")
    lines.append(f"  Total Violations: {report.total}")
    lines.append(f"  Hard Violations: {report.hard_count}")
    lines.append(f"  Advisories: {report.advisory_count}")
    lines.append(f"  Could Not Parse: {len(report.unparsed)}")
    remediations = {violation.rule: violation.remediation for violation in report.violations}
    for rule, count in report.counts_by_rule().items():
        lines.append(f"    {rule}: {count}")
        if remediations.get(rule):
            lines.append(f"      fix: {remediations[rule]}")

    return "\n".join(lines) + "\n"


def render_json(report: Report) -> str:
    """Render a report as an indented JSON document."""
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"


RENDERERS = {
    "text": render_text,
    "json": render_json,
}
