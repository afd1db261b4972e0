"""Per-module rule evaluation.

Rules are data: each one is a Rule record holding a predicate, so adding a
check means adding a record to DEFAULT_RULES, not touching the engine.
"""

import re

import structlog

from curriculum_lint.common.constants import (
    DEVIATING_VOICE_PHRASES,
    DEVIATING_VOICE_TOKENS,
    LEVELS,
    SECOND_PERSON_TOKENS,
)
from curriculum_lint.corpus.models import Module
from curriculum_lint.corpus.structural_parser import canonical_section
from curriculum_lint.rules.models import Rule, Severity, Violation
from curriculum_lint.utils.config import LintConfig

logger = structlog.get_logger(__name__)

INLINE_CODE_PATTERN = re.compile(r"`[^`]*`")
LINK_TARGET_PATTERN = re.compile(r"\]\([^)]*\)")
WORD_PATTERN = re.compile(r"[a-z]+(?:'[a-z]+)?")


def _canonical(name: str) -> str:
    """Resolve a configured section name through the alias table."""
    return canonical_section(name) or name


def check_required_sections(module: Module, config: LintConfig) -> list[str]:
    messages = []
    for name in config.required_sections:
        if _canonical(name) not in module.sections:
            messages.append(f"missing required section '{name}'")
    return messages


def check_chapter_count(module: Module, config: LintConfig) -> list[str]:
    count = module.chapter_count
    if count < config.chapter_count_min:
        return [
            f"chapter count {count} is below the allowed range "
            f"(actual={count}, min={config.chapter_count_min}, max={config.chapter_count_max})"
        ]
    if count > config.chapter_count_max:
        return [
            f"chapter count {count} is above the allowed range "
            f"(actual={count}, min={config.chapter_count_min}, max={config.chapter_count_max})"
        ]
    return []


def count_voice_tokens(prose: str) -> tuple[int, int]:
    """Count second-person and deviating-voice tokens in prose.

    Inline code and link targets are ignored.

    Returns:
        Tuple of (second_person, deviating)
    """
    text = LINK_TARGET_PATTERN.sub("]", INLINE_CODE_PATTERN.sub(" ", prose)).lower()
    text = text.replace("’", "'")
    words = WORD_PATTERN.findall(text)

    second_person = sum(1 for word in words if word in SECOND_PERSON_TOKENS)
    deviating = sum(1 for word in words if word in DEVIATING_VOICE_TOKENS)
    for phrase in DEVIATING_VOICE_PHRASES:
        deviating += len(re.findall(rf"\b{re.escape(phrase)}\b", text))

    return second_person, deviating


def check_consistent_voice(module: Module, config: LintConfig) -> list[str]:
    second_person, deviating = count_voice_tokens(module.prose)
    if deviating < config.voice_min_deviations:
        return []

    share = deviating / (second_person + deviating)
    if share <= config.voice_threshold:
        return []

    return [
        f"{deviating} first-person or third-person voice markers against "
        f"{second_person} second-person ({share:.0%} > {config.voice_threshold:.0%})"
    ]


def check_prerequisites_declared(module: Module, config: LintConfig) -> list[str]:
    # The opening module of the curriculum has nothing to build on
    if module.level == LEVELS[0] and module.index == 1:
        return []
    if not module.prerequisites_declared:
        return ["no prerequisites declared"]
    return []


def check_code_fence_language(module: Module, config: LintConfig) -> list[str]:
    if module.unlabeled_code_fences:
        return [f"{module.unlabeled_code_fences} fenced code block(s) without a language tag"]
    return []


REQUIRED_SECTIONS = Rule(
    name="RequiredSections",
    severity=Severity.VIOLATION,
    description="Every module contains the configured named sections",
    remediation="Add the missing section as a heading, or as a bold label for one-line sections",
    check=check_required_sections,
)

CHAPTER_COUNT_RANGE = Rule(
    name="ChapterCountRange",
    severity=Severity.VIOLATION,
    description="Number of chapters lies within the configured inclusive range",
    remediation="Split or merge chapters so the count falls inside the allowed range",
    check=check_chapter_count,
)

CONSISTENT_VOICE = Rule(
    name="ConsistentVoice",
    severity=Severity.ADVISORY,
    description="Prose addresses the learner in the second person",
    remediation="Rephrase 'we'/'the reader' passages to address the learner as 'you'",
    check=check_consistent_voice,
)

PREREQUISITES_DECLARED = Rule(
    name="PrerequisitesDeclared",
    severity=Severity.ADVISORY,
    description="Every module after the first declares its prerequisites",
    remediation="Add a '**Prerequisites:**' line linking the modules this one builds on",
    check=check_prerequisites_declared,
)

CODE_FENCE_LANGUAGE = Rule(
    name="CodeFenceLanguage",
    severity=Severity.ADVISORY,
    description="Fenced examples declare their language",
    remediation="Tag each fenced block with its language, e.g. ```jsx",
    check=check_code_fence_language,
)

DEFAULT_RULES = [
    REQUIRED_SECTIONS,
    CHAPTER_COUNT_RANGE,
    CONSISTENT_VOICE,
    PREREQUISITES_DECLARED,
    CODE_FENCE_LANGUAGE,
]


class RuleEngine:
    """Evaluate a fixed rule set against modules, one rule at a time."""

    def __init__(self, config: LintConfig, rules: list[Rule] | None = None) -> None:
        """Initialize engine.

        Args:
            config: Lint options (disabled rules are dropped here)
            rules: Rule set (default: DEFAULT_RULES)
        """
        self.config = config
        disabled = set(config.disabled_rules)
        self.rules = [rule for rule in (rules or DEFAULT_RULES) if rule.name not in disabled]

    def evaluate(self, module: Module) -> list[Violation]:
        """Evaluate every rule independently on one module.

        Args:
            module: Parsed module

        Returns:
            Violations in rule declaration order
        """
        violations: list[Violation] = []
        for rule in self.rules:
            violations.extend(rule.evaluate(module, self.config))

        if violations:
            logger.debug(
                "module_evaluated",
                module_id=module.module_id,
                violations=len(violations),
            )
        return violations
