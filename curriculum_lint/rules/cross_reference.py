"""Cross-reference checks over the whole corpus.

Navigation links must resolve, and previous/next links must form one
doubly-linked sequence across every level, in curriculum order.
"""

import posixpath
from urllib.parse import unquote

import structlog

from curriculum_lint.corpus.models import Corpus, Module
from curriculum_lint.corpus.structural_parser import is_external_href
from curriculum_lint.rules.models import Severity, Violation

logger = structlog.get_logger(__name__)

BROKEN_LINK = "BrokenLinkError"
ASYMMETRIC_LINK = "AsymmetricLinkWarning"

BROKEN_LINK_REMEDIATION = "Point the link at an existing module file, relative to this module"
ASYMMETRIC_LINK_REMEDIATION = (
    "Make previous/next links mirror each other and follow curriculum order"
)


class CrossReferenceChecker:
    """Validate navigation and prerequisite links against the full corpus.

    Broken links are hard violations. Asymmetric or out-of-order links are
    advisory, since restructuring across levels can leave one side behind
    for a while.
    """

    def __init__(self, corpus: Corpus) -> None:
        """Initialize checker.

        Args:
            corpus: Fully parsed corpus; the checker never runs on a partial one
        """
        self.corpus = corpus

    def resolve(self, module: Module, href: str) -> str | None:
        """Resolve a link target to a module id.

        Args:
            module: Module declaring the link
            href: Link target as written

        Returns:
            Module id of the target, or None if it is not a module in the corpus
        """
        if is_external_href(href):
            return None

        target = unquote(href.split("#", 1)[0].split("?", 1)[0]).strip()
        if not target:
            return None

        if target.startswith("/"):
            candidate = posixpath.normpath(target.lstrip("/"))
        else:
            base = posixpath.dirname(module.module_id)
            candidate = posixpath.normpath(posixpath.join(base, target))

        if candidate in self.corpus:
            return candidate
        if not candidate.endswith(".md") and f"{candidate}.md" in self.corpus:
            return f"{candidate}.md"
        return None

    def check(self) -> list[Violation]:
        """Run all cross-reference checks.

        Returns:
            Broken-link violations followed by symmetry warnings
        """
        violations = self._check_resolution()
        violations.extend(self._check_terminals())
        violations.extend(self._check_sequence())

        logger.info(
            "cross_reference_checked",
            modules=len(self.corpus.modules),
            violations=len(violations),
        )
        return violations

    def _check_resolution(self) -> list[Violation]:
        violations = []
        for module in self.corpus.ordered_modules():
            links = [
                ("previous", module.navigation.previous),
                ("next", module.navigation.next),
            ]
            links.extend(("prerequisite", href) for href in module.prerequisites)

            for kind, href in links:
                if href is None or self.resolve(module, href) is not None:
                    continue
                violations.append(
                    Violation(
                        rule=BROKEN_LINK,
                        severity=Severity.VIOLATION,
                        module=module.module_id,
                        message=f"{kind} link target '{href}' does not resolve to a module",
                        remediation=BROKEN_LINK_REMEDIATION,
                    )
                )
        return violations

    def _check_terminals(self) -> list[Violation]:
        """The first module has no previous link and the last has no next link."""
        if not self.corpus.order:
            return []

        violations = []
        first = self.corpus.modules.get(self.corpus.order[0])
        last = self.corpus.modules.get(self.corpus.order[-1])

        if first is not None and first.navigation.previous is not None:
            violations.append(
                self._asymmetric(
                    first,
                    f"first module of the curriculum declares a previous link "
                    f"'{first.navigation.previous}'",
                )
            )
        if last is not None and last.navigation.next is not None:
            violations.append(
                self._asymmetric(
                    last,
                    f"last module of the curriculum declares a next link "
                    f"'{last.navigation.next}'",
                )
            )
        return violations

    def _check_sequence(self) -> list[Violation]:
        """Every adjacent pair links both ways, across level boundaries too.

        Pairs involving a document that failed to parse are skipped, as are
        links already reported as broken.
        """
        violations = []
        order = self.corpus.order

        for current_id, following_id in zip(order, order[1:], strict=False):
            current = self.corpus.modules.get(current_id)
            following = self.corpus.modules.get(following_id)
            if current is None or following is None:
                continue

            message = self._compare(current, "next", current.navigation.next, following_id)
            if message:
                violations.append(self._asymmetric(current, message))

            message = self._compare(
                following, "previous", following.navigation.previous, current_id
            )
            if message:
                violations.append(self._asymmetric(following, message))

        return violations

    def _compare(self, module: Module, kind: str, href: str | None, expected: str) -> str | None:
        if href is None:
            return f"missing {kind} link to '{expected}'"

        resolved = self.resolve(module, href)
        if resolved is None or resolved == expected:
            return None
        return f"{kind} link points to '{resolved}', expected '{expected}'"

    def _asymmetric(self, module: Module, message: str) -> Violation:
        return Violation(
            rule=ASYMMETRIC_LINK,
            severity=Severity.ADVISORY,
            module=module.module_id,
            message=message,
            remediation=ASYMMETRIC_LINK_REMEDIATION,
        )
