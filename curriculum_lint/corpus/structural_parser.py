"""Structural parsing of module documents.

Turns the raw Markdown of a module into a Module record: title, chapter
headings, named sections, prerequisite and navigation references.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from datetime import date
from typing import Any

import structlog
import yaml

from curriculum_lint.common.constants import (
    CHAPTER_CONTAINERS,
    EMPTY_LINK_VALUES,
    NAVIGATION_LABELS,
    SECTION_ALIASES,
)
from curriculum_lint.corpus.models import Module, NavigationLinks, SourceDocument
from curriculum_lint.utils.exceptions import ParseError

logger = structlog.get_logger(__name__)

HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")
FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})\s*([^\s`]*)")

# [text](href "optional title")
LINK_PATTERN = re.compile(r"\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")

# "Label: value" once emphasis and list bullets are stripped; the label may be
# preceded by arrows or emoji
LABEL_PATTERN = re.compile(r"^[^\w\[]*(?P<label>[A-Za-z][\w' ]{0,40}?)\s*:\s*(?P<value>.*)$")
BULLET_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
EMPHASIS_PATTERN = re.compile(r"(\*\*|__)")
NAV_LINK_TEXT_PATTERN = re.compile(r"^(previous|prev|next)\b")
NAV_LABEL_PATTERN = re.compile(
    r"(?<!\w)(previous module|next module|previous|prev|next)\s*:", re.IGNORECASE
)
NAV_SEPARATOR_CHARS = " \t|·•"
NAV_ARROW_CHARS = "←→⬅➡<> "
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

FRONTMATTER_SCALAR_TYPES = (str, int, float, date)


@dataclass
class Heading:
    """A Markdown heading outside fenced code.

    Attributes:
        level: Header level (1 for #, 2 for ##, ...)
        text: Heading text as written
        key: Normalized text used for matching
        section: Canonical section name, if the heading names a known section
    """

    level: int
    text: str
    key: str
    section: str | None


def normalize_label(text: str) -> str:
    """Normalize heading or label text for matching.

    Strips Markdown emphasis, link syntax, emoji, punctuation and leading
    numbering ("2. Common Mistakes" -> "common mistakes").
    """
    text = LINK_PATTERN.sub(r"\1", text)
    text = re.sub(r"[`*_~]", "", text)
    text = unicodedata.normalize("NFKD", text).lower()
    text = text.replace("-", " ").replace("/", " ")
    text = re.sub(r"[^\w\s]", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return re.sub(r"^\d+\s+", "", text)


def canonical_section(text: str) -> str | None:
    """Map heading or label text to its canonical section name, if any."""
    return SECTION_ALIASES.get(normalize_label(text))


def is_external_href(href: str) -> bool:
    """Check whether a link points outside the curriculum (URL or mail address)."""
    return bool(SCHEME_PATTERN.match(href)) or href.startswith("//")


def extract_hrefs(text: str) -> list[str]:
    """Extract link targets from a line of Markdown, in order."""
    return [match.group(2) for match in LINK_PATTERN.finditer(text)]


def is_link_value(value: str) -> bool:
    """Check whether a navigation marker value is a link or an explicit "no link".

    Prose such as "Next: we build a form" is not a marker.
    """
    if LINK_PATTERN.search(value):
        return True
    text = value.strip(NAV_ARROW_CHARS).strip()
    return text.lower() in EMPTY_LINK_VALUES or text.endswith(".md")


class StructuralParser:
    """Extract the structure of a module document.

    Unreadable content, bad frontmatter and a missing top-level title are
    parse failures. Every other absence (a section, a link, chapters) is left
    for the rules to report.
    """

    def parse(self, document: SourceDocument) -> Module:
        """Parse a document into a Module.

        Args:
            document: Raw document from the loader

        Returns:
            Module record

        Raises:
            ParseError: If the content is unreadable, the frontmatter is malformed,
                or there is no top-level title
        """
        if document.read_error:
            raise ParseError(document.read_error, module_id=document.module_id)

        try:
            frontmatter, body = self._parse_frontmatter(document.text)
        except (ValueError, yaml.YAMLError) as e:
            raise ParseError(f"Invalid frontmatter: {e}", module_id=document.module_id) from e
        self._check_frontmatter_types(frontmatter, document.module_id)

        headings, prose_lines, unlabeled_fences = self._scan(body)

        title = frontmatter.get("title") or self._find_title(headings)
        if not title or not str(title).strip():
            raise ParseError("Document has no top-level title", module_id=document.module_id)

        body_headings = self._headings_after_title(headings)
        sections = {heading.section for heading in body_headings if heading.section}

        markers = self._scan_markers(prose_lines)
        sections.update(markers.sections)

        prerequisites = markers.prerequisites
        prerequisites_declared = markers.prerequisites_declared
        if "prerequisites" in frontmatter:
            prerequisites = self._frontmatter_hrefs(frontmatter["prerequisites"])
            prerequisites_declared = True

        previous = frontmatter["previous"] if "previous" in frontmatter else markers.previous
        following = frontmatter["next"] if "next" in frontmatter else markers.next
        navigation = NavigationLinks(
            previous=self._clean_href(previous),
            next=self._clean_href(following),
        )
        if markers.navigation_declared or "previous" in frontmatter or "next" in frontmatter:
            sections.add("Navigation")

        module = Module(
            level=document.level,
            index=document.index,
            module_id=document.module_id,
            path=document.path,
            title=str(title).strip(),
            chapters=tuple(self._find_chapters(body_headings)),
            sections=frozenset(sections),
            prerequisites=tuple(prerequisites),
            prerequisites_declared=prerequisites_declared,
            navigation=navigation,
            word_count=len(body.split()),
            unlabeled_code_fences=unlabeled_fences,
            prose="\n".join(prose_lines),
        )

        logger.debug(
            "module_parsed",
            module_id=module.module_id,
            chapters=module.chapter_count,
            sections=sorted(module.sections),
        )
        return module

    def _parse_frontmatter(self, content: str) -> tuple[dict[str, Any], str]:
        """Split optional YAML frontmatter from the body.

        Args:
            content: Full file content

        Returns:
            Tuple of (frontmatter_dict, body); the dict is empty without frontmatter

        Raises:
            ValueError: If frontmatter is opened but never closed, or is not a mapping
        """
        lines = content.split("\n")

        if not lines or lines[0].rstrip("\r") != "---":
            return {}, "\n".join(line.rstrip("\r") for line in lines)

        closing_index = None
        for i in range(1, len(lines)):
            if lines[i].rstrip("\r") == "---":
                closing_index = i
                break

        if closing_index is None:
            raise ValueError("missing closing '---'")

        frontmatter_str = "\n".join(line.rstrip("\r") for line in lines[1:closing_index])
        frontmatter = yaml.safe_load(frontmatter_str) or {}

        if not isinstance(frontmatter, dict):
            raise ValueError("frontmatter must be a mapping")

        body = "\n".join(line.rstrip("\r") for line in lines[closing_index + 1 :])
        return frontmatter, body

    def _scan(self, body: str) -> tuple[list[Heading], list[str], int]:
        """Walk the body once, skipping fenced code.

        Returns:
            Tuple of (headings, prose_lines, unlabeled_fence_count)
        """
        headings: list[Heading] = []
        prose_lines: list[str] = []
        unlabeled_fences = 0
        open_fence: str | None = None

        for line in body.split("\n"):
            fence_match = FENCE_PATTERN.match(line)

            if open_fence is not None:
                # A fence closes on the same character, at least as long, with no info string
                if (
                    fence_match
                    and fence_match.group(1)[0] == open_fence[0]
                    and len(fence_match.group(1)) >= len(open_fence)
                    and not fence_match.group(2)
                ):
                    open_fence = None
                continue

            if fence_match:
                open_fence = fence_match.group(1)
                if not fence_match.group(2):
                    unlabeled_fences += 1
                continue

            prose_lines.append(line)

            heading_match = HEADING_PATTERN.match(line)
            if heading_match:
                text = heading_match.group(2).strip()
                headings.append(
                    Heading(
                        level=len(heading_match.group(1)),
                        text=text,
                        key=normalize_label(text),
                        section=canonical_section(text),
                    )
                )

        return headings, prose_lines, unlabeled_fences

    def _find_title(self, headings: list[Heading]) -> str | None:
        for heading in headings:
            if heading.level == 1:
                return heading.text
        return None

    def _headings_after_title(self, headings: list[Heading]) -> list[Heading]:
        """Headings below the first level-1 heading (all of them without one)."""
        for position, heading in enumerate(headings):
            if heading.level == 1:
                return [h for h in headings[position + 1 :] if h.level > 1]
        return [h for h in headings if h.level > 1]

    def _find_chapters(self, headings: list[Heading]) -> list[str]:
        """Identify chapter headings.

        With a "Chapters" container, chapters are its level-3 children.
        Otherwise every level-2 heading that is not a named section is a chapter.
        """
        for position, heading in enumerate(headings):
            if heading.level == 2 and heading.key in CHAPTER_CONTAINERS:
                chapters = []
                for child in headings[position + 1 :]:
                    if child.level <= 2:
                        break
                    if child.level == 3:
                        chapters.append(child.text)
                return chapters

        return [
            heading.text
            for heading in headings
            if heading.level == 2 and heading.section is None
        ]

    def _scan_markers(self, prose_lines: list[str]) -> _Markers:
        """Collect inline labels: section labels, prerequisites and navigation."""
        markers = _Markers()
        current_section: str | None = None

        for line in prose_lines:
            heading_match = HEADING_PATTERN.match(line)
            if heading_match:
                markers.pending.clear()
                current_section = canonical_section(heading_match.group(2))
                if current_section == "Prerequisites":
                    markers.prerequisites_declared = True
                continue

            stripped = EMPHASIS_PATTERN.sub("", BULLET_PATTERN.sub("", line)).strip()
            if self._scan_navigation_labels(stripped, markers):
                continue

            if markers.pending:
                links = [match.group(0) for match in LINK_PATTERN.finditer(line)]
                if links:
                    markers.resolve_pending(links)
                    continue
                if stripped:
                    markers.pending.clear()

            if current_section == "Prerequisites":
                markers.add_prerequisites(extract_hrefs(line))

            label_match = LABEL_PATTERN.match(stripped)
            if label_match:
                label = normalize_label(label_match.group("label"))
                value = label_match.group("value").strip()

                section = SECTION_ALIASES.get(label)
                if section == "Prerequisites":
                    markers.prerequisites_declared = True
                    markers.add_prerequisites(extract_hrefs(value))
                    continue
                # Section labels only count when written in bold
                if section is not None and EMPHASIS_PATTERN.search(line):
                    markers.sections.add(section)
                    continue

            if current_section == "Navigation":
                for match in LINK_PATTERN.finditer(line):
                    direction_match = NAV_LINK_TEXT_PATTERN.match(normalize_label(match.group(1)))
                    if direction_match:
                        direction = NAVIGATION_LABELS[direction_match.group(1)]
                        markers.set_navigation(direction, match.group(0))

        return markers

    def _scan_navigation_labels(self, text: str, markers: _Markers) -> bool:
        """Record every "Previous:"/"Next:" label on a line.

        A footer may hold both labels ("Previous: [A](a.md) | Next: [B](b.md)").
        A label with nothing after it takes the link from the following line.
        Labels inside link text are left to the Navigation section scan.

        Returns:
            True if the line held at least one navigation marker
        """
        link_spans = [match.span() for match in LINK_PATTERN.finditer(text)]
        labels = [
            match
            for match in NAV_LABEL_PATTERN.finditer(text)
            if not any(start <= match.start() < end for start, end in link_spans)
        ]

        found = False
        for position, match in enumerate(labels):
            end = labels[position + 1].start() if position + 1 < len(labels) else len(text)
            value = text[match.end() : end].strip(NAV_SEPARATOR_CHARS)
            direction = NAVIGATION_LABELS[normalize_label(match.group(1))]

            if not value.strip(NAV_ARROW_CHARS):
                markers.expect_navigation(direction)
                found = True
            elif is_link_value(value):
                markers.set_navigation(direction, value)
                found = True
        return found

    def _check_frontmatter_types(self, frontmatter: dict[str, Any], module_id: str) -> None:
        """Reject frontmatter values the parser cannot read.

        Raises:
            ParseError: If a known key holds a value of the wrong type
        """
        for key in ("title", "previous", "next"):
            value = frontmatter.get(key)
            if value is not None and not isinstance(value, FRONTMATTER_SCALAR_TYPES):
                raise ParseError(
                    f"Frontmatter '{key}' must be a single value, got {type(value).__name__}",
                    module_id=module_id,
                )

        prerequisites = frontmatter.get("prerequisites")
        if prerequisites is None or isinstance(prerequisites, str):
            return
        if not isinstance(prerequisites, list) or not all(
            item is None or isinstance(item, str) for item in prerequisites
        ):
            raise ParseError(
                "Frontmatter 'prerequisites' must be a link or a list of links, "
                f"got {type(prerequisites).__name__}",
                module_id=module_id,
            )

    def _frontmatter_hrefs(self, value: str | list[str | None] | None) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        hrefs = [str(item).strip() for item in value if item is not None and str(item).strip()]
        return [href for href in hrefs if not is_external_href(href)]

    def _clean_href(self, value: Any) -> str | None:
        """Reduce a marker value to a single href, or None for an explicit "no link"."""
        if value is None:
            return None
        text = str(value).strip()
        hrefs = extract_hrefs(text)
        if hrefs:
            return hrefs[0]
        text = text.strip(NAV_ARROW_CHARS).strip()
        if text.lower() in EMPTY_LINK_VALUES:
            return None
        return text


class _Markers:
    """Inline markers found while scanning prose."""

    def __init__(self) -> None:
        self.sections: set[str] = set()
        self.prerequisites: list[str] = []
        self.prerequisites_declared = False
        self.previous: str | None = None
        self.next: str | None = None
        self.navigation_declared = False
        # Directions whose label was left empty, waiting for a link on a later line
        self.pending: list[str] = []

    def add_prerequisites(self, hrefs: list[str]) -> None:
        for href in hrefs:
            if is_external_href(href) or href.startswith("#"):
                continue
            if href not in self.prerequisites:
                self.prerequisites.append(href)
        if hrefs:
            self.prerequisites_declared = True

    def set_navigation(self, direction: str, value: str) -> None:
        self.navigation_declared = True
        # First marker wins; a later duplicate does not override it
        if direction == "previous" and self.previous is None:
            self.previous = value
        elif direction == "next" and self.next is None:
            self.next = value

    def expect_navigation(self, direction: str) -> None:
        self.navigation_declared = True
        self.pending.append(direction)

    def resolve_pending(self, links: list[str]) -> None:
        for link in links:
            if not self.pending:
                break
            self.set_navigation(self.pending.pop(0), link)
