"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from curriculum_lint.corpus.models import SourceDocument

ALL_SECTIONS = (
    "Learning Objectives",
    "Time Estimate",
    "Common Mistakes",
    "Exercises",
    "Further Reading",
    "Navigation",
)


def render_module(
    title: str,
    chapters: int = 6,
    omit: set[str] | frozenset[str] = frozenset(),
    previous: str | None = None,
    next_link: str | None = None,
    prerequisites: list[str] | None = None,
    extra: str = "",
    nav_style: str = "labels",
) -> str:
    """Render a module document that follows the curriculum conventions.

    ``nav_style`` picks the navigation layout: one bold label per line
    ("labels"), a single footer line ("footer"), or labels with the link on
    the line below ("stacked").
    """
    lines = [f"# {title}", ""]

    if "Time Estimate" not in omit:
        lines.append("**Time Estimate:** 3 hours")
    if prerequisites:
        links = ", ".join(f"[Prerequisite]({href})" for href in prerequisites)
        lines.append(f"**Prerequisites:** {links}")
    else:
        lines.append("**Prerequisites:** None")
    lines.append("")

    if "Learning Objectives" not in omit:
        lines += ["## Learning Objectives", "", "- You will build your first component.", ""]

    for number in range(1, chapters + 1):
        lines += [
            f"## {number}. Topic {number}",
            "",
            f"In this chapter you practice topic {number} in your own project.",
            "",
            "```jsx",
            f"const value{number} = {number};",
            "```",
            "",
        ]

    if "Common Mistakes" not in omit:
        lines += ["## Common Mistakes", "", "- Forgetting your keys in lists.", ""]
    if "Exercises" not in omit:
        lines += ["## Exercises", "", "1. Build a counter you can reset.", ""]
    if "Further Reading" not in omit:
        lines += ["## Further Reading", "", "- [React docs](https://react.dev)", ""]
    if extra:
        lines += [extra, ""]
    if "Navigation" not in omit:
        back = f"[Back]({previous})" if previous else "None"
        forward = f"[Forward]({next_link})" if next_link else "None"
        lines += ["## Navigation", ""]
        if nav_style == "footer":
            lines.append(f"← Previous: {back} | Next: {forward} →")
        elif nav_style == "stacked":
            lines += ["**Previous:**", back, "", "**Next:**", forward]
        else:
            lines += [f"**Previous:** {back}", f"**Next:** {forward}"]
        lines.append("")

    return "\n".join(lines)


def relative_href(from_id: str, to_id: str) -> str:
    """Link target from one module id to another, relative to the first one's directory."""
    from_level = from_id.split("/")[0]
    to_level, filename = to_id.split("/")
    if from_level == to_level:
        return f"./{filename}"
    return f"../{to_level}/{filename}"


class CurriculumBuilder:
    """Write a well-formed curriculum to disk, with per-module overrides."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @staticmethod
    def module_id(level: str, index: int) -> str:
        return f"{level}/{index:02d}-{level}-lesson-{index}.md"

    def build(
        self,
        layout: dict[str, int],
        overrides: dict[str, dict[str, Any]] | None = None,
    ) -> list[str]:
        """Write modules for the given level -> module count layout.

        Navigation links are symmetric across the whole curriculum and each
        module lists its predecessor as prerequisite.

        Returns:
            Module ids in curriculum order
        """
        overrides = overrides or {}
        order = [
            self.module_id(level, index)
            for level, count in layout.items()
            for index in range(1, count + 1)
        ]

        for level in layout:
            (self.root / level).mkdir(parents=True, exist_ok=True)

        for position, module_id in enumerate(order):
            previous_id = order[position - 1] if position > 0 else None
            next_id = order[position + 1] if position + 1 < len(order) else None
            options: dict[str, Any] = {
                "title": f"Module {position + 1}: Lesson",
                "previous": relative_href(module_id, previous_id) if previous_id else None,
                "next_link": relative_href(module_id, next_id) if next_id else None,
                "prerequisites": [relative_href(module_id, previous_id)] if previous_id else None,
            }
            options.update(overrides.get(module_id, {}))
            self.write(module_id, render_module(**options))

        return order

    def write(self, module_id: str, text: str) -> Path:
        path = self.root / module_id
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path


@pytest.fixture
def curriculum_root(tmp_path: Path) -> Path:
    """Return an empty curriculum root directory."""
    root = tmp_path / "curriculum"
    root.mkdir()
    return root


@pytest.fixture
def builder(curriculum_root: Path) -> CurriculumBuilder:
    """Return a builder writing into the curriculum root."""
    return CurriculumBuilder(curriculum_root)


@pytest.fixture
def make_document(tmp_path: Path) -> Callable[..., SourceDocument]:
    """Return a factory for in-memory source documents."""

    def factory(text: str, module_id: str = "junior/02-state.md", index: int = 2) -> SourceDocument:
        level = module_id.split("/")[0]
        slug = module_id.split("/")[1].split("-", 1)[1].removesuffix(".md")
        return SourceDocument(
            level=level,
            index=index,
            slug=slug,
            module_id=module_id,
            path=tmp_path / module_id,
            text=text,
        )

    return factory
