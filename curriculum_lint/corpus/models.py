"""Data models for curriculum documents."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class SourceDocument:
    """Raw module file as found by the loader.

    Attributes:
        level: Level directory name (e.g., "junior")
        index: 1-based position within the level, taken from the filename
        slug: Filename part after the index (e.g., "jsx-basics")
        module_id: POSIX path relative to the curriculum root (e.g., "junior/01-jsx-basics.md")
        path: Absolute path of the file
        text: Full file content
        read_error: Why the content could not be decoded, if it could not
    """

    level: str
    index: int
    slug: str
    module_id: str
    path: Path
    text: str = field(repr=False)
    read_error: str | None = None


@dataclass(frozen=True)
class NavigationLinks:
    """Declared previous/next references of a module (raw hrefs)."""

    previous: str | None = None
    next: str | None = None


@dataclass(frozen=True)
class Module:
    """One lesson document, parsed.

    Attributes:
        level: Level name
        index: Position within the level (1-based)
        module_id: POSIX path relative to the curriculum root
        path: Absolute path of the source file
        title: Top-level title
        chapters: Chapter headings in document order
        sections: Canonical names of the named sections present
        prerequisites: Declared prerequisite hrefs
        prerequisites_declared: Whether a prerequisites declaration exists at all
        navigation: Declared navigation hrefs
        word_count: Number of words in the body (frontmatter excluded)
        unlabeled_code_fences: Fenced code blocks without a language tag
        prose: Body text with fenced code removed
    """

    level: str
    index: int
    module_id: str
    path: Path
    title: str
    chapters: tuple[str, ...] = ()
    sections: frozenset[str] = frozenset()
    prerequisites: tuple[str, ...] = ()
    prerequisites_declared: bool = False
    navigation: NavigationLinks = field(default_factory=NavigationLinks)
    word_count: int = 0
    unlabeled_code_fences: int = 0
    prose: str = field(default="", repr=False)

    @property
    def chapter_count(self) -> int:
        """Number of detected chapters."""
        return len(self.chapters)

    def __post_init__(self) -> None:
        """Validate module data after initialization.

        Raises:
            ValueError: If any required field is invalid
        """
        if not self.title or not self.title.strip():
            raise ValueError("Title cannot be empty")
        if self.index < 1:
            raise ValueError("Index must be 1 or greater")
        if self.word_count < 0:
            raise ValueError("Word count cannot be negative")


@dataclass
class Level:
    """Ordered collection of modules for one seniority tier."""

    name: str
    modules: list[Module] = field(default_factory=list)


@dataclass
class ParseFailure:
    """A document that could not be turned into a Module."""

    module_id: str
    message: str


@dataclass
class Corpus:
    """Whole curriculum after parsing.

    ``order`` lists every document id in curriculum order, including the ones
    that failed to parse; ``modules`` maps only the parsed ones.

    Attributes:
        root: Curriculum root directory
        levels: Levels in curriculum order, each holding its parsed modules
        order: All document ids in curriculum order
        modules: Parsed modules by id
        failures: Documents that could not be parsed
    """

    root: Path
    levels: list[Level] = field(default_factory=list)
    order: list[str] = field(default_factory=list)
    modules: dict[str, Module] = field(default_factory=dict)
    failures: list[ParseFailure] = field(default_factory=list)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self.order

    def ordered_modules(self) -> list[Module]:
        """Parsed modules in curriculum order."""
        return [self.modules[module_id] for module_id in self.order if module_id in self.modules]
