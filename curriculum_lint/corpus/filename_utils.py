"""Filename conventions for module documents."""

import re

from curriculum_lint.common.constants import IGNORED_FILENAMES

# NN-slug.md, e.g. "03-use-effect.md"
MODULE_FILENAME_PATTERN = re.compile(r"^(\d+)-([A-Za-z0-9][A-Za-z0-9_.-]*)\.md$")


def is_ignored_filename(filename: str) -> bool:
    """Check whether a Markdown file inside a level directory is not a module.

    README/index files and dot- or underscore-prefixed files are skipped.

    Args:
        filename: Bare filename

    Returns:
        True if the file should be skipped
    """
    return filename.lower() in IGNORED_FILENAMES or filename.startswith((".", "_"))


def parse_module_filename(filename: str) -> tuple[int, str]:
    """Extract the ordinal index and slug from a module filename.

    Args:
        filename: Bare filename (e.g., "01-jsx-basics.md")

    Returns:
        Tuple of (index, slug)

    Raises:
        ValueError: If the filename does not follow the NN-title.md convention
    """
    match = MODULE_FILENAME_PATTERN.match(filename)
    if not match:
        raise ValueError(f"'{filename}' does not match the NN-title.md naming convention")

    index = int(match.group(1))
    if index < 1:
        raise ValueError(f"'{filename}' has index {index}; indices start at 1")

    return index, match.group(2)
