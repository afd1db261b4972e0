"""Document loader for curriculum level directories.

Walks the curriculum root, one sub-directory per level, and yields the
module files of each level in index order.
"""

from collections.abc import Iterator
from pathlib import Path

import structlog

from curriculum_lint.common.constants import LEVELS
from curriculum_lint.corpus.filename_utils import is_ignored_filename, parse_module_filename
from curriculum_lint.corpus.models import SourceDocument
from curriculum_lint.utils.exceptions import NotFoundError, StructureError

logger = structlog.get_logger(__name__)


class DocumentLoader:
    """Load module documents from a curriculum root.

    Example:
        >>> loader = DocumentLoader("curriculum")
        >>> for document in loader.load_all():
        ...     print(document.module_id)

    Directory names are matched against the known levels; other directories
    are skipped. A missing level directory is a level with no modules.
    """

    def __init__(self, root: str | Path, levels: list[str] | None = None) -> None:
        """Initialize loader.

        Args:
            root: Curriculum root directory
            levels: Level directory names in curriculum order (default: LEVELS)
        """
        self.root = Path(root)
        self.levels = list(levels) if levels is not None else list(LEVELS)
        self.logger = logger.bind(component="document_loader")
        self.files_loaded = 0
        self.files_skipped = 0

    def check_root(self) -> None:
        """Verify the curriculum root exists and is a directory.

        Raises:
            NotFoundError: If the root does not exist or is not a directory
        """
        if not self.root.exists():
            raise NotFoundError(f"Curriculum root not found: {self.root}")
        if not self.root.is_dir():
            raise NotFoundError(f"Curriculum root is not a directory: {self.root}")

    def load_all(self) -> Iterator[SourceDocument]:
        """Lazily yield every module document in curriculum order.

        Filenames of a level are validated before any document of that level
        is read.

        Yields:
            SourceDocument for each module file

        Raises:
            NotFoundError: If the root does not exist
            StructureError: If a level directory holds a non-conforming filename,
                or its indices are not exactly 1..count
        """
        self.check_root()

        self.logger.info("loading_curriculum", root=str(self.root), levels=self.levels)

        self.files_loaded = 0
        self.files_skipped = 0

        self._log_unknown_directories()

        for level in self.levels:
            for index, slug, file_path in self.list_level(level):
                yield self.load_file(level, index, slug, file_path)

        self.logger.info(
            "loading_complete",
            total_loaded=self.files_loaded,
            total_skipped=self.files_skipped,
        )

    def list_level(self, level: str) -> list[tuple[int, str, Path]]:
        """List the module files of one level, ordered by index.

        Args:
            level: Level directory name

        Returns:
            List of (index, slug, path) tuples; empty if the level directory is missing

        Raises:
            StructureError: On a non-conforming filename, duplicate index or index gap
        """
        level_dir = self.root / level
        if not level_dir.is_dir():
            self.logger.info("level_directory_missing", level=level)
            return []

        entries: list[tuple[int, str, Path]] = []
        for file_path in sorted(level_dir.glob("*.md")):
            if not file_path.is_file() or is_ignored_filename(file_path.name):
                self.files_skipped += 1
                continue
            try:
                index, slug = parse_module_filename(file_path.name)
            except ValueError as e:
                raise StructureError(f"{level}/{file_path.name}: {e}") from e
            entries.append((index, slug, file_path))

        entries.sort(key=lambda entry: entry[0])
        self._check_contiguous(level, entries)
        return entries

    def load_file(self, level: str, index: int, slug: str, file_path: Path) -> SourceDocument:
        """Read a single module file.

        Args:
            level: Level directory name
            index: Index parsed from the filename
            slug: Slug parsed from the filename
            file_path: Path to the file

        Returns:
            SourceDocument with the file content; content that is not valid
            UTF-8 is left empty and the failure recorded in ``read_error``

        Raises:
            StructureError: If the file cannot be read at all
        """
        try:
            raw = file_path.read_bytes()
        except OSError as e:
            raise StructureError(f"Failed to read {file_path}: {e}") from e

        self.files_loaded += 1
        module_id = file_path.relative_to(self.root).as_posix()

        read_error = None
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            text = ""
            read_error = f"File is not valid UTF-8: {e}"
            self.logger.warning("module_not_utf8", module_id=module_id, error=str(e))

        self.logger.debug("module_loaded", module_id=module_id, index=index)

        return SourceDocument(
            level=level,
            index=index,
            slug=slug,
            module_id=module_id,
            path=file_path,
            text=text,
            read_error=read_error,
        )

    def _check_contiguous(self, level: str, entries: list[tuple[int, str, Path]]) -> None:
        """Require indices 1..count with no duplicates or gaps."""
        seen: dict[int, Path] = {}
        for index, _, file_path in entries:
            if index in seen:
                raise StructureError(
                    f"{level}: duplicate index {index} "
                    f"({seen[index].name}, {file_path.name})"
                )
            seen[index] = file_path

        for expected, (index, _, file_path) in enumerate(entries, 1):
            if index != expected:
                raise StructureError(
                    f"{level}: expected index {expected} but found {file_path.name}"
                )

    def _log_unknown_directories(self) -> None:
        """Log sub-directories that are not level directories."""
        for child in sorted(self.root.iterdir()):
            if child.is_dir() and not child.name.startswith(".") and child.name not in self.levels:
                self.logger.warning("unknown_directory_skipped", directory=child.name)
