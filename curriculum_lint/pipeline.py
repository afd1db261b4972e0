"""Lint pipeline orchestration: load, parse, check, report."""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
from tqdm import tqdm

from curriculum_lint.corpus.document_loader import DocumentLoader
from curriculum_lint.corpus.models import Corpus, Level, Module, ParseFailure, SourceDocument
from curriculum_lint.corpus.structural_parser import StructuralParser
from curriculum_lint.reporting.report import Report, ReportGenerator
from curriculum_lint.rules.cross_reference import CrossReferenceChecker
from curriculum_lint.rules.engine import RuleEngine
from curriculum_lint.rules.models import Violation
from curriculum_lint.utils.config import LintConfig
from curriculum_lint.utils.exceptions import ParseError

logger = structlog.get_logger(__name__)


@dataclass
class LintStatistics:
    """Statistics for one lint run.

    Attributes:
        documents_loaded: Number of module files read
        files_skipped: Number of ignored files in level directories (README, index, ...)
        modules_parsed: Number of documents turned into modules
        modules_failed: Number of documents that could not be parsed
        violations_found: Total findings
        duration_seconds: Wall-clock duration of the run
    """

    documents_loaded: int = 0
    files_skipped: int = 0
    modules_parsed: int = 0
    modules_failed: int = 0
    violations_found: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert statistics to dictionary for JSON serialization."""
        return {
            "documents_loaded": self.documents_loaded,
            "files_skipped": self.files_skipped,
            "modules_parsed": self.modules_parsed,
            "modules_failed": self.modules_failed,
            "violations_found": self.violations_found,
            "duration_seconds": round(self.duration_seconds, 3),
        }


class LintPipeline:
    """Run the linter over a curriculum root.

    Stages:
    1. Load every module document (fatal errors abort here, before any report)
    2. Parse documents, optionally in parallel; parse failures are collected
    3. Evaluate per-module rules
    4. Check cross-references once the whole corpus is parsed
    5. Aggregate everything into a Report

    The pipeline keeps no state between runs.
    """

    def __init__(
        self,
        root: str | Path,
        config: LintConfig | None = None,
        show_progress: bool = False,
    ) -> None:
        """Initialize pipeline components.

        Args:
            root: Curriculum root directory
            config: Lint options (default: LintConfig())
            show_progress: Show a progress bar on stderr while parsing
        """
        self.root = Path(root)
        self.config = config or LintConfig()
        self.show_progress = show_progress

        self.loader = DocumentLoader(self.root)
        self.parser = StructuralParser()
        self.engine = RuleEngine(self.config)

        self.stats = LintStatistics()
        self.logger = logger.bind(component="lint_pipeline")

    def build_corpus(self) -> Corpus:
        """Load and parse every document into a Corpus.

        Returns:
            Corpus with parsed modules and parse failures

        Raises:
            NotFoundError: If the root does not exist
            StructureError: If a level directory is malformed
        """
        documents = list(self.loader.load_all())
        self.stats.documents_loaded = len(documents)
        self.stats.files_skipped = self.loader.files_skipped

        corpus = Corpus(root=self.root)
        corpus.order = [document.module_id for document in documents]
        levels = {name: Level(name=name) for name in self.loader.levels}

        for document, outcome in zip(documents, self._parse_all(documents), strict=True):
            if isinstance(outcome, ParseFailure):
                corpus.failures.append(outcome)
                continue
            corpus.modules[outcome.module_id] = outcome
            levels[document.level].modules.append(outcome)

        corpus.levels = list(levels.values())
        self.stats.modules_parsed = len(corpus.modules)
        self.stats.modules_failed = len(corpus.failures)
        return corpus

    def run(self) -> Report:
        """Run the complete lint pipeline.

        Returns:
            Report of every finding

        Raises:
            NotFoundError: If the root does not exist
            StructureError: If a level directory is malformed
        """
        start_time = time.time()
        self.stats = LintStatistics()

        self.logger.info("lint_started", root=str(self.root), strict=self.config.strict)

        corpus = self.build_corpus()

        violations: list[Violation] = []
        for module in corpus.ordered_modules():
            violations.extend(self.engine.evaluate(module))

        violations.extend(CrossReferenceChecker(corpus).check())

        report = ReportGenerator(corpus.order, strict=self.config.strict).generate(
            violations,
            unparsed=corpus.failures,
            modules_checked=len(corpus.modules),
        )

        self.stats.violations_found = report.total
        self.stats.duration_seconds = time.time() - start_time

        self.logger.info("lint_complete", **self.stats.to_dict())
        return report

    def _parse_all(self, documents: list[SourceDocument]) -> list[Module | ParseFailure]:
        """Parse documents, keeping their order whatever the worker count."""
        progress = tqdm(
            total=len(documents),
            desc="Parsing modules",
            unit="module",
            disable=not self.show_progress,
        )

        def parse_one(document: SourceDocument) -> Module | ParseFailure:
            try:
                return self.parser.parse(document)
            except ParseError as e:
                self.logger.warning("parse_failed", module_id=document.module_id, error=e.message)
                return ParseFailure(module_id=document.module_id, message=e.message)
            finally:
                progress.update(1)

        try:
            if self.config.workers > 1 and len(documents) > 1:
                with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                    return list(executor.map(parse_one, documents))
            return [parse_one(document) for document in documents]
        finally:
            progress.close()
