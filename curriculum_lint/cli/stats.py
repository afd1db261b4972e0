"""CLI command for curriculum statistics."""

import statistics
from pathlib import Path

import click
import structlog

from curriculum_lint.cli.utils import echo_banner, setup_environment
from curriculum_lint.corpus.models import Corpus, Module
from curriculum_lint.pipeline import LintPipeline
from curriculum_lint.utils.exceptions import NotFoundError, StructureError

logger = structlog.get_logger(__name__)


def _display_levels(corpus: Corpus) -> None:
    """Display per-level module, chapter and word counts."""
    click.echo("-" * 80)
    click.echo("Levels")
    click.echo("-" * 80)
    for level in corpus.levels:
        chapters = sum(module.chapter_count for module in level.modules)
        words = sum(module.word_count for module in level.modules)
        click.echo(
            f"  {level.name:<8} {len(level.modules):3} modules  "
            f"{chapters:4} chapters  {words:8,} words"
        )
    click.echo()


def _display_summary(corpus: Corpus, modules: list[Module]) -> None:
    """Display corpus-wide totals."""
    word_counts = [module.word_count for module in modules]
    chapter_counts = [module.chapter_count for module in modules]
    click.echo("-" * 80)
    click.echo("Summary")
    click.echo("-" * 80)
    click.echo(f"  Total Modules: {len(modules):,}")
    click.echo(f"  Could Not Parse: {len(corpus.failures):,}")
    click.echo(f"  Total Chapters: {sum(chapter_counts):,}")
    click.echo(f"  Total Words: {sum(word_counts):,}")
    click.echo(f"  Median Word Count: {statistics.median(word_counts):,.0f}")
    click.echo(f"  Median Chapter Count: {statistics.median(chapter_counts):,.0f}")
    click.echo()


def _display_extremes(modules: list[Module], limit: int = 5) -> None:
    """Display the shortest and longest modules by word count."""
    ordered = sorted(modules, key=lambda module: (module.word_count, module.module_id))

    click.echo("-" * 80)
    click.echo(f"Top {limit} Shortest Modules (by word count)")
    click.echo("-" * 80)
    for i, module in enumerate(ordered[:limit], 1):
        click.echo(f"  {i:2}. {module.module_id}: {module.word_count:,} words")
    click.echo()

    click.echo("-" * 80)
    click.echo(f"Top {limit} Longest Modules (by word count)")
    click.echo("-" * 80)
    for i, module in enumerate(ordered[-limit:][::-1], 1):
        click.echo(f"  {i:2}. {module.module_id}: {module.word_count:,} words")
    click.echo()


@click.command()
@click.argument("root", type=click.Path(path_type=Path), default=".")
@click.option("--limit", type=int, default=5, help="Entries in the shortest/longest lists")
def stats(root: Path, limit: int) -> None:
    """Display curriculum statistics.

    Shows module, chapter and word counts per level, plus the shortest and
    longest modules.
    """
    setup_environment()

    echo_banner("Curriculum Statistics")
    click.echo()
    click.echo(f"Root: {root}")
    click.echo()

    try:
        corpus = LintPipeline(root).build_corpus()
    except (NotFoundError, StructureError) as e:
        click.echo(f"Error: {e}", err=True)
        logger.error("stats_failed", error=str(e))
        raise click.Abort() from e

    modules = corpus.ordered_modules()
    if not modules:
        click.echo("  No modules found in curriculum", err=True)
        raise click.Abort()

    _display_levels(corpus)
    _display_summary(corpus, modules)
    _display_extremes(modules, limit)


if __name__ == "__main__":
    stats()
