"""CLI command for linting a curriculum."""

from pathlib import Path

import click
import structlog

from curriculum_lint.cli.utils import echo_banner, setup_environment
from curriculum_lint.pipeline import LintPipeline
from curriculum_lint.reporting.renderers import RENDERERS
from curriculum_lint.utils.config import build_lint_config
from curriculum_lint.utils.exceptions import ConfigurationError, NotFoundError, StructureError

logger = structlog.get_logger(__name__)


@click.command()
@click.argument("root", type=click.Path(path_type=Path), default=".")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: ROOT/.curriculum-lint.yml if present)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(RENDERERS)),
    default="text",
    help="Report format (default: text)",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report to a file instead of stdout",
)
@click.option("--chapter-min", type=int, help="Minimum chapters per module (default: 5)")
@click.option("--chapter-max", type=int, help="Maximum chapters per module (default: 8)")
@click.option(
    "--require-section",
    multiple=True,
    help="Required section name; repeat to replace the default list",
)
@click.option("--disable-rule", multiple=True, help="Rule name to skip; repeatable")
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Treat advisory findings as failures",
)
@click.option("--workers", type=int, help="Parse modules with this many threads (default: 1)")
@click.option("--progress", is_flag=True, help="Show a progress bar while parsing")
@click.pass_context
def lint(  # noqa: PLR0913
    ctx: click.Context,
    root: Path,
    config_path: Path | None,
    output_format: str,
    output: Path | None,
    chapter_min: int | None,
    chapter_max: int | None,
    require_section: tuple[str, ...],
    disable_rule: tuple[str, ...],
    strict: bool | None,
    workers: int | None,
    progress: bool,
) -> None:
    """Check a curriculum's structure and print a lint report.

    ROOT holds one sub-directory per level (junior, mid, senior, lead) with
    module files named NN-title.md.

    Exits with status 1 when the report has hard violations or documents
    that could not be parsed, or advisory findings with --strict.

    Examples:

        \b
        # Lint the curriculum in ./curriculum
        curriculum-lint curriculum

        \b
        # Machine-readable report, advisories fail the run
        curriculum-lint curriculum --format json --strict --output report.json
    """
    env = setup_environment()

    try:
        config = build_lint_config(
            root=root,
            config_path=config_path,
            env=env,
            overrides={
                "chapter_count_min": chapter_min,
                "chapter_count_max": chapter_max,
                "required_sections": list(require_section) or None,
                "disabled_rules": list(disable_rule) or None,
                "strict": strict,
                "workers": workers,
            },
        )
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "text" and output is None:
        echo_banner("Curriculum Lint", err=True)
        click.echo(f"Root: {root}", err=True)
        click.echo(f"Chapters: {config.chapter_count_min}-{config.chapter_count_max}", err=True)
        click.echo(f"Strict: {config.strict}", err=True)
        click.echo(err=True)

    try:
        report = LintPipeline(root, config=config, show_progress=progress).run()
    except (NotFoundError, StructureError) as e:
        click.echo(f"Error: {e}", err=True)
        logger.error("lint_failed", error=str(e), error_type=type(e).__name__)
        raise click.Abort() from e
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        raise click.Abort() from None

    rendered = RENDERERS[output_format](report)

    if output is None:
        click.echo(rendered, nl=False)
    else:
        try:
            output.write_text(rendered, encoding="utf-8")
        except OSError as e:
            click.echo(f"Failed to write report to {output}: {e}", err=True)
            raise click.Abort() from e
        click.echo(f"Report saved to: {output}", err=True)

    ctx.exit(report.exit_code)


if __name__ == "__main__":
    lint()
