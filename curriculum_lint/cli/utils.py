"""Shared utilities for CLI commands."""

import click

from curriculum_lint.utils.config import Config
from curriculum_lint.utils.exceptions import ConfigurationError
from curriculum_lint.utils.logger import configure_logging


def setup_environment() -> Config:
    """Load environment settings and configure logging.

    Returns:
        Environment settings

    Raises:
        click.Abort: If an environment variable holds an invalid value
    """
    try:
        env = Config()
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        raise click.Abort() from e

    configure_logging(env.log_level, env.log_format)
    return env


def echo_banner(title: str, err: bool = False) -> None:
    """Print a section banner."""
    click.echo("=" * 80, err=err)
    click.echo(title, err=err)
    click.echo("=" * 80, err=err)
