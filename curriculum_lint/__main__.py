"""Main entry point: ``python -m curriculum_lint`` runs the lint command."""

from curriculum_lint.cli.lint import lint


def main() -> None:
    """Run the lint command."""
    lint(prog_name="curriculum-lint")


if __name__ == "__main__":
    main()
