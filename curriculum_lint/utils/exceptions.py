"""Custom exception hierarchy for the linter."""


class CurriculumLintError(Exception):
    """Base exception for all linter errors."""

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        super().__init__(message)
        self.message = message


class ConfigurationError(CurriculumLintError):
    """Configuration or environment setup error."""

    pass


class NotFoundError(CurriculumLintError):
    """Curriculum root does not exist."""

    pass


class StructureError(CurriculumLintError):
    """Level directory layout does not follow the NN-title.md convention."""

    pass


class ParseError(CurriculumLintError):
    """A single document could not be turned into a module record."""

    def __init__(self, message: str, module_id: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            module_id: Id of the document that failed to parse
        """
        super().__init__(message)
        self.module_id = module_id
