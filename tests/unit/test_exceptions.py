"""Tests for custom exception hierarchy."""

from curriculum_lint.utils.exceptions import (
    ConfigurationError,
    CurriculumLintError,
    NotFoundError,
    ParseError,
    StructureError,
)


def test_base_exception_message() -> None:
    """Test that base exception stores message."""
    error = CurriculumLintError("test error")

    assert str(error) == "test error"
    assert error.message == "test error"


def test_configuration_error_inheritance() -> None:
    """Test that ConfigurationError inherits from base exception."""
    error = ConfigurationError("config error")

    assert isinstance(error, CurriculumLintError)
    assert str(error) == "config error"


def test_fatal_errors_inherit_from_base() -> None:
    """Test that loader failures share the base exception."""
    assert isinstance(NotFoundError("missing"), CurriculumLintError)
    assert isinstance(StructureError("bad name"), CurriculumLintError)


def test_parse_error_carries_module_id() -> None:
    """Test that ParseError remembers which document failed."""
    error = ParseError("no title", module_id="junior/01-intro.md")

    assert isinstance(error, CurriculumLintError)
    assert error.message == "no title"
    assert error.module_id == "junior/01-intro.md"
