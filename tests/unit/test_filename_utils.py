"""Unit tests for module filename conventions."""

import pytest

from curriculum_lint.corpus.filename_utils import is_ignored_filename, parse_module_filename


class TestParseModuleFilename:
    """Test cases for parse_module_filename function."""

    def test_two_digit_index(self) -> None:
        assert parse_module_filename("01-jsx-basics.md") == (1, "jsx-basics")

    def test_leading_zeros_and_large_index(self) -> None:
        assert parse_module_filename("012-custom-hooks.md") == (12, "custom-hooks")

    def test_slug_with_dots_and_underscores(self) -> None:
        assert parse_module_filename("03-react_18.x.md") == (3, "react_18.x")

    @pytest.mark.parametrize(
        "filename",
        [
            "jsx-basics.md",
            "01_jsx-basics.md",
            "01-.md",
            "01-jsx-basics.txt",
            "one-jsx.md",
        ],
    )
    def test_non_conforming_names_rejected(self, filename: str) -> None:
        with pytest.raises(ValueError, match="NN-title.md"):
            parse_module_filename(filename)

    def test_zero_index_rejected(self) -> None:
        with pytest.raises(ValueError, match="indices start at 1"):
            parse_module_filename("00-intro.md")


class TestIsIgnoredFilename:
    """Test cases for is_ignored_filename function."""

    @pytest.mark.parametrize("filename", ["README.md", "readme.md", "index.md", ".draft.md", "_notes.md"])
    def test_ignored(self, filename: str) -> None:
        assert is_ignored_filename(filename) is True

    def test_module_file_not_ignored(self) -> None:
        assert is_ignored_filename("01-intro.md") is False
