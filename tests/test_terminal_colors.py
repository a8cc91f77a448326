"""Tests for terminal color utilities."""

import pytest

from collate.library import terminal


class TestColorDetection:
    """Test terminal color detection logic."""

    def test_supports_color_respects_no_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        # Decided at import; patch the cached value
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert not terminal.supports_color()

    def test_force_color_wins(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert terminal._should_use_colors()

    def test_no_color(self, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setenv("NO_COLOR", "1")
        assert not terminal._should_use_colors()

    def test_colorize_returns_plain_when_disabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        result = terminal.colorize("Error", "bright_red", "bold")
        assert result == "Error"

    def test_colorize_adds_codes_when_enabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.colorize("Error", "bright_red", "bold")
        assert "\033[91m" in result
        assert "\033[1m" in result
        assert result.endswith("\033[0m")

    def test_strip_colors_removes_ansi_codes(self):
        colored = "\033[91m\033[1mError\033[0m"
        assert terminal.strip_colors(colored) == "Error"


class TestErrorFormatting:
    """Formatted diagnostic pieces."""

    def test_format_error_header_with_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.format_error_header("C-GRM-001", "Unknown command 'q'")
        assert "C-GRM-001" in result
        assert "\033[" in result
        assert terminal.strip_colors(result) == "C-GRM-001: Unknown command 'q'"

    def test_format_error_header_without_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.format_error_header(None, "Something went wrong") == "Something went wrong"

    def test_format_source_line_normal(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.format_source_line(42, "^|u a|") == "  42 | ^|u a|"

    def test_format_source_line_error(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.format_source_line(3, "^|q|", is_error=True)
        assert "\033[91m" in result
        assert terminal.strip_colors(result) == ">  3 | ^|q|"


class TestPlainTextMode:
    """Colors never change the text itself."""

    def test_helpers_return_plain_text(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.error_code("C-RES-001") == "C-RES-001"
        assert terminal.location("page.txt") == "page.txt"
        assert terminal.hint("Hint") == "Hint"
        assert terminal.success("done") == "done"

    def test_error_readable_without_colors(self, monkeypatch):
        from collate import Library, UnregisteredBlockError

        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        library = Library()
        library.import_string("^|n a|^|u b|^|e|")
        with pytest.raises(UnregisteredBlockError) as exc_info:
            library.render("a")
        assert "\033[" not in str(exc_info.value)
        assert "Using unregistered block 'b'" in str(exc_info.value)
