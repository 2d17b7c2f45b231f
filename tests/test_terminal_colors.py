"""Tests for diagnostic styling."""

import re

import pytest

from friendlyeval import terminal
from friendlyeval.exceptions import ArityMismatchError
from friendlyeval.rewrite import rewrite

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def plain(text: str) -> str:
    return _ANSI.sub("", text)


class TestColorDetection:
    """Colour follows NO_COLOR / FORCE_COLOR, then the TTY."""

    def test_no_color_disables(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        assert not terminal._should_use_colors()

    def test_force_color_overrides_no_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert terminal._should_use_colors()


class TestStyle:
    def test_plain_when_disabled(self):
        assert terminal.style("FE-REW-001", terminal.Role.CODE) == "FE-REW-001"

    def test_role_codes_when_enabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.style("Hint:", terminal.Role.HINT) == "\033[32mHint:\033[0m"

    def test_empty_text_is_not_wrapped(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.style("", terminal.Role.MARKER) == ""

    def test_error_header(self):
        assert terminal.error_header("FE-PAR-001", "oops") == "FE-PAR-001: oops"
        assert terminal.error_header(None, "oops") == "oops"


class TestSourceLines:
    def test_context_and_error_lines(self):
        assert terminal.source_line(7, "x <- 1") == "   7 | x <- 1"
        assert terminal.source_line(7, "x <- 1", is_error=True) == ">  7 | x <- 1"

    def test_markers_highlighted_on_error_line(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        line = terminal.source_line(1, "f(!!!xs, !!a := 1)", is_error=True)
        marker = "\033[1;35m"
        assert f"{marker}!!!\033[0m" in line
        assert f"{marker}!!\033[0m" in line
        assert f"{marker}:=\033[0m" in line
        assert plain(line) == ">  1 | f(!!!xs, !!a := 1)"

    def test_markers_not_highlighted_on_context_lines(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert "\033[1;35m" not in terminal.source_line(1, "f(!!x)")

    def test_caret_run(self):
        assert terminal.caret_line(2, 3) == "     |   ^^^"
        assert terminal.caret_line(0, 0) == "     | ^"


class TestColoredDiagnostics:
    def test_colored_output_reduces_to_plain(self, monkeypatch):
        source = "select(dat, !!!typed_as_name(col))"
        error = ArityMismatchError(
            "'!!!' splices a list", lineno=1, col_offset=12, source=source, width=3
        )
        uncolored = error.format_compact()
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        colored = error.format_compact()
        assert colored != uncolored
        assert plain(colored) == uncolored

    def test_rewrite_error_underlines_marker(self):
        with pytest.raises(ArityMismatchError) as exc_info:
            rewrite("a <- 1\nselect(dat, !!!typed_as_name(col))\nb <- 2\n")
        lines = exc_info.value.format_compact().splitlines()
        assert ">  2 | select(dat, !!!typed_as_name(col))" in lines
        caret = lines.index(">  2 | select(dat, !!!typed_as_name(col))") + 1
        assert lines[caret] == "     |             ^^^"
        assert lines[caret + 1] == "   3 | b <- 2"
