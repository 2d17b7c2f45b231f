"""Pytest configuration and fixtures for friendlyeval tests."""

import pytest

from friendlyeval import terminal
from friendlyeval.capture import CallFrame, Environment
from friendlyeval.rewrite import RewriteConfig, Rewriter


@pytest.fixture(autouse=True)
def no_colors(monkeypatch):
    """Keep diagnostics free of ANSI codes so messages compare as plain text."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def frame():
    """Frame for ``plot_col(mtcars, cyl)`` against ``function(dat, col)``."""
    return CallFrame.from_call("plot_col(mtcars, cyl)", ("dat", "col"))


@pytest.fixture
def dots_frame():
    """Frame for ``by_cols(mtcars, cyl, gear)`` against ``function(dat, ...)``."""
    return CallFrame.from_call("by_cols(mtcars, cyl, gear)", ("dat", "..."))


@pytest.fixture
def mixed_frame():
    """Frame exercising typed, value and dots parameters at once."""
    env = Environment(bindings={"wanted": ["mpg", "hp"]})
    return CallFrame.from_call(
        'summarise_cols(mtcars, cyl, "disp", gear, carb)',
        ("dat", "col", "name", "..."),
        env=env,
    )


@pytest.fixture
def rewriter():
    """Rewriter with the default configuration (``rlang::`` qualified output)."""
    return Rewriter()


@pytest.fixture
def bare_rewriter():
    """Rewriter emitting unqualified native forms."""
    return Rewriter(RewriteConfig(qualify=False))
