"""Exceptions for friendlyeval.

Exception Hierarchy:
FriendlyEvalError (base)
├── ParseError                    # Malformed source text (fatal for rewrite)
│   └── LexerError                # Could not tokenize
├── CaptureError                  # Capture precondition not satisfied
│   ├── NotAnArgumentError        # Not a formal parameter of the frame
│   ├── NotScalarNameLikeError    # Value is not one name-like scalar
│   ├── NotNameLikeError          # A collection element is not name-like
│   └── PromiseError              # Argument value cannot be forced
├── InjectionError                # Artifact used under the wrong marker
└── RewriteError                  # Static rewrite rejected
    ├── ArityMismatchError        # Single vs. list marker mismatch
    ├── AssignTargetError         # Assignment-tagged capture out of position
    └── NestedCaptureError        # Marked capture inside another capture

Every error carries an ErrorCode so diagnostics can be grepped:

    ```
    FE-REW-001: '!!!' splices a list but 'typed_as_name' captures a single name
      Location: <buffer>:1:12
         |
    >  1 | select(dat, !!!typed_as_name(col))
         |             ^
         |
      Hint: use '!!' to inject a single name
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import Any

from friendlyeval import terminal


class ErrorCode(Enum):
    """Searchable error codes.

    Format: FE-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), CAP (capture), INJ (injection),
    REW (rewrite)
    """

    # Lexer errors (FE-LEX-xxx)
    UNEXPECTED_CHARACTER = "FE-LEX-001"
    UNTERMINATED_STRING = "FE-LEX-002"

    # Parser errors (FE-PAR-xxx)
    UNEXPECTED_TOKEN = "FE-PAR-001"
    UNCLOSED_BRACKET = "FE-PAR-002"

    # Capture errors (FE-CAP-xxx)
    NOT_AN_ARGUMENT = "FE-CAP-001"
    NOT_SCALAR_NAME_LIKE = "FE-CAP-002"
    NOT_NAME_LIKE = "FE-CAP-003"
    UNFORCED_PROMISE = "FE-CAP-004"

    # Injection errors (FE-INJ-xxx)
    INJECTION_SHAPE = "FE-INJ-001"

    # Rewrite errors (FE-REW-xxx)
    ARITY_MISMATCH = "FE-REW-001"
    ASSIGN_TARGET = "FE-REW-002"
    NESTED_CAPTURE = "FE-REW-003"

    @property
    def category(self) -> str:
        """Error category (e.g., 'lexer', 'parser', 'capture', 'rewrite')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "CAP": "capture",
            "INJ": "injection",
            "REW": "rewrite",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
        width: Number of characters the caret run underlines.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None
    width: int = 1

    def format(self) -> str:
        """Format snippet in Rust-inspired diagnostic style with colors."""
        parts: list[str] = [terminal.gutter()]
        for lineno, content in self.lines:
            parts.append(terminal.source_line(lineno, content, is_error=lineno == self.error_line))
            if lineno == self.error_line and self.column is not None:
                parts.append(terminal.caret_line(self.column, self.width))
        parts.append(terminal.gutter())
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
    width: int = 1,
) -> SourceSnippet:
    """Build a SourceSnippet from source text.

    Args:
        source: Full source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
        width: Characters to underline from ``column``.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column, width=width)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class FriendlyEvalError(Exception):
    """Base exception for all friendlyeval errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a structured, human-readable summary."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = terminal.error_header(self.code.value, header)
        return header


class _LocatedError(FriendlyEvalError):
    """Error tied to a position in source text."""

    def __init__(
        self,
        message: str,
        *,
        lineno: int = 0,
        col_offset: int = 0,
        source: str | None = None,
        filename: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
        width: int = 1,
    ):
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source = source
        self.filename = filename
        self.suggestion = suggestion
        if code is not None:
            self.code = code
        self.source_snippet: SourceSnippet | None = None
        if source and lineno:
            self.source_snippet = build_source_snippet(
                source, lineno, context_lines=1, column=col_offset, width=width
            )
        super().__init__(message)

    @property
    def location(self) -> str:
        loc = self.filename or "<buffer>"
        if self.lineno:
            loc += f":{self.lineno}:{self.col_offset}"
        return loc

    def format_compact(self) -> str:
        parts = [
            terminal.error_header(self.code.value if self.code else None, self.message),
            f"  Location: {terminal.style(self.location, terminal.Role.LOCATION)}",
        ]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.suggestion:
            parts.append(f"  {terminal.style('Hint:', terminal.Role.HINT)} {self.suggestion}")
        return "\n".join(parts)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class ParseError(_LocatedError):
    """Source text is not syntactically well-formed.

    Raised by the lexer and parser. Fatal for a rewrite: no partial tree is
    built and the input is left untouched.
    """

    code: ErrorCode | None = ErrorCode.UNEXPECTED_TOKEN


class LexerError(ParseError):
    """Source text could not be tokenized."""

    code: ErrorCode | None = ErrorCode.UNEXPECTED_CHARACTER


# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------


class CaptureError(FriendlyEvalError):
    """A capture operation's precondition was not satisfied."""


class NotAnArgumentError(CaptureError):
    """The requested slot is not a formal parameter of the enclosing function.

    Example:
            >>> typed_as_name("colum", frame=frame)
        NotAnArgumentError: 'colum' is not an argument of summarise_col(). Did you mean 'column'?

    """

    code: ErrorCode | None = ErrorCode.NOT_AN_ARGUMENT

    def __init__(
        self,
        param: str,
        function: str | None = None,
        formals: tuple[str, ...] = (),
    ):
        self.param = param
        self.function = function
        self.formals = formals
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.function is None and not self.formals:
            return f"'{self.param}' is not an argument: no call frame is active"
        where = f"{self.function}()" if self.function else "the enclosing function"
        msg = f"'{self.param}' is not an argument of {where}"
        matches = get_close_matches(self.param, self.formals, n=1, cutoff=0.6)
        if matches:
            msg += f". Did you mean '{matches[0]}'?"
        return msg


class NotScalarNameLikeError(CaptureError):
    """A value expected to be one name-like scalar is not."""

    code: ErrorCode | None = ErrorCode.NOT_SCALAR_NAME_LIKE

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Expected a single name-like value, got {_describe(value)}"
        )


class NotNameLikeError(CaptureError):
    """A value (or an element of a collection) cannot be used as a name."""

    code: ErrorCode | None = ErrorCode.NOT_NAME_LIKE

    def __init__(self, value: Any, index: int | None = None):
        self.value = value
        self.index = index
        where = f" at position {index}" if index is not None else ""
        super().__init__(f"Expected a name-like value{where}, got {_describe(value)}")


class PromiseError(CaptureError):
    """An argument's value cannot be determined from its expression."""

    code: ErrorCode | None = ErrorCode.UNFORCED_PROMISE

    def __init__(self, param: str, text: str, reason: str):
        self.param = param
        self.text = text
        super().__init__(f"Cannot evaluate argument '{param}' ({text}): {reason}")


# ---------------------------------------------------------------------------
# Injection
# ---------------------------------------------------------------------------


class InjectionError(FriendlyEvalError):
    """An artifact was injected through a marker that cannot accept its shape."""

    code: ErrorCode | None = ErrorCode.INJECTION_SHAPE

    def __init__(self, message: str, *, marker: str, artifact: Any):
        self.marker = marker
        self.artifact = artifact
        super().__init__(message)


# ---------------------------------------------------------------------------
# Rewrite
# ---------------------------------------------------------------------------


class RewriteError(_LocatedError):
    """The rewrite engine refused to transform the input.

    The whole rewrite is aborted; no partially rewritten text is produced.
    """


class ArityMismatchError(RewriteError):
    """A list capture under a single marker, or a single capture under a splice."""

    code: ErrorCode | None = ErrorCode.ARITY_MISMATCH


class AssignTargetError(RewriteError):
    """An assignment-tagged capture used outside an assignment target."""

    code: ErrorCode | None = ErrorCode.ASSIGN_TARGET


class NestedCaptureError(RewriteError):
    """A marked capture call appears inside another marked capture's arguments."""

    code: ErrorCode | None = ErrorCode.NESTED_CAPTURE


def _describe(value: Any) -> str:
    value_repr = repr(value)
    if len(value_repr) > 60:
        value_repr = value_repr[:57] + "..."
    return f"{value_repr} ({type(value).__name__})"
