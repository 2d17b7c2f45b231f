"""Parser core: turns a token stream into a Program node.

Parse failures are fatal. There is no error recovery; a ParseError carries
the line, column and a source snippet of the first problem.
"""

from __future__ import annotations

from collections.abc import Sequence

from friendlyeval._types import Token, TokenType
from friendlyeval.exceptions import ParseError
from friendlyeval.lexer import tokenize
from friendlyeval.nodes import Call, Program
from friendlyeval.parser.expressions import ExpressionParsingMixin
from friendlyeval.parser.navigation import Context, TokenNavigationMixin
from friendlyeval.parser.statements import StatementParsingMixin


class Parser(
    TokenNavigationMixin,
    ExpressionParsingMixin,
    StatementParsingMixin,
):
    """Recursive-descent parser for R-style source.

    One Parser instance parses one source text; create a new one per input.

    Example:
        >>> parser = Parser(tokenize("x <- 1"), source="x <- 1")
        >>> program = parser.parse()
        >>> type(program.body[0]).__name__
        'Assign'

    """

    __slots__ = ("_contexts", "_filename", "_pos", "_prev_end", "_source", "_tokens")

    def __init__(
        self,
        tokens: Sequence[Token],
        source: str = "",
        filename: str | None = None,
    ):
        self._tokens = tokens
        self._source = source
        self._filename = filename
        self._pos = 0
        self._prev_end = 0
        self._contexts: list[Context] = ["top"]

    def parse(self) -> Program:
        """Parse all statements up to EOF."""
        try:
            body = self._parse_statements(TokenType.EOF)
        except RecursionError:
            raise self._too_deep() from None
        return Program(
            lineno=1,
            col_offset=0,
            start=0,
            end=len(self._source),
            body=tuple(body),
        )

    def parse_call(self) -> Call:
        """Parse source holding exactly one call expression."""
        self._skip_newlines()
        try:
            expr = self._parse_expression()
        except RecursionError:
            raise self._too_deep() from None
        self._skip_newlines()
        if not self._match(TokenType.EOF):
            raise self._error("Expected a single call expression")
        if not isinstance(expr, Call):
            raise self._error(
                "Expected a call expression", self._tokens[0], suggestion="Write it as f(...)"
            )
        return expr

    def _too_deep(self) -> ParseError:
        return self._error(
            "Expression nested too deeply",
            suggestion="Split it into smaller expressions or assign parts to variables",
        )


def parse(source: str, filename: str | None = None) -> Program:
    """Parse R-style ``source`` into a Program node.

    Raises:
        ParseError: If the source is not syntactically well-formed.
    """
    return Parser(tokenize(source, filename), source=source, filename=filename).parse()


def parse_call(source: str, filename: str | None = None) -> Call:
    """Parse ``source`` holding exactly one call expression, e.g. ``f(x, y = 2)``.

    Raises:
        ParseError: If the source is malformed or is not a single call.
    """
    return Parser(tokenize(source, filename), source=source, filename=filename).parse_call()
