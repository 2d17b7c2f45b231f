"""Token navigation for the friendlyeval parser.

R is newline sensitive: a newline ends a statement at top level and inside
braces, but is just whitespace inside parentheses and brackets. The parser
keeps a stack of bracket contexts and ``_current`` silently steps over
NEWLINE tokens while the innermost context is a parenthesis or bracket.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from friendlyeval._types import Token, TokenType
from friendlyeval.exceptions import ErrorCode, ParseError

Context = Literal["top", "brace", "paren"]

# Tokens that can close a bracket context; used for "unclosed" diagnostics.
_CLOSERS: dict[TokenType, str] = {
    TokenType.RPAREN: "')'",
    TokenType.RBRACKET: "']'",
    TokenType.RBRACE: "'}'",
}


class TokenNavigationMixin:
    """Cursor over the token list with newline-aware lookahead."""

    _tokens: Sequence[Token]
    _pos: int
    _source: str
    _filename: str | None
    _contexts: list[Context]
    _prev_end: int

    @property
    def _current(self) -> Token:
        if self._contexts[-1] == "paren":
            self._skip_newlines()
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        """Token ``offset`` positions past the current one, NEWLINEs included."""
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._current
        if token.type != TokenType.EOF:
            self._pos += 1
        self._prev_end = token.end
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _expect(self, token_type: TokenType, what: str | None = None) -> Token:
        token = self._current
        if token.type != token_type:
            expected = what or f"'{token_type.value}'"
            if token.type == TokenType.EOF and token_type in _CLOSERS:
                raise self._error(
                    f"Unexpected end of input, expected {expected}",
                    token,
                    suggestion=f"Add the missing {_CLOSERS[token_type]}",
                    code=ErrorCode.UNCLOSED_BRACKET,
                )
            raise self._error(f"Expected {expected}, got {_describe(token)}", token)
        return self._advance()

    def _skip_newlines(self) -> None:
        while self._tokens[self._pos].type == TokenType.NEWLINE:
            self._pos += 1

    def _next_significant(self) -> Token:
        """First non-NEWLINE token from the current position, without consuming."""
        index = self._pos
        while self._tokens[index].type == TokenType.NEWLINE:
            index += 1
        return self._tokens[index]

    def _push(self, context: Context) -> None:
        self._contexts.append(context)

    def _pop(self) -> None:
        self._contexts.pop()

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
        code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN,
    ) -> ParseError:
        token = token or self._current
        return ParseError(
            message,
            lineno=token.lineno,
            col_offset=token.col_offset,
            source=self._source,
            filename=self._filename,
            suggestion=suggestion,
            code=code,
            width=1 if "\n" in token.value else len(token.value),
        )


def _describe(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.NEWLINE:
        return "end of line"
    return repr(token.value)
