"""Statement and compound-expression parsing.

Provides the mixin for statement sequences (top level and ``{ }``), function
literals and control flow. In R these are all expressions; they live here
because each one owns its own newline rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from friendlyeval._types import Token, TokenType
from friendlyeval.nodes import (
    Block,
    Break,
    Expr,
    For,
    FunctionDef,
    If,
    Name,
    Next,
    Param,
    Repeat,
    While,
)
from friendlyeval.parser.expressions import ARG_BP

if TYPE_CHECKING:
    from friendlyeval.exceptions import ParseError
    from friendlyeval.parser.navigation import Context


class StatementParsingMixin:
    """Mixin for statement sequences, functions and control flow."""

    if TYPE_CHECKING:
        _contexts: list[Context]

        @property
        def _current(self) -> Token: ...
        def _advance(self) -> Token: ...
        def _match(self, *types: TokenType) -> bool: ...
        def _expect(self, token_type: TokenType, what: str | None = None) -> Token: ...
        def _skip_newlines(self) -> None: ...
        def _next_significant(self) -> Token: ...
        def _push(self, context: Context) -> None: ...
        def _pop(self) -> None: ...
        def _error(
            self, message: str, token: Token | None = None, suggestion: str | None = None
        ) -> ParseError: ...

        # From ExpressionParsingMixin
        def _parse_expression(self, min_bp: int = 0) -> Expr: ...

    def _parse_statements(self, terminator: TokenType) -> list[Expr]:
        """Parse statements separated by newlines or ';' up to ``terminator``.

        The terminator itself is not consumed.
        """
        body: list[Expr] = []
        while True:
            while self._match(TokenType.NEWLINE, TokenType.SEMICOLON):
                self._advance()
            if self._match(terminator):
                return body
            body.append(self._parse_expression())
            token = self._current
            if token.type not in (TokenType.NEWLINE, TokenType.SEMICOLON, terminator):
                raise self._error(
                    f"Unexpected '{token.value}' after expression",
                    token,
                    suggestion="Separate statements with a newline or ';'",
                )

    def _parse_compound(self) -> Expr | None:
        """Parse a construct introduced by a keyword or '{', or return None."""
        token = self._current
        if token.type == TokenType.LBRACE:
            return self._parse_block()
        if token.type in (TokenType.FUNCTION, TokenType.BACKSLASH):
            return self._parse_function()
        if token.type == TokenType.IF:
            return self._parse_if()
        if token.type == TokenType.FOR:
            return self._parse_for()
        if token.type == TokenType.WHILE:
            return self._parse_while()
        if token.type == TokenType.REPEAT:
            self._advance()
            self._skip_newlines()
            body = self._parse_expression()
            return Repeat(
                lineno=token.lineno,
                col_offset=token.col_offset,
                start=token.start,
                end=body.end,
                body=body,
            )
        if token.type in (TokenType.BREAK, TokenType.NEXT):
            self._advance()
            node_type = Break if token.type == TokenType.BREAK else Next
            return node_type(
                lineno=token.lineno,
                col_offset=token.col_offset,
                start=token.start,
                end=token.end,
            )
        return None

    def _parse_block(self) -> Block:
        open_token = self._advance()
        self._push("brace")
        try:
            body = self._parse_statements(TokenType.RBRACE)
            close = self._expect(TokenType.RBRACE)
        finally:
            self._pop()
        return Block(
            lineno=open_token.lineno,
            col_offset=open_token.col_offset,
            start=open_token.start,
            end=close.end,
            body=tuple(body),
        )

    def _parse_condition(self) -> Expr:
        """Parse '(' expr ')' as used by if and while."""
        self._expect(TokenType.LPAREN)
        self._push("paren")
        try:
            test = self._parse_expression()
            self._expect(TokenType.RPAREN)
        finally:
            self._pop()
        self._skip_newlines()
        return test

    def _parse_function(self) -> FunctionDef:
        keyword = self._advance()
        self._expect(TokenType.LPAREN)
        self._push("paren")
        try:
            params = self._parse_params()
        finally:
            self._pop()
        self._skip_newlines()
        body = self._parse_expression()
        return FunctionDef(
            lineno=keyword.lineno,
            col_offset=keyword.col_offset,
            start=keyword.start,
            end=body.end,
            params=tuple(params),
            body=body,
            lambda_=keyword.type == TokenType.BACKSLASH,
        )

    def _parse_params(self) -> list[Param]:
        params: list[Param] = []
        if self._match(TokenType.RPAREN):
            self._advance()
            return params
        while True:
            name = self._expect(TokenType.NAME, "a parameter name")
            default: Expr | None = None
            end = name.end
            if self._match(TokenType.EQ_ASSIGN):
                self._advance()
                default = self._parse_expression(ARG_BP)
                end = default.end
            params.append(
                Param(
                    lineno=name.lineno,
                    col_offset=name.col_offset,
                    start=name.start,
                    end=end,
                    name=name.value,
                    default=default,
                )
            )
            if self._match(TokenType.COMMA):
                self._advance()
                continue
            self._expect(TokenType.RPAREN)
            return params

    def _parse_if(self) -> If:
        keyword = self._advance()
        test = self._parse_condition()
        body = self._parse_expression()
        else_: Expr | None = None
        end = body.end

        # 'else' may start a new line only inside braces or parentheses
        if self._contexts[-1] != "top" and self._next_significant().type == TokenType.ELSE:
            self._skip_newlines()
        if self._match(TokenType.ELSE):
            self._advance()
            self._skip_newlines()
            else_ = self._parse_expression()
            end = else_.end
        return If(
            lineno=keyword.lineno,
            col_offset=keyword.col_offset,
            start=keyword.start,
            end=end,
            test=test,
            body=body,
            else_=else_,
        )

    def _parse_for(self) -> For:
        keyword = self._advance()
        self._expect(TokenType.LPAREN)
        self._push("paren")
        try:
            var = self._expect(TokenType.NAME, "a loop variable")
            self._expect(TokenType.IN)
            iterable = self._parse_expression()
            self._expect(TokenType.RPAREN)
        finally:
            self._pop()
        self._skip_newlines()
        body = self._parse_expression()
        target = Name(
            lineno=var.lineno,
            col_offset=var.col_offset,
            start=var.start,
            end=var.end,
            name=var.value,
        )
        return For(
            lineno=keyword.lineno,
            col_offset=keyword.col_offset,
            start=keyword.start,
            end=body.end,
            target=target,
            iter=iterable,
            body=body,
        )

    def _parse_while(self) -> While:
        keyword = self._advance()
        test = self._parse_condition()
        body = self._parse_expression()
        return While(
            lineno=keyword.lineno,
            col_offset=keyword.col_offset,
            start=keyword.start,
            end=body.end,
            test=test,
            body=body,
        )
