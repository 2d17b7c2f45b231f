"""Expression parsing for the friendlyeval parser.

Precedence climbing over R's operator table. Binding powers, lowest first:

    ?                         left
    =                         right
    <-  <<-  :=               right
    ->  ->>                   left
    ~                         left (also prefix)
    |   ||                    left
    &   &&                    left
    !                         prefix
    ==  !=  <  >  <=  >=      left
    +  -                      left
    *  /                      left
    %op%  |>                  left
    :                         left
    -x  +x  !!x  !!!x         prefix
    ^                         right
    $  @  ::  ()  []  [[]]    postfix

Injection markers bind like unary minus, so ``!!x * 2`` is ``(!!x) * 2``
and ``!!f(a)`` marks the call ``f(a)``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from friendlyeval._types import Token, TokenType
from friendlyeval.nodes import (
    Arg,
    Assign,
    BinOp,
    Call,
    Const,
    Dollar,
    Expr,
    Index,
    Inject,
    Name,
    Namespaced,
    Paren,
    UnaryOp,
)

if TYPE_CHECKING:
    from friendlyeval.parser.navigation import Context

# Below '=' so call arguments stop at a naming '=' but still take ':='.
ARG_BP = 21
UNARY_BP = 140

# token type -> (left binding power, right binding power)
BINARY_OPERATORS: dict[TokenType, tuple[int, int]] = {
    TokenType.QUESTION: (10, 11),
    TokenType.EQ_ASSIGN: (20, 20),
    TokenType.LEFT_ASSIGN: (30, 30),
    TokenType.SUPER_ASSIGN: (30, 30),
    TokenType.WALRUS: (30, 30),
    TokenType.RIGHT_ASSIGN: (40, 41),
    TokenType.RIGHT_SUPER_ASSIGN: (40, 41),
    TokenType.TILDE: (50, 51),
    TokenType.OR: (60, 61),
    TokenType.OR2: (60, 61),
    TokenType.AND: (70, 71),
    TokenType.AND2: (70, 71),
    TokenType.EQ: (90, 91),
    TokenType.NE: (90, 91),
    TokenType.LT: (90, 91),
    TokenType.GT: (90, 91),
    TokenType.LE: (90, 91),
    TokenType.GE: (90, 91),
    TokenType.PLUS: (100, 101),
    TokenType.MINUS: (100, 101),
    TokenType.STAR: (110, 111),
    TokenType.SLASH: (110, 111),
    TokenType.SPECIAL: (120, 121),
    TokenType.PIPE: (120, 121),
    TokenType.COLON: (130, 131),
    TokenType.CARET: (150, 150),
}

ASSIGN_OPERATORS = frozenset(
    {
        TokenType.EQ_ASSIGN,
        TokenType.LEFT_ASSIGN,
        TokenType.SUPER_ASSIGN,
        TokenType.WALRUS,
        TokenType.RIGHT_ASSIGN,
        TokenType.RIGHT_SUPER_ASSIGN,
    }
)

# prefix token -> binding power of its operand
PREFIX_OPERATORS: dict[TokenType, int] = {
    TokenType.QUESTION: 11,
    TokenType.TILDE: 51,
    TokenType.NOT: 80,
    TokenType.PLUS: UNARY_BP,
    TokenType.MINUS: UNARY_BP,
    TokenType.BANG_BANG: UNARY_BP,
    TokenType.BANG_BANG_BANG: UNARY_BP,
}

CONSTANTS: dict[str, str | int | float | bool | None] = {
    "TRUE": True,
    "FALSE": False,
    "NULL": None,
    "NA": None,
    "NA_integer_": None,
    "NA_real_": None,
    "NA_character_": None,
    "Inf": float("inf"),
    "NaN": float("nan"),
}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "`": "`",
    " ": " ",
}
_HEX_ESCAPE = re.compile(r"x([0-9a-fA-F]{1,2})|u\{?([0-9a-fA-F]{1,4})\}?|U\{?([0-9a-fA-F]{1,8})\}?")
_RAW_STRING = re.compile(r"[rR](['\"])(-*)[(\[{](.*)[)\]}]\2\1\Z", re.DOTALL)


class ExpressionParsingMixin:
    """Mixin for parsing expressions.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    if TYPE_CHECKING:
        _source: str
        _contexts: list[Context]
        _prev_end: int

        @property
        def _current(self) -> Token: ...
        def _peek(self, offset: int = 1) -> Token: ...
        def _advance(self) -> Token: ...
        def _match(self, *types: TokenType) -> bool: ...
        def _expect(self, token_type: TokenType, what: str | None = None) -> Token: ...
        def _skip_newlines(self) -> None: ...
        def _push(self, context: Context) -> None: ...
        def _pop(self) -> None: ...
        def _error(self, message: str, token: Token | None = None, suggestion: str | None = None): ...

        # From StatementParsingMixin
        def _parse_compound(self) -> Expr | None: ...

    def _parse_expression(self, min_bp: int = 0) -> Expr:
        """Parse an expression whose operators all bind at least ``min_bp``."""
        left = self._parse_prefix()
        while True:
            token = self._current
            powers = BINARY_OPERATORS.get(token.type)
            if powers is None:
                break
            left_bp, right_bp = powers
            if left_bp < min_bp:
                break
            self._advance()
            self._skip_newlines()
            right = self._parse_expression(right_bp)
            left = self._binary(token, left, right)
        return left

    def _binary(self, op: Token, left: Expr, right: Expr) -> Expr:
        if op.type in ASSIGN_OPERATORS:
            return Assign(
                lineno=left.lineno,
                col_offset=left.col_offset,
                start=left.start,
                end=right.end,
                op=op.value,
                left=left,
                right=right,
                op_start=op.start,
                op_end=op.end,
            )
        return BinOp(
            lineno=left.lineno,
            col_offset=left.col_offset,
            start=left.start,
            end=right.end,
            op=op.value,
            left=left,
            right=right,
        )

    def _parse_prefix(self) -> Expr:
        token = self._current
        operand_bp = PREFIX_OPERATORS.get(token.type)
        if operand_bp is not None:
            self._advance()
            self._skip_newlines()
            operand = self._parse_expression(operand_bp)
            if token.type in (TokenType.BANG_BANG, TokenType.BANG_BANG_BANG):
                return Inject(
                    lineno=token.lineno,
                    col_offset=token.col_offset,
                    start=token.start,
                    end=operand.end,
                    marker=token.value,  # type: ignore[arg-type]
                    operand=operand,
                )
            return UnaryOp(
                lineno=token.lineno,
                col_offset=token.col_offset,
                start=token.start,
                end=operand.end,
                op=token.value,
                operand=operand,
            )
        return self._parse_postfix(self._parse_primary())

    def _parse_primary(self) -> Expr:
        token = self._current
        if token.type == TokenType.NUMBER:
            self._advance()
            return self._const(token, _number_value(token.value))
        if token.type == TokenType.STRING:
            self._advance()
            return self._const(token, self._string(token))
        if token.type == TokenType.NAME:
            return self._parse_name()
        if token.type == TokenType.LPAREN:
            return self._parse_paren()

        compound = self._parse_compound()
        if compound is not None:
            return compound
        raise self._error(f"Unexpected {_describe(token)}", token)

    def _parse_name(self) -> Expr:
        token = self._advance()
        backticked = self._source[token.start] == "`"
        follower = self._peek(0)
        if follower.type in (TokenType.NS_GET, TokenType.NS_GET_INT) and not backticked:
            self._advance()
            name_token = self._current
            if name_token.type not in (TokenType.NAME, TokenType.STRING):
                raise self._error(
                    f"Expected a name after '{follower.value}'", name_token
                )
            self._advance()
            name = name_token.value
            if name_token.type == TokenType.STRING:
                name = self._string(name_token)
            return Namespaced(
                lineno=token.lineno,
                col_offset=token.col_offset,
                start=token.start,
                end=name_token.end,
                package=token.value,
                name=name,
                internal=follower.type == TokenType.NS_GET_INT,
            )
        if not backticked and token.value in CONSTANTS:
            return self._const(token, CONSTANTS[token.value])
        return Name(
            lineno=token.lineno,
            col_offset=token.col_offset,
            start=token.start,
            end=token.end,
            name=token.value,
            backticked=backticked,
        )

    def _parse_paren(self) -> Paren:
        open_token = self._advance()
        self._push("paren")
        try:
            expr = self._parse_expression()
            close = self._expect(TokenType.RPAREN)
        finally:
            self._pop()
        return Paren(
            lineno=open_token.lineno,
            col_offset=open_token.col_offset,
            start=open_token.start,
            end=close.end,
            expr=expr,
        )

    def _parse_postfix(self, expr: Expr) -> Expr:
        while True:
            token = self._current
            if token.type == TokenType.LPAREN:
                self._advance()
                args, close = self._parse_arguments(TokenType.RPAREN)
                expr = Call(
                    lineno=expr.lineno,
                    col_offset=expr.col_offset,
                    start=expr.start,
                    end=close.end,
                    func=expr,
                    args=args,
                )
            elif token.type in (TokenType.LBRACKET, TokenType.DLBRACKET):
                self._advance()
                double = token.type == TokenType.DLBRACKET
                args, close = self._parse_arguments(TokenType.RBRACKET)
                if double:
                    close = self._expect(TokenType.RBRACKET, "']]'")
                expr = Index(
                    lineno=expr.lineno,
                    col_offset=expr.col_offset,
                    start=expr.start,
                    end=close.end,
                    obj=expr,
                    args=args,
                    double=double,
                )
            elif token.type in (TokenType.DOLLAR, TokenType.AT):
                self._advance()
                attr_token = self._current
                if attr_token.type == TokenType.NAME:
                    attr: Expr = self._parse_name()
                elif attr_token.type == TokenType.STRING:
                    self._advance()
                    attr = self._const(attr_token, self._string(attr_token))
                else:
                    raise self._error(
                        f"Expected a name after '{token.value}'", attr_token
                    )
                expr = Dollar(
                    lineno=expr.lineno,
                    col_offset=expr.col_offset,
                    start=expr.start,
                    end=attr.end,
                    obj=expr,
                    attr=attr,
                    op=token.value,  # type: ignore[arg-type]
                )
            else:
                return expr

    def _parse_arguments(self, closer: TokenType) -> tuple[tuple[Arg, ...], Token]:
        """Parse a comma-separated argument list up to and including ``closer``.

        Called with the opening bracket already consumed.
        """
        self._push("paren")
        try:
            args: list[Arg] = []
            if self._match(closer):
                return (), self._advance()
            while True:
                args.append(self._parse_argument(closer))
                if self._match(TokenType.COMMA):
                    self._advance()
                    continue
                return tuple(args), self._expect(closer)
        finally:
            self._pop()

    def _parse_argument(self, closer: TokenType) -> Arg:
        token = self._current
        if token.type in (TokenType.COMMA, closer):
            # Empty slot: x[, 1] or f(a, )
            return Arg(
                lineno=token.lineno,
                col_offset=token.col_offset,
                start=token.start,
                end=token.start,
                name=None,
                value=None,
            )

        first = self._parse_expression(ARG_BP)
        if not self._match(TokenType.EQ_ASSIGN):
            return Arg(
                lineno=first.lineno,
                col_offset=first.col_offset,
                start=first.start,
                end=first.end,
                name=None,
                value=first,
            )

        op = self._advance()
        value: Expr | None = None
        if not self._match(TokenType.COMMA, closer):
            value = self._parse_expression(ARG_BP)
        return Arg(
            lineno=first.lineno,
            col_offset=first.col_offset,
            start=first.start,
            end=value.end if value is not None else op.end,
            name=first,
            value=value,
            op="=",
            op_start=op.start,
            op_end=op.end,
        )

    def _string(self, token: Token) -> str:
        try:
            return _string_value(token.value)
        except ValueError as e:
            raise self._error(str(e), token) from e

    def _const(self, token: Token, value: str | int | float | complex | bool | None) -> Const:
        return Const(
            lineno=token.lineno,
            col_offset=token.col_offset,
            start=token.start,
            end=token.end,
            value=value,
            raw=token.value,
        )


def _describe(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.NEWLINE:
        return "end of line"
    return f"'{token.value}'"


def _number_value(text: str) -> int | float | complex:
    is_hex = text[:2] in ("0x", "0X")
    if text.endswith("i"):
        body = text[:-1]
        return complex(0, int(body, 16) if is_hex else float(body))
    if text.endswith("L"):
        body = text[:-1]
        return int(body, 16) if is_hex else int(float(body))
    if is_hex:
        return int(text, 16)
    if any(char in text for char in ".eE"):
        return float(text)
    return int(text)


def _string_value(raw: str) -> str:
    """Decode a string literal token (quotes included) to its text.

    Raises:
        ValueError: An escape names a code point beyond U+10FFFF.
    """
    match = _RAW_STRING.match(raw)
    if match:
        return match.group(3)

    body = raw[1:-1]
    if "\\" not in body:
        return body
    out: list[str] = []
    pos = 0
    while pos < len(body):
        char = body[pos]
        if char != "\\" or pos + 1 >= len(body):
            out.append(char)
            pos += 1
            continue
        escape = body[pos + 1]
        if escape in _ESCAPES:
            out.append(_ESCAPES[escape])
            pos += 2
            continue
        hex_match = _HEX_ESCAPE.match(body, pos + 1)
        if hex_match:
            digits = next(group for group in hex_match.groups() if group)
            code = int(digits, 16)
            if code > 0x10FFFF:
                raise ValueError(f"Invalid Unicode escape \\U{{{digits}}}: beyond U+10FFFF")
            out.append(chr(code))
            pos = hex_match.end()
            continue
        out.append(escape)
        pos += 2
    return "".join(out)
