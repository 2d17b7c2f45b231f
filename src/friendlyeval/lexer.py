"""Lexer for R-style source text.

Turns source into a flat token list. Every token records its character span
so the parser can hand exact source ranges to the rewrite engine.

Notable rules:
- ``#`` starts a comment running to end of line; comments produce no tokens.
- Newlines produce NEWLINE tokens; the parser decides where they matter.
- A contiguous run of ``!`` ends in an injection marker: ``!!`` is
  BANG_BANG, ``!!!`` is BANG_BANG_BANG, and any extra leading ``!`` are
  plain negations (``!!!!x`` is ``!`` applied to ``!!!x``).
- Backtick names (`` `my col` ``) become NAME tokens holding the inner text.

Example:
    >>> [t.type.name for t in tokenize("!!x * 2")]
    ['BANG_BANG', 'NAME', 'STAR', 'NUMBER', 'EOF']
"""

from __future__ import annotations

import re

from friendlyeval._types import Token, TokenType
from friendlyeval.exceptions import ErrorCode, LexerError

__all__ = ["KEYWORDS", "Lexer", "LexerError", "tokenize"]

KEYWORDS: dict[str, TokenType] = {
    "function": TokenType.FUNCTION,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "while": TokenType.WHILE,
    "repeat": TokenType.REPEAT,
    "break": TokenType.BREAK,
    "next": TokenType.NEXT,
}

# Longest first so greedy matching picks '<<-' over '<-' over '<'.
_OPERATORS: tuple[tuple[str, TokenType], ...] = (
    ("<<-", TokenType.SUPER_ASSIGN),
    ("->>", TokenType.RIGHT_SUPER_ASSIGN),
    (":::", TokenType.NS_GET_INT),
    ("::", TokenType.NS_GET),
    (":=", TokenType.WALRUS),
    ("<-", TokenType.LEFT_ASSIGN),
    ("->", TokenType.RIGHT_ASSIGN),
    ("|>", TokenType.PIPE),
    ("<=", TokenType.LE),
    (">=", TokenType.GE),
    ("==", TokenType.EQ),
    ("!=", TokenType.NE),
    ("&&", TokenType.AND2),
    ("||", TokenType.OR2),
    ("[[", TokenType.DLBRACKET),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
    ("{", TokenType.LBRACE),
    ("}", TokenType.RBRACE),
    ("[", TokenType.LBRACKET),
    ("]", TokenType.RBRACKET),
    (",", TokenType.COMMA),
    (";", TokenType.SEMICOLON),
    ("+", TokenType.PLUS),
    ("-", TokenType.MINUS),
    ("*", TokenType.STAR),
    ("/", TokenType.SLASH),
    ("^", TokenType.CARET),
    (":", TokenType.COLON),
    ("<", TokenType.LT),
    (">", TokenType.GT),
    ("&", TokenType.AND),
    ("|", TokenType.OR),
    ("~", TokenType.TILDE),
    ("?", TokenType.QUESTION),
    ("$", TokenType.DOLLAR),
    ("@", TokenType.AT),
    ("=", TokenType.EQ_ASSIGN),
    ("\\", TokenType.BACKSLASH),
)


class Lexer:
    """Tokenize R-style source.

    Thread-safe: all state is per-instance; compiled patterns are shared
    read-only class attributes.

    Example:
        >>> tokens = Lexer("mutate(dat, y = !!typed_as_name(x))").tokenize()
        >>> tokens[0]
        Token(NAME, 'mutate', 1:0)
    """

    _WHITESPACE = re.compile(r"[ \t\r\f\v]+")
    _NUMBER = re.compile(
        r"0[xX][0-9a-fA-F]+[Li]?"
        r"|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?[Li]?"
    )
    _NAME = re.compile(r"(?:[^\W\d_]|\.(?!\d))[\w.]*")
    _SPECIAL = re.compile(r"%[^%\n]*%")
    _RAW_STRING_START = re.compile(r"[rR](['\"])(-*)([(\[{])")
    _RAW_CLOSERS = {"(": ")", "[": "]", "{": "}"}

    def __init__(self, source: str, filename: str | None = None):
        self._source = source
        self._filename = filename
        self._pos = 0
        self._lineno = 1
        self._line_start = 0
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source. The last token is always EOF."""
        source = self._source
        length = len(source)
        while self._pos < length:
            char = source[self._pos]
            if char == "\n":
                self._emit(TokenType.NEWLINE, self._pos, self._pos + 1)
                self._newline(self._pos)
                self._pos += 1
                continue
            match = self._WHITESPACE.match(source, self._pos)
            if match:
                self._pos = match.end()
                continue
            if char == "#":
                end = source.find("\n", self._pos)
                self._pos = len(source) if end == -1 else end
                continue
            if char in "rR" and self._lex_raw_string():
                continue
            if char in "\"'":
                self._lex_string(char)
                continue
            if char == "`":
                self._lex_backtick()
                continue
            if char == "!":
                self._lex_bangs()
                continue
            if char == "%":
                self._lex_special()
                continue
            match = self._NUMBER.match(source, self._pos)
            if match and (char.isdigit() or char == "."):
                self._emit(TokenType.NUMBER, self._pos, match.end())
                self._pos = match.end()
                continue
            match = self._NAME.match(source, self._pos)
            if match:
                word = match.group()
                self._emit(KEYWORDS.get(word, TokenType.NAME), self._pos, match.end())
                self._pos = match.end()
                continue
            if self._lex_operator():
                continue
            raise self._error(f"Unexpected character {char!r}", self._pos)

        self._emit(TokenType.EOF, length, length, value="")
        return self._tokens

    # ─────────────────────────────────────────────────────────────────────
    # Token scanners
    # ─────────────────────────────────────────────────────────────────────

    def _lex_string(self, quote: str) -> None:
        source = self._source
        start = self._pos
        pos = start + 1
        while pos < len(source):
            char = source[pos]
            if char == "\\":
                pos += 2
                continue
            if char == quote:
                self._emit(TokenType.STRING, start, pos + 1)
                self._consume_to(pos + 1)
                return
            pos += 1
        raise self._error(
            "Unterminated string literal", start, code=ErrorCode.UNTERMINATED_STRING
        )

    def _lex_raw_string(self) -> bool:
        match = self._RAW_STRING_START.match(self._source, self._pos)
        if not match:
            return False
        quote, dashes, opener = match.groups()
        terminator = f"{self._RAW_CLOSERS[opener]}{dashes}{quote}"
        end = self._source.find(terminator, match.end())
        if end < 0:
            raise self._error(
                "Unterminated raw string literal",
                self._pos,
                code=ErrorCode.UNTERMINATED_STRING,
            )
        stop = end + len(terminator)
        self._emit(TokenType.STRING, self._pos, stop)
        self._consume_to(stop)
        return True

    def _lex_backtick(self) -> None:
        start = self._pos
        end = self._source.find("`", start + 1)
        if end < 0:
            raise self._error(
                "Unterminated backtick name", start, code=ErrorCode.UNTERMINATED_STRING
            )
        self._emit(TokenType.NAME, start, end + 1, value=self._source[start + 1 : end])
        self._consume_to(end + 1)

    def _lex_bangs(self) -> None:
        source = self._source
        start = self._pos
        stop = start
        while stop < len(source) and source[stop] == "!":
            stop += 1
        count = stop - start
        trailing_ne = stop < len(source) and source[stop] == "="
        if trailing_ne:
            # The last '!' belongs to '!='
            count -= 1

        pos = start
        if count >= 3:
            for _ in range(count - 3):
                self._emit(TokenType.NOT, pos, pos + 1)
                pos += 1
            self._emit(TokenType.BANG_BANG_BANG, pos, pos + 3)
            pos += 3
        elif count == 2:
            self._emit(TokenType.BANG_BANG, pos, pos + 2)
            pos += 2
        elif count == 1:
            self._emit(TokenType.NOT, pos, pos + 1)
            pos += 1

        if trailing_ne:
            self._emit(TokenType.NE, pos, pos + 2)
            pos += 2
        self._pos = pos

    def _lex_special(self) -> None:
        match = self._SPECIAL.match(self._source, self._pos)
        if not match:
            raise self._error("Unterminated %operator%", self._pos)
        self._emit(TokenType.SPECIAL, self._pos, match.end())
        self._pos = match.end()

    def _lex_operator(self) -> bool:
        source = self._source
        for text, token_type in _OPERATORS:
            if source.startswith(text, self._pos):
                self._emit(token_type, self._pos, self._pos + len(text))
                self._pos += len(text)
                return True
        return False

    # ─────────────────────────────────────────────────────────────────────
    # Position bookkeeping
    # ─────────────────────────────────────────────────────────────────────

    def _emit(self, token_type: TokenType, start: int, end: int, value: str | None = None) -> None:
        if value is None:
            value = self._source[start:end]
        self._tokens.append(
            Token(
                type=token_type,
                value=value,
                lineno=self._lineno,
                col_offset=start - self._line_start,
                start=start,
                end=end,
            )
        )

    def _newline(self, pos: int) -> None:
        self._lineno += 1
        self._line_start = pos + 1

    def _consume_to(self, stop: int) -> None:
        """Advance to ``stop``, tracking newlines inside multi-line tokens."""
        newline = self._source.find("\n", self._pos, stop)
        while newline >= 0:
            self._newline(newline)
            newline = self._source.find("\n", newline + 1, stop)
        self._pos = stop

    def _error(
        self, message: str, pos: int, code: ErrorCode = ErrorCode.UNEXPECTED_CHARACTER
    ) -> LexerError:
        return LexerError(
            message,
            lineno=self._lineno,
            col_offset=pos - self._line_start,
            source=self._source,
            filename=self._filename,
            code=code,
        )


def tokenize(source: str, filename: str | None = None) -> list[Token]:
    """Tokenize ``source`` into a list of tokens ending with EOF.

    Raises:
        LexerError: If the source contains an unterminated string or a
            character that starts no token.
    """
    return Lexer(source, filename).tokenize()
