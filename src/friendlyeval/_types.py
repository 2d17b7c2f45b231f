"""Token types for the friendlyeval lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Lexical token categories for R-style source."""

    # Atoms
    NAME = "name"
    NUMBER = "number"
    STRING = "string"

    # Brackets
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    DLBRACKET = "[["
    RBRACKET = "]"

    # Separators
    COMMA = ","
    SEMICOLON = ";"
    NEWLINE = "newline"

    # Injection markers
    BANG_BANG = "!!"
    BANG_BANG_BANG = "!!!"

    # Operators
    NOT = "!"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    CARET = "^"
    COLON = ":"
    SPECIAL = "%op%"
    PIPE = "|>"
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    EQ = "=="
    NE = "!="
    AND = "&"
    AND2 = "&&"
    OR = "|"
    OR2 = "||"
    TILDE = "~"
    QUESTION = "?"
    DOLLAR = "$"
    AT = "@"
    NS_GET = "::"
    NS_GET_INT = ":::"
    LEFT_ASSIGN = "<-"
    SUPER_ASSIGN = "<<-"
    RIGHT_ASSIGN = "->"
    RIGHT_SUPER_ASSIGN = "->>"
    WALRUS = ":="
    EQ_ASSIGN = "="
    BACKSLASH = "\\"

    # Keywords
    FUNCTION = "function"
    IF = "if"
    ELSE = "else"
    FOR = "for"
    IN = "in"
    WHILE = "while"
    REPEAT = "repeat"
    BREAK = "break"
    NEXT = "next"

    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    ``start`` and ``end`` are character offsets into the source, so any run
    of tokens maps back to the exact text it came from.
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int
    start: int
    end: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
