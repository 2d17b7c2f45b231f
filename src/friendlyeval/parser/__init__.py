"""Parser for R-style source text.

Source → tokenize() → Parser → Program node tree (with character spans).
"""

from friendlyeval.exceptions import ParseError
from friendlyeval.parser.core import Parser, parse, parse_call

__all__ = ["ParseError", "Parser", "parse", "parse_call"]
