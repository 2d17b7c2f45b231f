"""friendlyeval: friendly argument capture for tidy evaluation, and a rewriter
that compiles it away.

Capture layer: five operations that decide how a function argument becomes
a column name, producing artifacts the injection markers accept.

Quickstart:
    >>> from friendlyeval import CallFrame, typed_as_name, inject
    >>> frame = CallFrame.from_call("plot_col(mtcars, cyl)", ("dat", "col"))
    >>> inject(typed_as_name("col", frame=frame))
    Symbol('cyl')

Rewrite engine: replaces capture calls under ``!!``/``!!!``/``:=`` with the
native rlang forms, leaving everything else byte for byte:

    >>> from friendlyeval import rewrite
    >>> rewrite("mutate(dat, !!typed_as_name_lhs(out) := !!typed_as_name(arg) * 2)")
    'mutate(dat, !!rlang::ensym(out) := !!rlang::ensym(arg) * 2)'

Architecture:
Source → Lexer → Parser → node tree (with spans) → walk_sites → match → edits

| Capture                   | Marker      | Native form      |
|---------------------------|-------------|------------------|
| typed_as_name             | ``!!``      | ``rlang::ensym`` |
| typed_as_name_lhs         | ``!!`` :=   | ``rlang::ensym`` |
| typed_list_as_name_list   | ``!!!``     | ``rlang::ensyms``|
| value_as_name             | ``!!``      | ``rlang::sym``   |
| value_list_as_name_list   | ``!!!``     | ``rlang::syms``  |

Thread-Safety:
Nodes, artifacts, frames and configs are immutable. The active call frame
is held in a ContextVar, so each thread and task sees its own.

"""

from friendlyeval._types import Token, TokenType
from friendlyeval.capture import (
    Arity,
    CallFrame,
    CaptureVariant,
    Environment,
    NameList,
    Promise,
    QuotedName,
    SingleName,
    call_frame,
    get_call_frame,
    typed_as_name,
    typed_as_name_lhs,
    typed_list_as_name_list,
    value_as_name,
    value_list_as_name_list,
)
from friendlyeval.exceptions import (
    ArityMismatchError,
    AssignTargetError,
    CaptureError,
    ErrorCode,
    FriendlyEvalError,
    InjectionError,
    LexerError,
    NestedCaptureError,
    NotAnArgumentError,
    NotNameLikeError,
    NotScalarNameLikeError,
    ParseError,
    PromiseError,
    RewriteError,
)
from friendlyeval.lexer import tokenize
from friendlyeval.parser import parse
from friendlyeval.quoting import ensym, ensyms, inject, inject_target, splice, sym, syms
from friendlyeval.resolve import ResolvedInjection, resolve
from friendlyeval.rewrite import (
    DEFAULT_CONFIG,
    TREAT_ALIASES,
    RewriteConfig,
    RewriteMatch,
    RewriteResult,
    Rewriter,
    rewrite,
    rewrite_buffer,
    rewrite_selection,
)
from friendlyeval.symbols import InjectionMarker, Symbol

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "TREAT_ALIASES",
    "Arity",
    "ArityMismatchError",
    "AssignTargetError",
    "CallFrame",
    "CaptureError",
    "CaptureVariant",
    "Environment",
    "ErrorCode",
    "FriendlyEvalError",
    "InjectionError",
    "InjectionMarker",
    "LexerError",
    "NameList",
    "NestedCaptureError",
    "NotAnArgumentError",
    "NotNameLikeError",
    "NotScalarNameLikeError",
    "ParseError",
    "Promise",
    "PromiseError",
    "QuotedName",
    "ResolvedInjection",
    "RewriteConfig",
    "RewriteError",
    "RewriteMatch",
    "RewriteResult",
    "Rewriter",
    "SingleName",
    "Symbol",
    "Token",
    "TokenType",
    "__version__",
    "call_frame",
    "ensym",
    "ensyms",
    "get_call_frame",
    "inject",
    "inject_target",
    "parse",
    "resolve",
    "rewrite",
    "rewrite_buffer",
    "rewrite_selection",
    "splice",
    "sym",
    "syms",
    "tokenize",
    "typed_as_name",
    "typed_as_name_lhs",
    "typed_list_as_name_list",
    "value_as_name",
    "value_list_as_name_list",
]
