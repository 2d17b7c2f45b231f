"""Native quoting forms the rewrite engine emits.

These mirror ``rlang::sym``, ``rlang::syms``, ``rlang::ensym`` and
``rlang::ensyms``: they return Symbols directly, with no friendly artifact
in between. ``rewrite()`` output calls these where the input called the
capture operations.
"""

from __future__ import annotations

from typing import Any

from friendlyeval.capture.frame import CallFrame
from friendlyeval.capture.operations import (
    typed_as_name,
    typed_list_as_name_list,
    value_as_name,
    value_list_as_name_list,
)
from friendlyeval.symbols import Symbol


def sym(value: Any) -> Symbol:
    """Turn one name-like value into a Symbol (``rlang::sym``)."""
    return value_as_name(value).as_symbol()


def syms(values: Any) -> tuple[Symbol, ...]:
    """Turn each name-like value into a Symbol (``rlang::syms``)."""
    return value_list_as_name_list(values).as_symbols()


def ensym(param: str, *, frame: CallFrame | None = None) -> Symbol:
    """Symbol for what the caller typed for ``param`` (``rlang::ensym``).

    Unlike the friendly capture, a non-symbol argument fails immediately.
    """
    return typed_as_name(param, frame=frame).as_symbol()


def ensyms(*params: str, frame: CallFrame | None = None) -> tuple[Symbol, ...]:
    """Symbols for what the caller typed for each of ``params`` (``rlang::ensyms``)."""
    return typed_list_as_name_list(*params, frame=frame).as_symbols()
