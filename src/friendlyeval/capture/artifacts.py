"""Capture variants and the quoted-name artifacts they produce.

A capture produces exactly one of two shapes:

- SingleName: one name, from a typed expression or a coerced value.
- NameList: an ordered tuple of SingleName.

The shapes are distinct types so a single name can never be spliced and a
list can never be single-injected by accident. ``for_assignment`` is an
orthogonal tag on SingleName: it marks names that are only legal as the
target of ``:=``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from friendlyeval.exceptions import NotNameLikeError
from friendlyeval.nodes import Const, Expr, Name
from friendlyeval.symbols import Symbol

if TYPE_CHECKING:
    from friendlyeval.capture.frame import Environment


class Arity(Enum):
    SINGLE = "single"
    LIST = "list"


class CaptureVariant(Enum):
    """The five ways an argument can be turned into quoted names.

    The value of each member is the name of the capture function callers
    write, so ``CaptureVariant("value_as_name")`` looks a variant up.
    """

    TYPED_NAME = "typed_as_name"
    TYPED_NAME_AS_ASSIGNMENT_TARGET = "typed_as_name_lhs"
    TYPED_LIST_AS_NAME_LIST = "typed_list_as_name_list"
    VALUE_AS_NAME = "value_as_name"
    VALUE_LIST_AS_NAME_LIST = "value_list_as_name_list"

    @property
    def function_name(self) -> str:
        return self.value

    @property
    def arity(self) -> Arity:
        return _ARITY[self]

    @property
    def typed(self) -> bool:
        """True when the caller's typed expression is captured, not its value."""
        return self in _TYPED

    @property
    def for_assignment(self) -> bool:
        return self is CaptureVariant.TYPED_NAME_AS_ASSIGNMENT_TARGET


_ARITY: dict[CaptureVariant, Arity] = {
    CaptureVariant.TYPED_NAME: Arity.SINGLE,
    CaptureVariant.TYPED_NAME_AS_ASSIGNMENT_TARGET: Arity.SINGLE,
    CaptureVariant.TYPED_LIST_AS_NAME_LIST: Arity.LIST,
    CaptureVariant.VALUE_AS_NAME: Arity.SINGLE,
    CaptureVariant.VALUE_LIST_AS_NAME_LIST: Arity.LIST,
}

_TYPED = frozenset(
    {
        CaptureVariant.TYPED_NAME,
        CaptureVariant.TYPED_NAME_AS_ASSIGNMENT_TARGET,
        CaptureVariant.TYPED_LIST_AS_NAME_LIST,
    }
)


@dataclass(frozen=True, slots=True)
class QuotedName:
    """Base class for capture artifacts."""

    variant: CaptureVariant


@dataclass(frozen=True, slots=True)
class SingleName(QuotedName):
    """One captured name.

    Attributes:
        source: The unevaluated expression the caller typed (typed captures)
            or the coerced text value (value captures).
        text: Source text of the expression, for diagnostics.
        env: Environment the expression was captured in (typed captures).
        for_assignment: Only legal as an assignment target.
    """

    source: Expr | str
    text: str = ""
    env: Environment | None = None
    for_assignment: bool = False

    def as_symbol(self) -> Symbol:
        """Convert to the quoting framework's Symbol.

        A typed capture only names something if the caller typed a bare
        symbol or a string literal; anything else fails here, at inspection
        time, never when the capture was taken.

        Raises:
            NotNameLikeError: The captured expression is not a symbol or string.
        """
        source = self.source
        if isinstance(source, str):
            return Symbol(source)
        if isinstance(source, Name):
            return Symbol(source.name)
        if isinstance(source, Const) and isinstance(source.value, str) and source.value:
            return Symbol(source.value)
        raise NotNameLikeError(self.text or source)


@dataclass(frozen=True, slots=True)
class NameList(QuotedName):
    """An ordered list of captured names."""

    names: tuple[SingleName, ...] = ()

    def __iter__(self) -> Iterator[SingleName]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def as_symbols(self) -> tuple[Symbol, ...]:
        return tuple(name.as_symbol() for name in self.names)
