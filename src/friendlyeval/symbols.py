"""Quoted-name representation and injection markers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class InjectionMarker(Enum):
    """Syntax that replaces itself with the quoted value on its right."""

    SINGLE = "!!"
    SPLICE = "!!!"
    ASSIGN_TARGET = ":="

    @property
    def is_list(self) -> bool:
        return self is InjectionMarker.SPLICE


@dataclass(frozen=True, slots=True)
class Symbol:
    """A quoted name, as the quoting framework hands it to a data verb."""

    name: str

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Symbol({self.name!r})"


def name_of(value: Any) -> str | None:
    """Return the name ``value`` stands for, or None if it is not name-like.

    Name-like means a non-empty ``str`` or a Symbol.
    """
    if isinstance(value, Symbol):
        return value.name
    if isinstance(value, str) and value:
        return value
    return None
