"""Injection operators: where capture artifacts meet the quoting framework.

``inject`` is ``!!``, ``splice`` is ``!!!`` and ``inject_target`` is ``!!``
on the left of ``:=``. Each checks the artifact's shape; this is the point
where a single name used as a list (or the reverse) is detected.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from friendlyeval.capture.artifacts import NameList, SingleName
from friendlyeval.exceptions import InjectionError
from friendlyeval.symbols import InjectionMarker, Symbol, name_of


def inject(artifact: Any) -> Any:
    """Single injection (``!!``).

    Capture artifacts become a Symbol. Anything else is injected unchanged,
    as the framework injects arbitrary values.

    Raises:
        InjectionError: ``artifact`` is a NameList, or a SingleName tagged
            for assignment targets.
    """
    if isinstance(artifact, NameList):
        raise InjectionError(
            f"'!!' injects a single name but got a list of {len(artifact)}; use '!!!' to splice",
            marker=InjectionMarker.SINGLE.value,
            artifact=artifact,
        )
    if isinstance(artifact, SingleName):
        if artifact.for_assignment:
            raise InjectionError(
                f"'{artifact.variant.function_name}' is only valid as an assignment "
                "target: write '!!name := value'",
                marker=InjectionMarker.SINGLE.value,
                artifact=artifact,
            )
        return artifact.as_symbol()
    return artifact


def splice(artifact: Any) -> tuple[Any, ...]:
    """List injection (``!!!``): expand an ordered sequence of names in place.

    Raises:
        InjectionError: ``artifact`` is a SingleName, or not iterable.
    """
    if isinstance(artifact, SingleName):
        raise InjectionError(
            "'!!!' splices a list of names but got a single name; use '!!' to inject it",
            marker=InjectionMarker.SPLICE.value,
            artifact=artifact,
        )
    if isinstance(artifact, NameList):
        return artifact.as_symbols()
    if isinstance(artifact, (str, bytes)) or not isinstance(artifact, Iterable):
        raise InjectionError(
            f"'!!!' needs a list, got {type(artifact).__name__}",
            marker=InjectionMarker.SPLICE.value,
            artifact=artifact,
        )
    return tuple(artifact)


def inject_target(artifact: Any) -> Symbol:
    """Assignment-target injection (``!!name := value``).

    Accepts a SingleName (tagged or not), a Symbol, or a non-empty string.

    Raises:
        InjectionError: ``artifact`` is a NameList or not name-like.
    """
    if isinstance(artifact, NameList):
        raise InjectionError(
            "An assignment target takes a single name, not a list",
            marker=InjectionMarker.ASSIGN_TARGET.value,
            artifact=artifact,
        )
    if isinstance(artifact, SingleName):
        return artifact.as_symbol()
    name = name_of(artifact)
    if name is None:
        raise InjectionError(
            f"An assignment target must be a name, got {type(artifact).__name__}",
            marker=InjectionMarker.ASSIGN_TARGET.value,
            artifact=artifact,
        )
    return Symbol(name)


def inject_as(marker: InjectionMarker, artifact: Any) -> Any:
    """Apply the injection operator for ``marker``."""
    return _OPERATORS[marker](artifact)


_OPERATORS = {
    InjectionMarker.SINGLE: inject,
    InjectionMarker.SPLICE: splice,
    InjectionMarker.ASSIGN_TARGET: inject_target,
}
