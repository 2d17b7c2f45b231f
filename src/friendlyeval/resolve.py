"""Resolve the injection sites of parsed source against a call frame.

This evaluates what each ``!!``/``!!!`` site would inject when the
surrounding function is called with ``frame``, for sites whose operand is a
capture call or a native quoting call. Running it on source before and
after ``rewrite()`` gives the same values, which is how the rewrite is
checked for meaning preservation:

    >>> frame = CallFrame.from_call("f(mtcars, cyl)", ("dat", "col"))
    >>> resolve("select(dat, !!typed_as_name(col))", frame)[0].value
    Symbol('cyl')
    >>> resolve("select(dat, !!rlang::ensym(col))", frame)[0].value
    Symbol('cyl')

Other operands (``!!x``, ``!!rev(xs)``) are not evaluated and are skipped.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from friendlyeval.capture.artifacts import CaptureVariant
from friendlyeval.capture.frame import CallFrame, evaluate_literal
from friendlyeval.capture.operations import (
    typed_as_name,
    typed_as_name_lhs,
    typed_list_as_name_list,
    value_as_name,
    value_list_as_name_list,
)
from friendlyeval.exceptions import NotAnArgumentError, PromiseError
from friendlyeval.nodes import Call, Const, Expr, Name
from friendlyeval.parser import parse
from friendlyeval.quoting.injection import inject_as
from friendlyeval.quoting.native import ensym, ensyms, sym, syms
from friendlyeval.rewrite.config import DEFAULT_CONFIG, NATIVE_FORMS, RewriteConfig
from friendlyeval.rewrite.matcher import capture_variant
from friendlyeval.rewrite.visitor import InjectionSite, walk_sites


@dataclass(frozen=True, slots=True)
class ResolvedInjection:
    """What one injection site injects.

    Attributes:
        site: The injection site.
        callee: Callee of the operand call as written.
        value: A Symbol for ``!!`` and ``:=`` sites, a tuple of Symbols
            for ``!!!`` sites.
    """

    site: InjectionSite
    callee: str
    value: Any


_TYPED_CAPTURES: dict[CaptureVariant, Callable[..., Any]] = {
    CaptureVariant.TYPED_NAME: typed_as_name,
    CaptureVariant.TYPED_NAME_AS_ASSIGNMENT_TARGET: typed_as_name_lhs,
    CaptureVariant.TYPED_LIST_AS_NAME_LIST: typed_list_as_name_list,
}

_VALUE_CAPTURES: dict[CaptureVariant, Callable[[Any], Any]] = {
    CaptureVariant.VALUE_AS_NAME: value_as_name,
    CaptureVariant.VALUE_LIST_AS_NAME_LIST: value_list_as_name_list,
}

_NATIVE_TYPED: dict[str, Callable[..., Any]] = {"ensym": ensym, "ensyms": ensyms}
_NATIVE_VALUE: dict[str, Callable[[Any], Any]] = {"sym": sym, "syms": syms}


def resolve_injection(
    site: InjectionSite,
    frame: CallFrame,
    source: str,
    config: RewriteConfig | None = None,
) -> ResolvedInjection | None:
    """Evaluate one injection site.

    Returns None when the site's operand is neither a capture call nor a
    native quoting call. ``source`` is the text the site was parsed from.

    Raises:
        CaptureError: A capture precondition fails.
        InjectionError: The artifact's shape does not suit the marker.
    """
    config = config or DEFAULT_CONFIG
    call = site.node.operand
    if not isinstance(call, Call) or call.resolved_callee is None:
        return None
    callee = call.resolved_callee

    variant = capture_variant(call, config.capture_names())
    if variant is not None:
        if variant.typed:
            params = _param_names(call, frame, source)
            artifact = _TYPED_CAPTURES[variant](*params, frame=frame)
        else:
            artifact = _VALUE_CAPTURES[variant](_single_value(call, frame, source))
    else:
        form = _native_form(callee, config)
        if form in _NATIVE_TYPED:
            artifact = _NATIVE_TYPED[form](*_param_names(call, frame, source), frame=frame)
        elif form in _NATIVE_VALUE:
            artifact = _NATIVE_VALUE[form](_single_value(call, frame, source))
        else:
            return None

    return ResolvedInjection(site=site, callee=callee, value=inject_as(site.marker, artifact))


def resolve(
    text: str,
    frame: CallFrame,
    config: RewriteConfig | None = None,
) -> list[ResolvedInjection]:
    """Resolve every capture or native-form injection site in ``text``, in order.

    Raises:
        ParseError: ``text`` is not syntactically well-formed.
        CaptureError: A capture precondition fails.
        InjectionError: The artifact's shape does not suit the marker.
    """
    results = []
    for site in walk_sites(parse(text)):
        resolved = resolve_injection(site, frame, text, config)
        if resolved is not None:
            results.append(resolved)
    return results


def _native_form(callee: str, config: RewriteConfig) -> str | None:
    forms = set(NATIVE_FORMS.values())
    if callee in forms:
        return callee
    package, sep, name = callee.partition("::")
    if sep and package == config.namespace and name in forms:
        return name
    return None


def _param_names(call: Call, frame: CallFrame, source: str) -> list[str]:
    params = []
    for expr in _values(call):
        if isinstance(expr, Name):
            params.append(expr.name)
        elif isinstance(expr, Const) and isinstance(expr.value, str):
            params.append(expr.value)
        else:
            raise NotAnArgumentError(expr.text(source), frame.function, frame.formals)
    return params


def _single_value(call: Call, frame: CallFrame, source: str) -> Any:
    values = _values(call)
    if len(values) != 1:
        raise PromiseError(
            call.resolved_callee or "", call.text(source), "expected exactly one argument"
        )
    expr = values[0]
    if isinstance(expr, Name) and expr.name in frame.formals:
        return frame.value(expr.name)
    return evaluate_literal(expr, frame.env, param=expr.text(source), text=expr.text(source))


def _values(call: Call) -> list[Expr]:
    return [arg.value for arg in call.args if arg.value is not None]
