"""The five capture operations.

Each one decides what a function argument means as a column name and wraps
it for injection:

    typed_as_name(p)            what the caller typed for p      -> SingleName
    typed_as_name_lhs(p)        same, for the left of ':='       -> SingleName
    typed_list_as_name_list(*p) what the caller typed, per param -> NameList
    value_as_name(v)            the value v, one name            -> SingleName
    value_list_as_name_list(vs) the values vs, one name each     -> NameList

Typed captures read the CallFrame of the enclosing call (passed as
``frame=`` or activated with ``call_frame()``). Value captures take the
value itself. None of them mutate anything.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from friendlyeval.capture.artifacts import CaptureVariant, NameList, SingleName
from friendlyeval.capture.frame import DOTS, CallFrame, Promise, get_call_frame
from friendlyeval.exceptions import NotAnArgumentError, NotNameLikeError, NotScalarNameLikeError
from friendlyeval.symbols import Symbol, name_of


def typed_as_name(param: str, *, frame: CallFrame | None = None) -> SingleName:
    """Capture the expression the caller typed for ``param``.

    Example:
        >>> frame = CallFrame.from_call("plot_col(mtcars, cyl)", ("dat", "col"))
        >>> typed_as_name("col", frame=frame).as_symbol()
        Symbol('cyl')

    Raises:
        NotAnArgumentError: ``param`` is not a formal parameter of the frame,
            or no frame is active.
    """
    promise = _active_frame(frame, param).promise(param)
    return _typed(promise, CaptureVariant.TYPED_NAME)


def typed_as_name_lhs(param: str, *, frame: CallFrame | None = None) -> SingleName:
    """Capture the expression the caller typed for ``param``, as an assignment target.

    The artifact is only accepted by ``inject_target()`` (``!!x := value``);
    single injection or splicing it fails at injection time.
    """
    promise = _active_frame(frame, param).promise(param)
    return _typed(promise, CaptureVariant.TYPED_NAME_AS_ASSIGNMENT_TARGET, for_assignment=True)


def typed_list_as_name_list(*params: str, frame: CallFrame | None = None) -> NameList:
    """Capture the expressions the caller typed for each of ``params``, in order.

    ``"..."`` expands to every argument collected by the frame's dots.
    With no params the result is an empty NameList.
    """
    variant = CaptureVariant.TYPED_LIST_AS_NAME_LIST
    if not params:
        return NameList(variant=variant)

    active = _active_frame(frame, params[0])
    names: list[SingleName] = []
    for param in params:
        promises = active.dots_promises() if param == DOTS else (active.promise(param),)
        names.extend(_typed(promise, variant) for promise in promises)
    return NameList(variant=variant, names=tuple(names))


def value_as_name(value: Any) -> SingleName:
    """Use ``value`` as a name.

    ``value`` must be one name-like scalar: a non-empty string, a Symbol,
    or a length-one list/tuple holding one.

    Example:
        >>> value_as_name("cyl").as_symbol()
        Symbol('cyl')

    Raises:
        NotScalarNameLikeError: ``value`` is not a single name-like item.
    """
    candidate = value
    if isinstance(value, (list, tuple)):
        if len(value) != 1:
            raise NotScalarNameLikeError(value)
        candidate = value[0]
    name = name_of(candidate)
    if name is None:
        raise NotScalarNameLikeError(value)
    return SingleName(variant=CaptureVariant.VALUE_AS_NAME, source=name, text=repr(name))


def value_list_as_name_list(values: Any) -> NameList:
    """Use each element of ``values`` as a name, preserving order.

    A bare string or Symbol counts as a one-element collection.

    Raises:
        NotNameLikeError: ``values`` is not a collection, or an element is
            not name-like (the error names its position).
    """
    if isinstance(values, (str, Symbol)):
        values = [values]
    if isinstance(values, Mapping) or not isinstance(values, Iterable):
        raise NotNameLikeError(values)

    names: list[SingleName] = []
    for index, item in enumerate(values):
        name = name_of(item)
        if name is None:
            raise NotNameLikeError(item, index=index)
        names.append(
            SingleName(
                variant=CaptureVariant.VALUE_LIST_AS_NAME_LIST, source=name, text=repr(name)
            )
        )
    return NameList(variant=CaptureVariant.VALUE_LIST_AS_NAME_LIST, names=tuple(names))


def _active_frame(frame: CallFrame | None, param: str) -> CallFrame:
    active = frame if frame is not None else get_call_frame()
    if active is None:
        raise NotAnArgumentError(param)
    return active


def _typed(
    promise: Promise, variant: CaptureVariant, *, for_assignment: bool = False
) -> SingleName:
    return SingleName(
        variant=variant,
        source=promise.expr,
        text=promise.text,
        env=promise.env,
        for_assignment=for_assignment,
    )
