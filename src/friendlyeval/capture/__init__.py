"""Capture layer: classify an argument and wrap it as quoted names.

Pure functions, no dependency on the rewrite engine.
"""

from friendlyeval.capture.artifacts import (
    Arity,
    CaptureVariant,
    NameList,
    QuotedName,
    SingleName,
)
from friendlyeval.capture.frame import (
    DOTS,
    CallFrame,
    Environment,
    Promise,
    call_frame,
    evaluate_literal,
    get_call_frame,
)
from friendlyeval.capture.operations import (
    typed_as_name,
    typed_as_name_lhs,
    typed_list_as_name_list,
    value_as_name,
    value_list_as_name_list,
)

__all__ = [
    "DOTS",
    "Arity",
    "CallFrame",
    "CaptureVariant",
    "Environment",
    "NameList",
    "Promise",
    "QuotedName",
    "SingleName",
    "call_frame",
    "evaluate_literal",
    "get_call_frame",
    "typed_as_name",
    "typed_as_name_lhs",
    "typed_list_as_name_list",
    "value_as_name",
    "value_list_as_name_list",
]
