"""Configuration for the rewrite engine.

Controls which callee names count as capture calls and how the native
forms are spelled in the output.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from friendlyeval.capture.artifacts import CaptureVariant

# Native quoting forms, one per capture variant.
NATIVE_FORMS: Mapping[CaptureVariant, str] = MappingProxyType(
    {
        CaptureVariant.TYPED_NAME: "ensym",
        CaptureVariant.TYPED_NAME_AS_ASSIGNMENT_TARGET: "ensym",
        CaptureVariant.TYPED_LIST_AS_NAME_LIST: "ensyms",
        CaptureVariant.VALUE_AS_NAME: "sym",
        CaptureVariant.VALUE_LIST_AS_NAME_LIST: "syms",
    }
)

# Later, column-flavoured names for the same captures.
TREAT_ALIASES: Mapping[str, CaptureVariant] = MappingProxyType(
    {
        "treat_input_as_col": CaptureVariant.TYPED_NAME,
        "treat_inputs_as_cols": CaptureVariant.TYPED_LIST_AS_NAME_LIST,
        "treat_string_as_col": CaptureVariant.VALUE_AS_NAME,
        "treat_strings_as_cols": CaptureVariant.VALUE_LIST_AS_NAME_LIST,
    }
)


@dataclass(frozen=True, slots=True)
class RewriteConfig:
    """Rewrite configuration.

    Attributes:
        namespace: Package the native forms live in.
        qualify: Emit ``namespace::ensym`` rather than bare ``ensym``.
        capture_namespace: Package prefix under which capture calls are also
            recognised (``friendlyeval::typed_as_name``). Empty disables
            qualified matching.
        extra_capture_names: Additional callee names mapped to a variant.

    Example:
        >>> config = RewriteConfig(qualify=False, extra_capture_names=TREAT_ALIASES)
        >>> config.native_callee(CaptureVariant.VALUE_AS_NAME)
        'sym'

    """

    namespace: str = "rlang"
    qualify: bool = True
    capture_namespace: str = "friendlyeval"
    extra_capture_names: Mapping[str, CaptureVariant] = field(default_factory=dict)

    def native_callee(self, variant: CaptureVariant) -> str:
        """Spelling of the native form replacing ``variant``'s callee."""
        form = NATIVE_FORMS[variant]
        if self.qualify and self.namespace:
            return f"{self.namespace}::{form}"
        return form

    def capture_names(self) -> dict[str, CaptureVariant]:
        """Every callee spelling that is matched as a capture call."""
        base = {variant.function_name: variant for variant in CaptureVariant}
        base.update(self.extra_capture_names)
        names = dict(base)
        if self.capture_namespace:
            for name, variant in base.items():
                names[f"{self.capture_namespace}::{name}"] = variant
                names[f"{self.capture_namespace}:::{name}"] = variant
        return names


# Default configuration
DEFAULT_CONFIG = RewriteConfig()
