"""Settings layers and the combinator that cascades them.

A Settings value is one layer of compiler/linker/preprocessor options attached
to a project, a target or a profile. Layers are combined with ``combine``:

    effective = combine(target_layer, project_layer)

Scalars take the first present value ("first value wins"). Sequences are
concatenated, primary first, duplicates kept, so link order is preserved.

Example:
    >>> debug = combine(Settings(defines=("APP",)), DEBUG_SETTINGS)
    >>> debug.optimize
    <Optimize.NONE: 'None'>
    >>> debug.defines
    ('APP',)
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from nativegen.config.types import CStandard, CXXStandard, Optimize


def _sequence():
    return field(default=(), metadata={"sequence": True})


@dataclass(frozen=True)
class Settings:
    """One layer of build options.

    Scalar fields are None when the layer does not set them. Sequence fields
    are tuples and are empty when unset.
    """

    # Compiler
    include_dirs: Tuple[str, ...] = _sequence()
    warning_level: Optional[int] = None
    warning_as_error: Optional[bool] = None

    # Optimizations
    optimize: Optional[Optimize] = None
    strict_aliasing: Optional[bool] = None
    omit_frame_pointer: Optional[bool] = None

    # Preprocessor
    defines: Tuple[str, ...] = _sequence()
    undefs: Tuple[str, ...] = _sequence()

    # Codegen
    enable_exceptions: Optional[bool] = None

    # Language
    enable_rtti: Optional[bool] = None
    c_standard: Optional[CStandard] = None
    cxx_standard: Optional[CXXStandard] = None

    # Linker
    link_incremental: Optional[bool] = None
    lib_dirs: Tuple[str, ...] = _sequence()
    libs: Tuple[str, ...] = _sequence()

    # Platform specific
    android_target_api_level: Optional[int] = None

    # Architecture specific
    arm_thumb_mode: Optional[bool] = None

    def is_empty(self) -> bool:
        """True when the layer sets nothing at all."""
        return self == EMPTY_SETTINGS

    def to_dict(self) -> Dict[str, Any]:
        """Convert the set fields to plain document values."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in SEQUENCE_FIELDS:
                if value:
                    result[f.name] = list(value)
            elif value is not None:
                result[f.name] = value.value if hasattr(value, "value") else value
        return result


SEQUENCE_FIELDS = tuple(f.name for f in fields(Settings) if f.metadata.get("sequence"))
SCALAR_FIELDS = tuple(
    f.name for f in fields(Settings) if not f.metadata.get("sequence")
)

EMPTY_SETTINGS = Settings()


def combine(primary: Settings, fallback: Settings) -> Settings:
    """Combine a more specific layer with a less specific fallback.

    Args:
        primary: The more specific layer
        fallback: The layer consulted for anything primary leaves unset

    Returns:
        New Settings; neither input is modified
    """
    values: Dict[str, Any] = {}
    for name in SCALAR_FIELDS:
        value = getattr(primary, name)
        values[name] = value if value is not None else getattr(fallback, name)
    for name in SEQUENCE_FIELDS:
        values[name] = tuple(getattr(primary, name)) + tuple(getattr(fallback, name))
    return Settings(**values)


def combine_all(*layers: Settings) -> Settings:
    """Fold a chain of layers, most specific first."""
    result = EMPTY_SETTINGS
    for layer in layers:
        result = combine(result, layer)
    return result


# ============================================================================
# Built-in profiles
# ============================================================================

DEBUG_SETTINGS = Settings(
    warning_level=3,
    warning_as_error=False,
    optimize=Optimize.NONE,
    strict_aliasing=False,
    omit_frame_pointer=False,
    link_incremental=True,
)

RELEASE_SETTINGS = Settings(
    warning_level=3,
    warning_as_error=True,
    optimize=Optimize.FULL,
    strict_aliasing=True,
    omit_frame_pointer=True,
    link_incremental=False,
)

DEFAULT_PROFILE_SETTINGS: Dict[str, Settings] = {
    "Debug": DEBUG_SETTINGS,
    "Release": RELEASE_SETTINGS,
}
