"""
Centralized exception hierarchy for nativegen.

Every failure raised while loading, resolving or generating a project derives
from NativeGenError so the CLI can report it as a single diagnostic line.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class NativeGenError(Exception):
    """Base exception for all nativegen errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(NativeGenError):
    """Malformed configuration document (unknown keys, wrong types, bad values)."""

    pass


class EmptyProjectError(ConfigError):
    """Raised when a project declares no targets."""

    def __init__(self, message: str = "No targets in project configuration"):
        super().__init__(message)


class VersionGateError(NativeGenError):
    """Raised when a project requires a newer nativegen than the one running."""

    def __init__(self, expected: str, current: str, reason: str = ""):
        self.expected = expected
        self.current = current
        msg = reason or (
            f"Project does not support this version: "
            f"expected {expected} but running {current}"
        )
        super().__init__(msg)


class TargetReferenceError(NativeGenError):
    """Raised when a target extends an unknown target or an extends cycle exists."""

    pass


class WildcardValueError(NativeGenError, ValueError):
    """Raised when a wildcard (Any/Auto) is used where a concrete value is required."""

    pass


# ============================================================================
# Resolution and Output Exceptions
# ============================================================================


class FileResolutionError(NativeGenError):
    """Raised when a target's file patterns cannot be resolved."""

    pass


class GeneratorError(NativeGenError):
    """Raised when an output generator fails to write its project files."""

    pass


class GeneratorNotFoundError(GeneratorError):
    """Raised when an unknown generator name is requested."""

    def __init__(self, name: str, available=()):
        self.name = name
        msg = f"Unknown generator: {name}"
        if available:
            msg += f" (available: {', '.join(available)})"
        super().__init__(msg)
