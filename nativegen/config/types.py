"""Closed value sets used by project documents.

Platform types and architectures carry a wildcard member (``ANY``) and target
types an ``AUTO`` member. Wildcards are never written in a document: they mean
"not chosen" and are what a field holds when the key is absent.
"""

from enum import Enum
from typing import Type, TypeVar

E = TypeVar("E", bound="ConfigEnum")


class ConfigEnum(Enum):
    """Enum whose members are spelled in documents by their value."""

    @property
    def is_wildcard(self) -> bool:
        return False

    @classmethod
    def parse(cls: Type[E], value) -> E:
        """Look up a member by its document spelling.

        Raises:
            ValueError: If value names no concrete member
        """
        for member in cls:
            if member.value == value and not member.is_wildcard:
                return member
        choices = [m.value for m in cls if not m.is_wildcard]
        raise ValueError(f"invalid value {value!r} (expected one of {choices})")

    def __str__(self) -> str:
        return str(self.value)


class Architecture(ConfigEnum):
    """CPU architectures."""

    ANY = "Any"
    X86 = "X86"
    X64 = "X64"
    ARM = "ARM"
    ARM64 = "ARM64"

    @property
    def is_wildcard(self) -> bool:
        return self is Architecture.ANY


class PlatformType(ConfigEnum):
    """Deployment platforms."""

    ANY = "Any"
    WINDOWS = "Windows"
    LINUX = "Linux"
    MACOS = "MacOS"
    IOS = "IOS"
    TVOS = "TVOS"
    WATCHOS = "WatchOS"
    ANDROID = "Android"
    HTML5 = "HTML5"

    @property
    def is_wildcard(self) -> bool:
        return self is PlatformType.ANY


class TargetType(ConfigEnum):
    """Kinds of targets."""

    # Detect the target type from source file names.
    AUTO = "Auto"
    # Doesn't participate in any build; holds files only.
    NONE = "None"
    CUSTOM = "Custom"
    CONSOLE = "Console"
    # Only differs from Console on macOS and Windows.
    APPLICATION = "Application"
    STATIC_LIBRARY = "StaticLibrary"
    SHARED_LIBRARY = "SharedLibrary"

    @property
    def is_wildcard(self) -> bool:
        return self is TargetType.AUTO

    @property
    def is_buildable(self) -> bool:
        return self not in (TargetType.AUTO, TargetType.NONE, TargetType.CUSTOM)


class Optimize(ConfigEnum):
    NONE = "None"
    SIZE = "Size"
    SPEED = "Speed"
    FULL = "Full"


class CStandard(ConfigEnum):
    C89 = 89
    C99 = 99
    C11 = 11


class CXXStandard(ConfigEnum):
    CXX03 = 3
    CXX11 = 11
    CXX14 = 14
    CXX17 = 17
    CXX20 = 20


CONCRETE_PLATFORMS = tuple(p for p in PlatformType if not p.is_wildcard)
CONCRETE_ARCHITECTURES = tuple(a for a in Architecture if not a.is_wildcard)
