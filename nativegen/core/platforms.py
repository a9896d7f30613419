"""Platform registry.

Each deployment platform reports its identity and the architectures it can
target. The front-end uses the registry to validate the platform and
architecture filters a project declares; the resolution core never consults it.

Supported architectures:
- Windows, Linux: X86, X64
- MacOS: X64
- IOS: ARM, ARM64
- TVOS, WatchOS: ARM64
- Android: ARM, ARM64, X86
- HTML5: none (architecture independent)
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from nativegen.config.types import Architecture, PlatformType
from nativegen.core.exceptions import WildcardValueError

A = Architecture

PLATFORM_ARCHITECTURES: Dict[PlatformType, Tuple[Architecture, ...]] = {
    PlatformType.WINDOWS: (A.X86, A.X64),
    PlatformType.LINUX: (A.X86, A.X64),
    PlatformType.MACOS: (A.X64,),
    PlatformType.IOS: (A.ARM, A.ARM64),
    PlatformType.TVOS: (A.ARM64,),
    PlatformType.WATCHOS: (A.ARM64,),
    PlatformType.ANDROID: (A.ARM, A.ARM64, A.X86),
    PlatformType.HTML5: (),
}


@dataclass(frozen=True)
class Platform:
    """A deployment platform and the architectures it supports."""

    platform_type: PlatformType
    architectures: Tuple[Architecture, ...]

    @property
    def name(self) -> str:
        return self.platform_type.value

    def supports_architecture(self, architecture: Architecture) -> bool:
        """
        Check whether the platform can target an architecture.

        Raises:
            WildcardValueError: If called with Architecture.ANY
        """
        if architecture.is_wildcard:
            raise WildcardValueError(
                "supports_architecture requires a concrete architecture"
            )
        return architecture in self.architectures


PLATFORMS: Tuple[Platform, ...] = tuple(
    Platform(platform_type=p, architectures=archs)
    for p, archs in PLATFORM_ARCHITECTURES.items()
)


def get_platform(platform_type: PlatformType) -> Platform:
    """
    Look up a platform by type.

    Raises:
        WildcardValueError: If called with PlatformType.ANY
    """
    if platform_type.is_wildcard:
        raise WildcardValueError("get_platform requires a concrete platform")
    for platform in PLATFORMS:
        if platform.platform_type is platform_type:
            return platform
    raise KeyError(platform_type)
