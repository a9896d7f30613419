"""Immutable project tree.

The tree is built once by ``nativegen.config.parser`` and never mutated. All
mappings are read-only views and all sequences are tuples; mapping order is the
order of declaration in the document, which fixes target indices.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from nativegen.config.settings import EMPTY_SETTINGS, Settings
from nativegen.config.types import Architecture, PlatformType, TargetType
from nativegen.core.exceptions import WildcardValueError


def _empty_mapping():
    return field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class TargetFilter:
    """Platform and architecture allow-lists.

    An empty list allows every concrete value. Wildcards are never members.
    """

    platforms: Tuple[PlatformType, ...] = ()
    architectures: Tuple[Architecture, ...] = ()

    def matches_platform(self, platform: PlatformType) -> bool:
        """Check whether a concrete platform is allowed.

        Raises:
            WildcardValueError: If called with PlatformType.ANY
        """
        if platform.is_wildcard:
            raise WildcardValueError("matches_platform requires a concrete platform")
        if not self.platforms:
            return True
        return platform in self.platforms

    def matches_architecture(self, architecture: Architecture) -> bool:
        """Check whether a concrete architecture is allowed.

        Raises:
            WildcardValueError: If called with Architecture.ANY
        """
        if architecture.is_wildcard:
            raise WildcardValueError(
                "matches_architecture requires a concrete architecture"
            )
        if not self.architectures:
            return True
        return architecture in self.architectures


@dataclass(frozen=True)
class Profile:
    """One variant of a named build configuration."""

    architecture: Architecture = Architecture.ANY
    platform: PlatformType = PlatformType.ANY
    settings: Settings = EMPTY_SETTINGS

    @property
    def specificity(self) -> int:
        """Number of non-wildcard selectors (0-2)."""
        return int(not self.architecture.is_wildcard) + int(
            not self.platform.is_wildcard
        )

    def applies_to(self, platform=None, architecture=None) -> bool:
        """Check whether this variant applies to a requested platform/architecture.

        A None request means "unspecified": only wildcard selectors apply.
        """
        if not self.platform.is_wildcard and self.platform is not platform:
            return False
        if not self.architecture.is_wildcard and self.architecture is not architecture:
            return False
        return True


Profiles = Mapping[str, Tuple[Profile, ...]]


@dataclass(frozen=True)
class Target:
    """A named buildable (or file-only) unit."""

    name: str
    target_type: TargetType = TargetType.AUTO
    sources: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    assets: Union[str, None] = None
    depends: Tuple[str, ...] = ()
    extends: Tuple[str, ...] = ()
    filter: TargetFilter = TargetFilter()
    settings: Settings = EMPTY_SETTINGS
    profiles: Profiles = _empty_mapping()
    exclude: Mapping[str, Tuple[PlatformType, ...]] = _empty_mapping()

    def match_file(self, path, platform: PlatformType) -> bool:
        """Check whether a file takes part in the build for a platform.

        Files below a directory listed in ``exclude`` are dropped for the
        platforms listed there.
        """
        file_path = PurePosixPath(str(path).replace("\\", "/"))
        for directory, platforms in self.exclude.items():
            if platform not in platforms:
                continue
            excluded = PurePosixPath(directory.replace("\\", "/").rstrip("/"))
            if file_path == excluded or excluded in file_path.parents:
                return False
        return True


@dataclass(frozen=True)
class VisualStudioSettings:
    pass


@dataclass(frozen=True)
class XcodeSettings:
    group_by_target: bool = True


@dataclass(frozen=True)
class Project:
    """Complete project description."""

    name: str
    version: str
    description: str = ""
    min_version: str = ""
    filter: TargetFilter = TargetFilter()
    settings: Settings = EMPTY_SETTINGS
    visual_studio: VisualStudioSettings = VisualStudioSettings()
    xcode: XcodeSettings = XcodeSettings()
    profiles: Profiles = _empty_mapping()
    targets: Mapping[str, Target] = _empty_mapping()

    @property
    def target_names(self) -> Tuple[str, ...]:
        return tuple(self.targets)

    def target_at(self, index: int) -> Target:
        return self.targets[self.target_names[index]]
