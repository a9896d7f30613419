"""Profile catalog: the shared configuration axis of a project.

Multi-project outputs (a Visual Studio solution, a CMake tree) need every
target to expose the same list of configurations. The catalog computes that
list once, as the sorted union of the built-in, project and target profile
names, and resolves effective settings for any (target, profile, platform,
architecture) combination through the fallback chain:

    target variants -> target -> project variants -> project -> built-in

Example:
    >>> catalog = ProfileCatalog(project)
    >>> catalog.names
    ('Custom', 'Debug', 'Release')
    >>> catalog.resolve("app", "Release", PlatformType.LINUX).optimize
    <Optimize.FULL: 'Full'>
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from nativegen.config.model import Profile, Profiles, Project
from nativegen.config.settings import DEFAULT_PROFILE_SETTINGS, Settings, combine_all
from nativegen.config.types import Architecture, PlatformType

logger = logging.getLogger(__name__)


def default_profiles() -> Profiles:
    """Built-in profiles, always available as the lowest-precedence layer."""
    return MappingProxyType(
        {
            name: (Profile(settings=settings),)
            for name, settings in DEFAULT_PROFILE_SETTINGS.items()
        }
    )


def profile_names(defaults: Profiles, project: Project) -> Tuple[str, ...]:
    """Sorted, deduplicated union of every declared profile name."""
    names = set(defaults)
    names.update(project.profiles)
    for target in project.targets.values():
        names.update(target.profiles)
    return tuple(sorted(names))


def applicable_variants(
    variants: Iterable[Profile],
    platform: Optional[PlatformType] = None,
    architecture: Optional[Architecture] = None,
) -> List[Profile]:
    """Variants that apply to a platform/architecture, most specific first.

    Variants of equal specificity keep their declaration order.
    """
    matching = [v for v in variants if v.applies_to(platform, architecture)]
    return sorted(matching, key=lambda v: -v.specificity)


@dataclass(frozen=True)
class ProfileCatalog:
    """Profile names and settings resolution for one project.

    Attributes:
        project: Parsed project tree
        defaults: Built-in profiles (Debug/Release when not given)
        names: Sorted union of every profile name, computed on creation
    """

    project: Project
    defaults: Optional[Profiles] = None
    names: Tuple[str, ...] = field(init=False)

    def __post_init__(self):
        if self.defaults is None:
            object.__setattr__(self, "defaults", default_profiles())
        object.__setattr__(self, "names", profile_names(self.defaults, self.project))
        logger.debug(f"Resolved profiles: {', '.join(self.names)}")

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __iter__(self):
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def declares(self, target_name: str, name: str) -> bool:
        """Check whether a profile is declared for a target, not just inherited.

        True when the built-ins, the project or the target itself name the
        profile; False when it is only visible because another target declared it.
        """
        target = self.project.targets[target_name]
        return (
            name in self.defaults
            or name in self.project.profiles
            or name in target.profiles
        )

    def declared_by(self, name: str) -> Tuple[str, ...]:
        """Names of the targets that declare a profile themselves."""
        return tuple(
            target_name
            for target_name, target in self.project.targets.items()
            if name in target.profiles
        )

    def layers(
        self,
        target_name: str,
        name: str,
        platform: Optional[PlatformType] = None,
        architecture: Optional[Architecture] = None,
    ) -> List[Settings]:
        """The fallback chain for one resolution, most specific first."""
        target = self.project.targets[target_name]
        chain: List[Settings] = []
        chain.extend(
            v.settings
            for v in applicable_variants(
                target.profiles.get(name, ()), platform, architecture
            )
        )
        chain.append(target.settings)
        chain.extend(
            v.settings
            for v in applicable_variants(
                self.project.profiles.get(name, ()), platform, architecture
            )
        )
        chain.append(self.project.settings)
        chain.extend(
            v.settings
            for v in applicable_variants(
                self.defaults.get(name, ()), platform, architecture
            )
        )
        return chain

    def resolve(
        self,
        target_name: str,
        name: str,
        platform: Optional[PlatformType] = None,
        architecture: Optional[Architecture] = None,
    ) -> Settings:
        """Effective settings of a target for a profile.

        Args:
            target_name: Declared target name
            name: Profile name (usually one of ``names``)
            platform: Concrete platform, or None when unspecified
            architecture: Concrete architecture, or None when unspecified

        Raises:
            KeyError: If target_name is not a declared target
        """
        return combine_all(*self.layers(target_name, name, platform, architecture))

    def project_settings(
        self,
        name: str,
        platform: Optional[PlatformType] = None,
        architecture: Optional[Architecture] = None,
    ) -> Settings:
        """Effective project-level settings for a profile (no target layer)."""
        chain = [
            v.settings
            for v in applicable_variants(
                self.project.profiles.get(name, ()), platform, architecture
            )
        ]
        chain.append(self.project.settings)
        chain.extend(
            v.settings
            for v in applicable_variants(
                self.defaults.get(name, ()), platform, architecture
            )
        )
        return combine_all(*chain)

    def to_dict(self) -> Mapping[str, Tuple[str, ...]]:
        return {name: self.declared_by(name) for name in self.names}
