"""Resolved context handed to every output generator.

The context combines the immutable project tree, the profile catalog, the
extension graph and the per-target file lists into one read-only object. File
lists are indexed by target declaration order, like the graph's adjacency
tables; every index-taking helper below uses that same order.

Nothing on the context is mutated after ``assemble_context`` returns, so
several generators may consume it at once.

Example:
    >>> ctx = assemble_context(project, input_dir, build_dir, sources=...)
    >>> app = ctx.target_index("app")
    >>> ctx.composed_strings(app, "defines")
    ('CORE', 'APP')
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple

from nativegen.config.graph import ExtensionGraph
from nativegen.config.model import Profiles, Project, Target
from nativegen.config.profiles import ProfileCatalog
from nativegen.config.settings import Settings
from nativegen.config.types import (
    CONCRETE_ARCHITECTURES,
    CONCRETE_PLATFORMS,
    Architecture,
    PlatformType,
    TargetType,
)
from nativegen.core.filesystem import FileInfo, TargetFiles, relative_path

logger = logging.getLogger(__name__)

AllFiles = Tuple[TargetFiles, ...]

# Settings sequences an extending target takes from the targets it extends.
EXTENDED_FIELDS = ("include_dirs", "defines", "lib_dirs", "libs")

COMPILED_EXTENSIONS = {"c", "cc", "cpp", "cxx", "m", "mm"}
HEADER_EXTENSIONS = {"h", "hh", "hpp", "hxx", "inl"}


@dataclass(frozen=True)
class Env:
    """Compiler flags and signing identity taken from the environment."""

    cflags: str = ""
    cxxflags: str = ""
    ldflags: str = ""
    # Apple development team ID written to Xcode targets
    xcode_team: str = ""

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "Env":
        environ = os.environ if environ is None else environ
        return cls(
            cflags=environ.get("CFLAGS", ""),
            cxxflags=environ.get("CXXFLAGS", ""),
            ldflags=environ.get("LDFLAGS", ""),
            xcode_team=environ.get("NATIVEGEN_XCODE_TEAM", ""),
        )


@dataclass(frozen=True)
class ResolvedContext:
    """Fully assembled, read-only model of a project run."""

    project: Project
    input_dir: Path
    build_dir: Path
    catalog: ProfileCatalog
    graph: ExtensionGraph
    sources: AllFiles
    resources: AllFiles
    assets: AllFiles
    metafiles: TargetFiles = ()
    env: Env = field(default_factory=Env)

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    @property
    def profiles(self) -> Tuple[str, ...]:
        """Profile names every target exposes, sorted."""
        return self.catalog.names

    @property
    def defaults(self) -> Profiles:
        return self.catalog.defaults

    @property
    def extends(self):
        return self.graph.extends

    @property
    def extended(self):
        return self.graph.extended

    @property
    def target_names(self) -> Tuple[str, ...]:
        return self.project.target_names

    @property
    def build_rel(self) -> Path:
        """Build folder relative to the input folder."""
        return relative_path(self.build_dir, self.input_dir)

    @property
    def input_rel(self) -> Path:
        """Input folder relative to the build folder."""
        return relative_path(self.input_dir, self.build_dir)

    def target(self, index: int) -> Target:
        return self.project.target_at(index)

    def target_index(self, name: str) -> int:
        """
        Index of a target in declaration order.

        Raises:
            KeyError: If no target has that name
        """
        try:
            return self.target_names.index(name)
        except ValueError:
            raise KeyError(name) from None

    def target_type(self, index: int) -> TargetType:
        """
        Declared target type, or the type inferred from its sources when Auto.

        Inference: no compilable source means None, a ``main.*`` source means
        Console, anything else is a StaticLibrary.
        """
        declared = self.target(index).target_type
        if not declared.is_wildcard:
            return declared

        compiled = [
            f for f in self.composed_sources(index)
            if f.is_file and f.extension.lower() in COMPILED_EXTENSIONS
        ]
        if not compiled:
            return TargetType.NONE
        if any(f.path.stem == "main" for f in compiled):
            return TargetType.CONSOLE
        return TargetType.STATIC_LIBRARY

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def is_buildable(
        self,
        index: int,
        platform: PlatformType,
        architecture: Optional[Architecture] = None,
    ) -> bool:
        """Whether both the project and target filters accept a combination."""
        target_filter = self.target(index).filter
        if not (
            self.project.filter.matches_platform(platform)
            and target_filter.matches_platform(platform)
        ):
            return False
        if architecture is None:
            return True
        return self.project.filter.matches_architecture(
            architecture
        ) and target_filter.matches_architecture(architecture)

    def buildable_platforms(self, index: int) -> Tuple[PlatformType, ...]:
        return tuple(p for p in CONCRETE_PLATFORMS if self.is_buildable(index, p))

    def project_platforms(self) -> Tuple[PlatformType, ...]:
        """Platforms on which at least one target is buildable."""
        return tuple(
            p
            for p in CONCRETE_PLATFORMS
            if any(self.is_buildable(i, p) for i in range(len(self.target_names)))
        )

    def architectures_for(
        self, index: int, supported: Sequence[Architecture] = CONCRETE_ARCHITECTURES
    ) -> Tuple[Architecture, ...]:
        """Architectures from ``supported`` that both filters accept."""
        target_filter = self.target(index).filter
        return tuple(
            a
            for a in supported
            if self.project.filter.matches_architecture(a)
            and target_filter.matches_architecture(a)
        )

    def match_file(self, index: int, path, platform: PlatformType) -> bool:
        return self.target(index).match_file(path, platform)

    # ------------------------------------------------------------------
    # Settings and files
    # ------------------------------------------------------------------

    def settings_for(
        self,
        index: int,
        profile: str,
        platform: Optional[PlatformType] = None,
        architecture: Optional[Architecture] = None,
    ) -> Settings:
        """Effective settings of one target (extends not folded in)."""
        return self.catalog.resolve(
            self.target_names[index], profile, platform, architecture
        )

    def composed_sources(self, index: int) -> TargetFiles:
        """Sources of the extended targets, in declared order, then the target's."""
        return self.graph.composed(index, self.sources)

    def composed_strings(self, index: int, field_name: str) -> Tuple[str, ...]:
        """
        One-level concatenation of a target's raw settings sequence.

        Args:
            index: Target index
            field_name: One of include_dirs, defines, lib_dirs, libs

        Raises:
            ValueError: If field_name is not a composable field
        """
        if field_name not in EXTENDED_FIELDS:
            raise ValueError(
                f"{field_name} is not composed across extends "
                f"(expected one of {EXTENDED_FIELDS})"
            )
        per_target = [
            getattr(self.target(i).settings, field_name)
            for i in range(len(self.target_names))
        ]
        return self.graph.composed(index, per_target)

    def composed_settings(
        self,
        index: int,
        profile: str,
        platform: Optional[PlatformType] = None,
        architecture: Optional[Architecture] = None,
    ) -> Settings:
        """
        Effective settings with the extended targets' sequences folded in.

        Scalars come from the target's own resolution. For include dirs,
        defines, lib dirs and libs, the raw values of each extended target
        come first, in declared order, followed by the resolved values.
        """
        own = self.settings_for(index, profile, platform, architecture)
        values: Dict[str, Tuple[str, ...]] = {}
        for name in EXTENDED_FIELDS:
            inherited = []
            for extend_index in self.extends[index]:
                inherited.extend(getattr(self.target(extend_index).settings, name))
            values[name] = tuple(inherited) + getattr(own, name)
        return replace(own, **values)


def assemble_context(
    project: Project,
    input_dir: Path,
    build_dir: Path,
    sources: Sequence[TargetFiles],
    resources: Optional[Sequence[TargetFiles]] = None,
    assets: Optional[Sequence[TargetFiles]] = None,
    metafiles: Sequence[FileInfo] = (),
    env: Optional[Env] = None,
    defaults: Optional[Profiles] = None,
) -> ResolvedContext:
    """
    Build the resolved context from a parsed project and its resolved files.

    Args:
        project: Parsed project tree
        input_dir: Project folder
        build_dir: Output folder
        sources: Per-target source files, in target declaration order
        resources: Per-target resource files (empty when omitted)
        assets: Per-target asset files (empty when omitted)
        metafiles: Files at the project root not owned by any target
        env: Environment flags
        defaults: Built-in profiles (defaults to Debug/Release)

    Returns:
        Read-only resolved context

    Raises:
        TargetReferenceError: If an extends name is unknown or cyclic
        ValueError: If a file list does not have one entry per target
    """
    count = len(project.targets)
    empty = tuple(() for _ in range(count))
    resources = empty if resources is None else resources
    assets = empty if assets is None else assets

    for label, files in (("sources", sources), ("resources", resources), ("assets", assets)):
        if len(files) != count:
            raise ValueError(
                f"Expected {count} {label} list(s), one per target, got {len(files)}"
            )

    graph = ExtensionGraph.from_project(project)
    catalog = ProfileCatalog(project, defaults)

    ctx = ResolvedContext(
        project=project,
        input_dir=Path(input_dir),
        build_dir=Path(build_dir),
        catalog=catalog,
        graph=graph,
        sources=tuple(tuple(f) for f in sources),
        resources=tuple(tuple(f) for f in resources),
        assets=tuple(tuple(f) for f in assets),
        metafiles=tuple(metafiles),
        env=env or Env(),
    )
    logger.debug(
        f"Assembled context: {count} target(s), profiles {', '.join(ctx.profiles)}"
    )
    return ctx
