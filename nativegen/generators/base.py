"""
Output generator interface for nativegen.

A generator turns a resolved context into the project files of one build
system. Generators only read the context; identifiers they need (project
GUIDs, filter GUIDs) come from an ``Identifiers`` allocator passed to ``run``.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, FrozenSet, List, Tuple

from nativegen.config.types import PlatformType
from nativegen.context import ResolvedContext
from nativegen.core.exceptions import GeneratorError, WildcardValueError
from nativegen.core.filesystem import FileInfo, atomic_write

logger = logging.getLogger(__name__)

GENERATED_HEADER = "Generated by nativegen - DO NOT EDIT"

# A rendered file: destination path and complete content.
Output = Tuple[Path, str]


class Identifiers:
    """
    Deterministic identifier allocator.

    The same key always yields the same GUID for a given project name, so
    regenerating a project keeps the identifiers IDEs store in user settings.

    Example:
        >>> ids = Identifiers("demo")
        >>> ids.guid("vs", "project", "app") == ids.guid("vs", "project", "app")
        True
    """

    def __init__(self, project_name: str):
        self.namespace = uuid.uuid5(uuid.NAMESPACE_URL, f"nativegen:{project_name}")
        self.issued: Dict[Tuple[str, ...], str] = {}

    def guid(self, *key: str) -> str:
        """Uppercase GUID for a key (without braces)."""
        if key not in self.issued:
            value = uuid.uuid5(self.namespace, "/".join(key))
            self.issued[key] = str(value).upper()
        return self.issued[key]

    def object_id(self, *key: str) -> str:
        """24 hex digit identifier, the form Xcode uses for project objects."""
        return self.guid(*key).replace("-", "")[:24]

    def __len__(self) -> int:
        return len(self.issued)


class Generator(ABC):
    """
    Abstract base class for output generators.

    Subclasses set ``name`` and ``platforms`` and implement ``render``.
    """

    name: str = ""
    platforms: FrozenSet[PlatformType] = frozenset()

    def supports_platform(self, platform: PlatformType) -> bool:
        """
        Check whether this generator produces projects for a platform.

        Raises:
            WildcardValueError: If called with PlatformType.ANY
        """
        if platform.is_wildcard:
            raise WildcardValueError("supports_platform requires a concrete platform")
        return platform in self.platforms

    def applies_to(self, ctx: ResolvedContext) -> bool:
        """True when any target of the project is buildable on a supported platform."""
        return any(self.supports_platform(p) for p in ctx.project_platforms())

    @abstractmethod
    def render(self, ctx: ResolvedContext, ids: Identifiers) -> List[Output]:
        """
        Produce this generator's project files without touching the disk.

        Args:
            ctx: Resolved context (read-only)
            ids: Identifier allocator for this run

        Returns:
            (path under ``ctx.build_dir``, content) pairs, in write order
        """
        pass

    def run(self, ctx: ResolvedContext, ids: Identifiers) -> List[Path]:
        """
        Render and write this generator's project files.

        Raises:
            GeneratorError: If a file cannot be written
        """
        return self.write_all(self.render(ctx, ids))

    def write_all(self, outputs: List[Output]) -> List[Path]:
        return [self.write(path, content) for path, content in outputs]

    def write(self, path: Path, content: str) -> Path:
        """Write one output file atomically."""
        try:
            atomic_write(path, content)
        except OSError as e:
            raise GeneratorError(f"{self.name}: cannot write {path}: {e}") from e
        logger.info(f"Generated {path}")
        return path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


def generated_targets(ctx: ResolvedContext, platform: PlatformType) -> List[int]:
    """Indices of the targets that produce a build artifact on a platform."""
    return [
        i
        for i in range(len(ctx.target_names))
        if ctx.is_buildable(i, platform) and ctx.target_type(i).is_buildable
    ]


def owned_sources(ctx: ResolvedContext, index: int) -> List[Tuple[int, FileInfo]]:
    """
    Source files of a target with the index of the target that owns each.

    Files of the extended targets come first, in declared order. Directories
    are left out.
    """
    owners = list(ctx.extends[index]) + [index]
    return [(owner, f) for owner in owners for f in ctx.sources[owner] if f.is_file]


def platform_sources(
    ctx: ResolvedContext, index: int, platform: PlatformType
) -> List[FileInfo]:
    """Composed source files that take part in the build on a platform."""
    return [
        f
        for owner, f in owned_sources(ctx, index)
        if ctx.match_file(owner, f.path, platform)
    ]
