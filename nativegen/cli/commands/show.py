"""
Show command implementation.

Prints the resolved project model as YAML: the profile list, the extension
graph, the files of every target and its effective settings per profile.
"""

import logging
from typing import Any, Dict, List, Optional

import yaml

from nativegen.cli.utils import load_context
from nativegen.config.types import Architecture, PlatformType
from nativegen.context import ResolvedContext
from nativegen.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the show command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = load_context(args.folder, args.build, args.config)

    platform = PlatformType.parse(args.platform) if args.platform else None
    architecture = (
        Architecture.parse(args.architecture) if args.architecture else None
    )

    data = describe(
        ctx,
        targets=args.target,
        profiles=args.profile,
        platform=platform,
        architecture=architecture,
    )
    print(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), end="")
    return 0


def describe(
    ctx: ResolvedContext,
    targets: Optional[List[str]] = None,
    profiles: Optional[List[str]] = None,
    platform: Optional[PlatformType] = None,
    architecture: Optional[Architecture] = None,
) -> Dict[str, Any]:
    """
    Build a plain-data view of the resolved context.

    Args:
        ctx: Resolved context
        targets: Target names to include (all when None)
        profiles: Profile names to include (all when None)
        platform: Platform settings are resolved for (unspecified when None)
        architecture: Architecture settings are resolved for (unspecified when None)

    Returns:
        Dictionary suitable for yaml.safe_dump

    Raises:
        ConfigError: If a requested target or profile does not exist
    """
    for name in targets or []:
        if name not in ctx.target_names:
            raise ConfigError(f"Unknown target: {name}")
    for name in profiles or []:
        if name not in ctx.profiles:
            raise ConfigError(
                f"Unknown profile: {name} (available: {', '.join(ctx.profiles)})"
            )

    selected_profiles = [p for p in ctx.profiles if not profiles or p in profiles]

    data: Dict[str, Any] = {
        "project": {
            "name": ctx.project.name,
            "version": ctx.project.version,
            "description": ctx.project.description,
            "platforms": [p.value for p in ctx.project_platforms()],
        },
        "profiles": list(ctx.profiles),
        "targets": {},
    }

    for index, name in enumerate(ctx.target_names):
        if targets and name not in targets:
            continue
        target = ctx.target(index)
        entry: Dict[str, Any] = {
            "type": ctx.target_type(index).value,
            "platforms": [p.value for p in ctx.buildable_platforms(index)],
            "extends": [ctx.target_names[i] for i in ctx.extends[index]],
            "extended_by": [ctx.target_names[i] for i in ctx.extended[index]],
            "depends": list(target.depends),
            "sources": [f.as_posix() for f in ctx.composed_sources(index) if f.is_file],
            "resources": [f.as_posix() for f in ctx.resources[index] if f.is_file],
            "assets": [f.as_posix() for f in ctx.assets[index] if f.is_file],
            "settings": {
                profile: ctx.composed_settings(
                    index, profile, platform, architecture
                ).to_dict()
                for profile in selected_profiles
            },
        }
        data["targets"][name] = entry

    logger.debug(f"Described {len(data['targets'])} target(s)")
    return data
