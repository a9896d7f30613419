"""
Shared utilities for CLI commands.

Provides project loading (document, version gate, file resolution, context
assembly) and console output helpers used by every command.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

from nativegen.config.parser import (
    DEFAULT_CONFIG_NAME,
    check_min_version,
    parse_project_file,
)
from nativegen.context import Env, ResolvedContext, assemble_context
from nativegen.core.exceptions import ConfigError, FileResolutionError
from nativegen.core.filesystem import find_files, list_metafiles

logger = logging.getLogger(__name__)


# ============================================================================
# Project Loading
# ============================================================================


def load_context(
    input_dir: Union[str, Path],
    build_dir: Optional[Union[str, Path]] = None,
    config_name: Union[str, Path] = DEFAULT_CONFIG_NAME,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolvedContext:
    """
    Load a project folder into a resolved context.

    Args:
        input_dir: Project folder
        build_dir: Output folder (defaults to the current directory)
        config_name: Project document, relative to input_dir unless absolute
        environ: Environment to read CFLAGS/CXXFLAGS/LDFLAGS from

    Returns:
        Resolved context

    Raises:
        ConfigError: If the folder or document is missing or invalid
        VersionGateError: If the project requires a newer nativegen
        TargetReferenceError: If an extends reference is unknown or cyclic
        FileResolutionError: If a target's patterns cannot be resolved
    """
    input_dir = resolve_project_root(Path(input_dir))
    if not input_dir.is_dir():
        raise ConfigError(f"Project folder not found: {input_dir}")
    build_dir = resolve_project_root(Path(build_dir) if build_dir else None)

    config_path = Path(config_name)
    if not config_path.is_absolute():
        config_path = input_dir / config_path

    project = parse_project_file(config_path)
    check_min_version(project.min_version)

    sources = []
    resources = []
    assets = []
    for name, target in project.targets.items():
        try:
            sources.append(find_files(input_dir, target.sources))
            resources.append(find_files(input_dir, target.resources))
            assets.append(
                find_files(input_dir, [f"{target.assets.rstrip('/')}/**/*"])
                if target.assets
                else ()
            )
        except FileResolutionError as e:
            raise FileResolutionError(
                f"Failed to resolve files for target {name}: {e}"
            ) from e

    ctx = assemble_context(
        project,
        input_dir,
        build_dir,
        sources=sources,
        resources=resources,
        assets=assets,
        metafiles=list_metafiles(input_dir),
        env=Env.from_environ(os.environ if environ is None else environ),
    )
    logger.debug(f"Loaded {project.name} from {config_path}")
    return ctx


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe characters if Unicode symbols can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace("⚠️", "WARNING:")
            .replace("✓", "[OK]")
            .replace("❌", "[ERROR]")
            .replace("ℹ️", "[INFO]")
            .replace("→", "->")
        )
        print(safe_message, file=file)


# ============================================================================
# Path Utilities
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve a folder argument.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return path.resolve()
