"""Project document parser for nativegen.

This module loads a project document (``nativegen.toml``, or a YAML document
with the same layout) and turns it into the immutable project tree. The schema
is closed: unknown keys, wrong value types and wildcard enum spellings are
rejected with a ConfigError naming the offending key path.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple

import yaml
from packaging.version import InvalidVersion, Version

from nativegen import __version__
from nativegen.config.model import (
    Profile,
    Project,
    Target,
    TargetFilter,
    VisualStudioSettings,
    XcodeSettings,
)
from nativegen.config.settings import SEQUENCE_FIELDS, Settings
from nativegen.config.types import (
    Architecture,
    CStandard,
    CXXStandard,
    Optimize,
    PlatformType,
    TargetType,
)
from nativegen.core.exceptions import (
    ConfigError,
    EmptyProjectError,
    VersionGateError,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "nativegen.toml"

FILTER_KEYS = {"platforms", "architectures"}
SETTINGS_KEYS = set(Settings.__dataclass_fields__)
TOP_LEVEL_KEYS = {"project", "profiles", "targets"}
PROJECT_KEYS = (
    {"name", "version", "description", "min_version", "visual_studio", "xcode"}
    | FILTER_KEYS
    | SETTINGS_KEYS
)
TARGET_KEYS = (
    {
        "type",
        "sources",
        "resources",
        "assets",
        "depends",
        "extends",
        "profiles",
        "exclude",
    }
    | FILTER_KEYS
    | SETTINGS_KEYS
)
PROFILE_KEYS = {"architecture", "arch", "platform"} | SETTINGS_KEYS
XCODE_KEYS = {"group_by_target"}

_ENUM_SETTINGS = {
    "optimize": Optimize,
    "c_standard": CStandard,
    "cxx_standard": CXXStandard,
}
_BOOL_SETTINGS = {
    "warning_as_error",
    "strict_aliasing",
    "omit_frame_pointer",
    "enable_exceptions",
    "enable_rtti",
    "link_incremental",
    "arm_thumb_mode",
}
_INT_SETTINGS = {
    "warning_level": (0, 4),
    "android_target_api_level": (1, 255),
}


# ============================================================================
# Document loading
# ============================================================================


def load_document(config_path: Path) -> Dict[str, Any]:
    """
    Read a project document into plain data.

    ``.toml`` files are parsed with tomllib, ``.yaml``/``.yml`` with PyYAML.

    Args:
        config_path: Path to the project document

    Returns:
        Document contents as a dictionary

    Raises:
        ConfigError: If the file is missing, empty, malformed or of an
            unsupported format
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            import tomllib

            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            raise ConfigError(
                f"Unsupported configuration format: {config_path.name} "
                "(expected .toml, .yaml or .yml)"
            )
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e
    except ValueError as e:
        # tomllib.TOMLDecodeError is a ValueError
        raise ConfigError(f"Invalid TOML syntax in {config_path}: {e}") from e

    if not data:
        raise ConfigError(f"Configuration file is empty: {config_path}")

    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration must be a table, got {type(data).__name__}: {config_path}"
        )

    return data


def parse_project_file(config_path: Path) -> Project:
    """
    Load and parse a project document.

    Args:
        config_path: Path to the project document

    Returns:
        Parsed project tree

    Raises:
        ConfigError: If the document violates the schema
        EmptyProjectError: If the document declares no targets
    """
    logger.debug(f"Loading project from {config_path}")
    return parse_project(load_document(config_path))


def parse_project(data: Dict[str, Any]) -> Project:
    """Build the project tree from document data."""
    _check_keys(data, TOP_LEVEL_KEYS, "")

    if "project" not in data:
        raise ConfigError("Missing required section: project")

    info = _expect_table(data["project"], "project")
    _check_keys(info, PROJECT_KEYS, "project")
    for required in ("name", "version"):
        if required not in info:
            raise ConfigError(f"Missing required field: project.{required}")

    targets_data = _expect_table(data.get("targets", {}), "targets")
    if not targets_data:
        raise EmptyProjectError()

    targets = {
        name: _parse_target(name, _expect_table(value, f"targets.{name}"))
        for name, value in targets_data.items()
    }

    project = Project(
        name=_expect_str(info["name"], "project.name"),
        version=_expect_str(info["version"], "project.version"),
        description=_expect_str(info.get("description", ""), "project.description"),
        min_version=_expect_str(info.get("min_version", ""), "project.min_version"),
        filter=_parse_filter(info, "project"),
        settings=_parse_settings(info, "project"),
        visual_studio=_parse_visual_studio(info.get("visual_studio", {})),
        xcode=_parse_xcode(info.get("xcode", {})),
        profiles=_parse_profiles(data.get("profiles", {}), "profiles"),
        targets=MappingProxyType(targets),
    )

    logger.debug(
        f"Parsed project {project.name} {project.version} "
        f"with {len(targets)} target(s)"
    )
    return project


# ============================================================================
# Version gate
# ============================================================================


def check_min_version(min_version: str, current: Optional[str] = None) -> None:
    """
    Ensure the running nativegen satisfies a project's minimum version.

    Args:
        min_version: Version required by the project ("" means no requirement)
        current: Running version (defaults to the installed package version)

    Raises:
        VersionGateError: If min_version is unparsable or newer than current
    """
    if not min_version:
        return

    current = current or __version__
    try:
        expected = Version(min_version)
    except InvalidVersion as e:
        raise VersionGateError(
            min_version,
            current,
            reason=f"Min version check failed: invalid version {min_version!r}",
        ) from e

    if expected > Version(current):
        raise VersionGateError(min_version, current)


# ============================================================================
# Sections
# ============================================================================


def _parse_target(name: str, data: Dict[str, Any]) -> Target:
    path = f"targets.{name}"
    _check_keys(data, TARGET_KEYS, path)

    target_type = TargetType.AUTO
    if "type" in data:
        target_type = _parse_enum(TargetType, data["type"], f"{path}.type")

    assets = data.get("assets")
    if assets is not None:
        assets = _expect_str(assets, f"{path}.assets")

    return Target(
        name=name,
        target_type=target_type,
        sources=_expect_strings(data.get("sources", []), f"{path}.sources"),
        resources=_expect_strings(data.get("resources", []), f"{path}.resources"),
        assets=assets,
        depends=_expect_strings(data.get("depends", []), f"{path}.depends"),
        extends=_expect_strings(data.get("extends", []), f"{path}.extends"),
        filter=_parse_filter(data, path),
        settings=_parse_settings(data, path),
        profiles=_parse_profiles(data.get("profiles", {}), f"{path}.profiles"),
        exclude=_parse_exclude(data.get("exclude", {}), f"{path}.exclude"),
    )


def _parse_profiles(data: Any, path: str):
    profiles: Dict[str, Tuple[Profile, ...]] = {}
    for name, value in _expect_table(data, path).items():
        variants = value if isinstance(value, list) else [value]
        profiles[name] = tuple(
            _parse_profile(_expect_table(v, f"{path}.{name}"), f"{path}.{name}")
            for v in variants
        )
    return MappingProxyType(profiles)


def _parse_profile(data: Dict[str, Any], path: str) -> Profile:
    _check_keys(data, PROFILE_KEYS, path)
    if "architecture" in data and "arch" in data:
        raise ConfigError(f"{path}: use either 'architecture' or 'arch', not both")

    architecture = Architecture.ANY
    arch_key = "architecture" if "architecture" in data else "arch"
    if arch_key in data:
        architecture = _parse_enum(Architecture, data[arch_key], f"{path}.{arch_key}")

    platform = PlatformType.ANY
    if "platform" in data:
        platform = _parse_enum(PlatformType, data["platform"], f"{path}.platform")

    return Profile(
        architecture=architecture,
        platform=platform,
        settings=_parse_settings(data, path),
    )


def _parse_filter(data: Dict[str, Any], path: str) -> TargetFilter:
    platforms = tuple(
        _parse_enum(PlatformType, v, f"{path}.platforms")
        for v in _expect_list(data.get("platforms", []), f"{path}.platforms")
    )
    architectures = tuple(
        _parse_enum(Architecture, v, f"{path}.architectures")
        for v in _expect_list(data.get("architectures", []), f"{path}.architectures")
    )
    return TargetFilter(platforms=platforms, architectures=architectures)


def _parse_settings(data: Dict[str, Any], path: str) -> Settings:
    values: Dict[str, Any] = {}
    for key in SETTINGS_KEYS & set(data):
        value = data[key]
        key_path = f"{path}.{key}"
        if key in SEQUENCE_FIELDS:
            values[key] = _expect_strings(value, key_path)
        elif key in _ENUM_SETTINGS:
            values[key] = _parse_enum(_ENUM_SETTINGS[key], value, key_path)
        elif key in _BOOL_SETTINGS:
            if not isinstance(value, bool):
                raise ConfigError(f"{key_path} must be a boolean")
            values[key] = value
        elif key in _INT_SETTINGS:
            low, high = _INT_SETTINGS[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key_path} must be an integer")
            if not low <= value <= high:
                raise ConfigError(f"{key_path} must be between {low} and {high}")
            values[key] = value
    return Settings(**values)


def _parse_exclude(data: Any, path: str):
    exclude: Dict[str, Tuple[PlatformType, ...]] = {}
    for directory, platforms in _expect_table(data, path).items():
        exclude[directory] = tuple(
            _parse_enum(PlatformType, p, f"{path}.{directory}")
            for p in _expect_list(platforms, f"{path}.{directory}")
        )
    return MappingProxyType(exclude)


def _parse_visual_studio(data: Any) -> VisualStudioSettings:
    _check_keys(_expect_table(data, "project.visual_studio"), set(), "project.visual_studio")
    return VisualStudioSettings()


def _parse_xcode(data: Any) -> XcodeSettings:
    data = _expect_table(data, "project.xcode")
    _check_keys(data, XCODE_KEYS, "project.xcode")
    group_by_target = data.get("group_by_target", True)
    if not isinstance(group_by_target, bool):
        raise ConfigError("project.xcode.group_by_target must be a boolean")
    return XcodeSettings(group_by_target=group_by_target)


# ============================================================================
# Value checks
# ============================================================================


def _check_keys(data: Dict[str, Any], allowed: set, path: str) -> None:
    unknown = sorted(str(k) for k in data if k not in allowed)
    if unknown:
        where = f" in {path}" if path else ""
        raise ConfigError(f"Unknown key(s){where}: {', '.join(unknown)}")


def _expect_table(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{path} must be a table")
    for key in value:
        if not isinstance(key, str):
            raise ConfigError(f"{path}: key {key!r} must be a string")
    return value


def _expect_list(value: Any, path: str) -> List[Any]:
    if not isinstance(value, list):
        raise ConfigError(f"{path} must be a list")
    return value


def _expect_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{path} must be a string")
    return value


def _expect_strings(value: Any, path: str) -> Tuple[str, ...]:
    return tuple(_expect_str(v, path) for v in _expect_list(value, path))


def _parse_enum(enum_cls, value: Any, path: str):
    if isinstance(value, bool):
        raise ConfigError(f"{path}: invalid value {value!r}")
    try:
        return enum_cls.parse(value)
    except ValueError as e:
        raise ConfigError(f"{path}: {e}") from e
