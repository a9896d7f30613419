"""Configuration module for nativegen.

This module provides the project document parser, the immutable project tree,
settings layers with their combinator, the profile catalog and the extension
graph between targets.
"""

from nativegen.config.types import (
    Architecture,
    PlatformType,
    TargetType,
    Optimize,
    CStandard,
    CXXStandard,
)
from nativegen.config.settings import (
    Settings,
    combine,
    combine_all,
    DEBUG_SETTINGS,
    RELEASE_SETTINGS,
)
from nativegen.config.model import (
    TargetFilter,
    Profile,
    Target,
    Project,
)
from nativegen.config.profiles import ProfileCatalog, default_profiles, profile_names
from nativegen.config.graph import ExtensionGraph
from nativegen.config.parser import (
    DEFAULT_CONFIG_NAME,
    parse_project,
    parse_project_file,
    check_min_version,
)

__all__ = [
    # Types
    "Architecture",
    "PlatformType",
    "TargetType",
    "Optimize",
    "CStandard",
    "CXXStandard",
    # Settings
    "Settings",
    "combine",
    "combine_all",
    "DEBUG_SETTINGS",
    "RELEASE_SETTINGS",
    # Model
    "TargetFilter",
    "Profile",
    "Target",
    "Project",
    # Profiles and graph
    "ProfileCatalog",
    "default_profiles",
    "profile_names",
    "ExtensionGraph",
    # Parser
    "DEFAULT_CONFIG_NAME",
    "parse_project",
    "parse_project_file",
    "check_min_version",
]
