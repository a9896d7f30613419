"""
Core functionality for nativegen.

This package contains the exception hierarchy, file system helpers and the
platform registry the other components depend on.
"""

from .exceptions import (
    NativeGenError,
    ConfigError,
    EmptyProjectError,
    VersionGateError,
    TargetReferenceError,
    WildcardValueError,
    FileResolutionError,
    GeneratorError,
    GeneratorNotFoundError,
)

from .filesystem import (
    FileInfo,
    TargetFiles,
    find_files,
    list_metafiles,
    atomic_write,
)

__all__ = [
    # Exceptions
    "NativeGenError",
    "ConfigError",
    "EmptyProjectError",
    "VersionGateError",
    "TargetReferenceError",
    "WildcardValueError",
    "FileResolutionError",
    "GeneratorError",
    "GeneratorNotFoundError",
    # Filesystem
    "FileInfo",
    "TargetFiles",
    "find_files",
    "list_metafiles",
    "atomic_write",
]
