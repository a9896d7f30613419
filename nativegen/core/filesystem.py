"""
File system utilities for nativegen.

This module provides:
- Glob expansion of target file patterns into ordered file records
- Listing of the files at the root of a project folder
- Atomic writes for generated project files
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Tuple, Union

from nativegen.core.exceptions import FileResolutionError

logger = logging.getLogger(__name__)

# Root entries never reported as project metafiles.
IGNORED_METAFILES = {".git", ".DS_Store"}


@dataclass(frozen=True)
class FileInfo:
    """
    A file or directory matched for a target.

    Attributes:
        path: Path relative to the project folder
        is_dir: True when the match is a directory
    """

    path: Path
    is_dir: bool = False

    @property
    def is_file(self) -> bool:
        return not self.is_dir

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        """Extension without the leading dot ("" when there is none)."""
        return self.path.suffix[1:]

    def as_posix(self) -> str:
        return self.path.as_posix()

    def __str__(self) -> str:
        return self.as_posix()


TargetFiles = Tuple[FileInfo, ...]


def find_files(root: Union[str, Path], patterns: Iterable[str]) -> TargetFiles:
    """
    Expand glob patterns relative to a project folder.

    Patterns are applied in order; matches of a single pattern are sorted so
    the result never depends on directory listing order. A path matched by
    several patterns is reported once, at its first position.

    Args:
        root: Project folder
        patterns: Glob patterns such as ``src/**/*.cpp``

    Returns:
        Ordered file records with paths relative to root

    Raises:
        FileResolutionError: If a pattern is absolute or escapes the folder

    Example:
        >>> find_files(Path("/proj"), ["core/**/*.cpp"])
        (FileInfo(path=PosixPath('core/a.cpp'), is_dir=False),)
    """
    root = Path(root)
    seen = set()
    files = []

    for pattern in patterns:
        normalized = pattern.replace("\\", "/")
        pure = PurePosixPath(normalized)
        if pure.is_absolute() or normalized.startswith("/") or ".." in pure.parts:
            raise FileResolutionError(
                f"File pattern must be relative to the project folder: {pattern}"
            )

        try:
            matches = sorted(root.glob(normalized))
        except (ValueError, OSError) as e:
            raise FileResolutionError(f"Invalid file pattern {pattern!r}: {e}") from e

        for match in matches:
            relative = match.relative_to(root)
            if relative in seen or relative == Path("."):
                continue
            seen.add(relative)
            files.append(FileInfo(path=relative, is_dir=match.is_dir()))

    logger.debug(f"Matched {len(files)} file(s) for {list(patterns)}")
    return tuple(files)


def list_metafiles(root: Union[str, Path]) -> TargetFiles:
    """
    List the entries at the root of a project folder.

    Version control metadata and Finder files are skipped.

    Args:
        root: Project folder

    Returns:
        Sorted file records for every other root entry
    """
    root = Path(root)
    entries = []
    for entry in sorted(root.iterdir()):
        if entry.name in IGNORED_METAFILES:
            continue
        entries.append(FileInfo(path=Path(entry.name), is_dir=entry.is_dir()))
    return tuple(entries)


def relative_path(path: Union[str, Path], start: Union[str, Path]) -> Path:
    """Path from start to path, walking up with ``..`` where needed."""
    return Path(os.path.relpath(Path(path), Path(start)))


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never left partially written. If the write fails, the original
    file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            # newline="" keeps CRLF content byte-exact on every platform
            with open(temp_fd, "w", encoding=encoding, newline="") as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise
