"""Reusable nativegen project fixtures for testing.

This module provides project documents and pytest fixtures that create
project folders on disk or resolved contexts in memory.
"""

import textwrap
from pathlib import Path

import pytest

from nativegen.config.parser import parse_project
from nativegen.context import assemble_context
from nativegen.core.filesystem import FileInfo

CORE_APP_DOCUMENT = """
[project]
name = "demo"
version = "1.0.0"

[targets.core]
type = "StaticLibrary"
sources = ["core/**/*.cpp"]
defines = ["CORE"]

[targets.app]
type = "Console"
sources = ["app/**/*.cpp"]
extends = ["core"]
defines = ["APP"]
"""

CORE_APP_FILES = ["core/a.cpp", "core/b.cpp", "app/main.cpp"]


def core_app_data(**project_fields) -> dict:
    """The core/app project as document data, with extra project fields."""
    project = {"name": "demo", "version": "1.0.0"}
    project.update(project_fields)
    return {
        "project": project,
        "targets": {
            "core": {
                "type": "StaticLibrary",
                "sources": ["core/**/*.cpp"],
                "defines": ["CORE"],
            },
            "app": {
                "type": "Console",
                "sources": ["app/**/*.cpp"],
                "extends": ["core"],
                "defines": ["APP"],
            },
        },
    }


def files(*paths: str) -> tuple:
    """File records for project relative paths; a trailing slash marks a directory."""
    return tuple(
        FileInfo(path=Path(p.rstrip("/")), is_dir=p.endswith("/")) for p in paths
    )


@pytest.fixture
def write_project(tmp_path):
    """
    Factory writing a project folder.

    Returns:
        Callable(document, paths=(), config_name="nativegen.toml") -> Path

    Example:
        def test_load(write_project):
            root = write_project(CORE_APP_DOCUMENT, CORE_APP_FILES)
            assert (root / "nativegen.toml").exists()
    """

    def _write(document, paths=(), config_name="nativegen.toml"):
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        (root / config_name).write_text(
            textwrap.dedent(document).lstrip(), encoding="utf-8"
        )
        for relative in paths:
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("// test\n", encoding="utf-8")
        return root

    return _write


@pytest.fixture
def core_app_project(write_project) -> Path:
    """Project folder with a core library and an app extending it."""
    return write_project(CORE_APP_DOCUMENT, CORE_APP_FILES)


@pytest.fixture
def make_context(tmp_path):
    """
    Factory assembling a resolved context without touching the disk.

    Sources are given as a mapping of target name to relative paths. The
    input folder is ``<tmp>/project`` and the build folder defaults to
    ``<tmp>/project/build``.
    """

    def _make(data, sources=None, build_dir=None, **kwargs):
        project = parse_project(data)
        sources = sources or {}
        input_dir = tmp_path / "project"
        return assemble_context(
            project,
            input_dir,
            build_dir or input_dir / "build",
            sources=[files(*sources.get(name, ())) for name in project.target_names],
            **kwargs,
        )

    return _make
