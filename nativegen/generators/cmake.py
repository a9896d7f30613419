"""
CMake project generator.

Writes a single multi-configuration ``CMakeLists.txt`` for the Android NDK
toolchain. Per-profile settings are expressed with ``$<CONFIG:...>`` generator
expressions so one file serves every profile the catalog exposes.
"""

import logging
from dataclasses import replace
from typing import Dict, List

from nativegen.config.settings import Settings
from nativegen.config.types import PlatformType, TargetType
from nativegen.context import COMPILED_EXTENSIONS, HEADER_EXTENSIONS, ResolvedContext
from nativegen.generators.base import (
    GENERATED_HEADER,
    Generator,
    Identifiers,
    Output,
    generated_targets,
    platform_sources,
)
from nativegen.generators.flags import c_flags, cxx_flags, prefixed

logger = logging.getLogger(__name__)

CMAKE_MINIMUM_VERSION = "3.13"
SOURCE_DIR = "${CMAKE_CURRENT_SOURCE_DIR}"

_LIBRARY_KINDS = {
    TargetType.STATIC_LIBRARY: "STATIC",
    TargetType.SHARED_LIBRARY: "SHARED",
    # Native activities are loaded by the Java side as shared libraries
    TargetType.APPLICATION: "SHARED",
}


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "/").replace('"', '\\"') + '"'


def _per_config(profile: str, values: List[str]) -> str:
    return _quote(f"$<$<CONFIG:{profile}>:{';'.join(values)}>")


class CMakeGenerator(Generator):
    """Generates CMakeLists.txt for Android builds."""

    name = "cmake"
    platforms = frozenset({PlatformType.ANDROID})

    def render(self, ctx: ResolvedContext, ids: Identifiers) -> List[Output]:
        return [(ctx.build_dir / "CMakeLists.txt", self.generate_content(ctx))]

    def generate_content(self, ctx: ResolvedContext) -> str:
        """
        Build the CMakeLists.txt text.

        Args:
            ctx: Resolved context

        Returns:
            Complete file content
        """
        platform = PlatformType.ANDROID
        targets = generated_targets(ctx, platform)
        names = {ctx.target_names[i] for i in targets}

        lines: List[str] = [
            f"# {GENERATED_HEADER}",
            f"# Project: {ctx.project.name} {ctx.project.version}",
            "",
            f"cmake_minimum_required(VERSION {CMAKE_MINIMUM_VERSION})",
            f"project({ctx.project.name} LANGUAGES C CXX)",
            "",
            f"set(CMAKE_CONFIGURATION_TYPES {' '.join(ctx.profiles)} CACHE STRING \"\" FORCE)",
            f"set(NATIVEGEN_SOURCE_DIR {_quote(SOURCE_DIR + '/' + ctx.input_rel.as_posix())})",
        ]

        if ctx.env.cflags:
            lines.append(f'set(CMAKE_C_FLAGS "${{CMAKE_C_FLAGS}} {ctx.env.cflags}")')
        if ctx.env.cxxflags:
            lines.append(f'set(CMAKE_CXX_FLAGS "${{CMAKE_CXX_FLAGS}} {ctx.env.cxxflags}")')
        if ctx.env.ldflags:
            lines.append(
                f'set(CMAKE_SHARED_LINKER_FLAGS "${{CMAKE_SHARED_LINKER_FLAGS}} {ctx.env.ldflags}")'
            )

        for index in targets:
            lines.append("")
            lines.extend(self._generate_target(ctx, index, names))

        lines.append("")
        logger.debug(f"CMake: {len(targets)} target(s) for {platform}")
        return "\n".join(lines)

    def _generate_target(self, ctx: ResolvedContext, index: int, names) -> List[str]:
        platform = PlatformType.ANDROID
        name = ctx.target_names[index]
        target_type = ctx.target_type(index)

        sources = [
            f
            for f in platform_sources(ctx, index, platform)
            if f.extension.lower() in COMPILED_EXTENSIONS | HEADER_EXTENSIONS
        ]
        lines = [f"# Target: {name} ({target_type})"]
        if target_type in _LIBRARY_KINDS:
            lines.append(f"add_library({name} {_LIBRARY_KINDS[target_type]}")
        else:
            lines.append(f"add_executable({name}")
        for f in sources:
            lines.append(f"  {_quote('${NATIVEGEN_SOURCE_DIR}/' + f.as_posix())}")
        lines.append(")")

        resolved: Dict[str, Settings] = {
            profile: ctx.composed_settings(index, profile, platform)
            for profile in ctx.profiles
        }
        prefix = "${NATIVEGEN_SOURCE_DIR}"

        includes = {
            p: [prefixed(prefix, d) for d in s.include_dirs] for p, s in resolved.items()
        }
        defines = {p: list(s.defines) for p, s in resolved.items()}
        options = {
            p: [f"$<$<COMPILE_LANGUAGE:C>:{f}>" for f in c_flags(_options_only(s))]
            + [f"$<$<COMPILE_LANGUAGE:CXX>:{f}>" for f in cxx_flags(_options_only(s))]
            for p, s in resolved.items()
        }
        link_dirs = {
            p: [prefixed(prefix, d) for d in s.lib_dirs] for p, s in resolved.items()
        }
        libs = {p: list(s.libs) for p, s in resolved.items()}

        lines.extend(self._per_profile("target_include_directories", name, includes))
        lines.extend(self._per_profile("target_compile_definitions", name, defines))
        lines.extend(self._per_profile("target_compile_options", name, options))
        lines.extend(self._per_profile("target_link_directories", name, link_dirs))

        dependencies = [d for d in ctx.target(index).depends if d in names]
        if dependencies:
            lines.append(f"target_link_libraries({name} PRIVATE {' '.join(dependencies)})")
        lines.extend(self._per_profile("target_link_libraries", name, libs))

        if target_type == TargetType.APPLICATION:
            # Keeps the native activity entry point from being stripped
            lines.append(
                f'set_target_properties({name} PROPERTIES LINK_FLAGS "-u ANativeActivity_onCreate")'
            )
            lines.append(f"target_link_libraries({name} PRIVATE android log)")

        return lines

    def _per_profile(
        self, command: str, name: str, values: Dict[str, List[str]]
    ) -> List[str]:
        entries = [
            _per_config(profile, items) for profile, items in values.items() if items
        ]
        if not entries:
            return []
        lines = [f"{command}({name} PRIVATE"]
        lines.extend(f"  {entry}" for entry in entries)
        lines.append(")")
        return lines


def _options_only(settings: Settings) -> Settings:
    """Settings without the sequences CMake receives through dedicated commands."""
    return replace(settings, include_dirs=(), defines=(), lib_dirs=(), libs=())
