"""
Makefile generator.

Writes ``Makefile`` for Linux and ``Makefile.html5`` for Emscripten builds.
Make has a single configuration per invocation, so the profile and
architecture are chosen with ``make PROFILE=Release ARCH=X86`` and every
(profile, architecture) combination gets its own conditional flag block.
"""

import logging
from pathlib import Path
from typing import Dict, List

from nativegen.config.types import Architecture, PlatformType, TargetType
from nativegen.context import COMPILED_EXTENSIONS, ResolvedContext
from nativegen.core.platforms import get_platform
from nativegen.generators.base import (
    GENERATED_HEADER,
    Generator,
    Identifiers,
    Output,
    generated_targets,
    platform_sources,
)
from nativegen.generators.flags import c_flags, cxx_flags, link_flags

logger = logging.getLogger(__name__)

C_EXTENSIONS = {"c", "m"}

ARCHITECTURE_FLAGS = {
    Architecture.X86: ["-m32"],
    Architecture.X64: ["-m64"],
}

TOOLS = {
    PlatformType.LINUX: {"CC": "cc", "CXX": "c++", "AR": "ar"},
    PlatformType.HTML5: {"CC": "emcc", "CXX": "em++", "AR": "emar"},
}

MAKEFILE_NAMES = {
    PlatformType.LINUX: "Makefile",
    PlatformType.HTML5: "Makefile.html5",
}


def artifact_name(name: str, target_type: TargetType, platform: PlatformType) -> str:
    """File name of a target's build product."""
    if target_type == TargetType.STATIC_LIBRARY:
        return f"lib{name}.a"
    if target_type == TargetType.SHARED_LIBRARY:
        return f"lib{name}.wasm" if platform == PlatformType.HTML5 else f"lib{name}.so"
    if platform == PlatformType.HTML5:
        return f"{name}.html" if target_type == TargetType.APPLICATION else f"{name}.js"
    return name


class MakeGenerator(Generator):
    """Generates Makefiles for Linux and HTML5 builds."""

    name = "make"
    platforms = frozenset({PlatformType.LINUX, PlatformType.HTML5})

    def render(self, ctx: ResolvedContext, ids: Identifiers) -> List[Output]:
        outputs = []
        for platform in (PlatformType.LINUX, PlatformType.HTML5):
            if platform not in ctx.project_platforms():
                continue
            content = self.generate_content(ctx, platform)
            outputs.append((ctx.build_dir / MAKEFILE_NAMES[platform], content))
        return outputs

    def generate_content(self, ctx: ResolvedContext, platform: PlatformType) -> str:
        """
        Build the Makefile text for one platform.

        Args:
            ctx: Resolved context
            platform: Linux or HTML5

        Returns:
            Complete file content
        """
        targets = generated_targets(ctx, platform)
        architectures = self._architectures(ctx, targets, platform)
        tools = TOOLS[platform]

        lines: List[str] = [
            f"# {GENERATED_HEADER}",
            f"# Project: {ctx.project.name} {ctx.project.version} ({platform})",
            "",
            f"PROFILE ?= {self._default_profile(ctx)}",
        ]
        if architectures:
            lines.append(f"ARCH ?= {architectures[-1]}")
            lines.append("OUT_DIR := $(PROFILE)-$(ARCH)")
        else:
            lines.append("OUT_DIR := $(PROFILE)")

        if platform == PlatformType.HTML5:
            lines.extend(f"{tool} := {command}" for tool, command in tools.items())
        else:
            lines.extend(f"{tool} ?= {command}" for tool, command in tools.items())

        lines.extend(
            [
                f"SRC_DIR := {ctx.input_rel.as_posix()}",
                f"ENV_CFLAGS := {ctx.env.cflags}".rstrip(),
                f"ENV_CXXFLAGS := {ctx.env.cxxflags}".rstrip(),
                f"ENV_LDFLAGS := {ctx.env.ldflags}".rstrip(),
                "",
                f"PROFILES := {' '.join(ctx.profiles)}",
                "ifeq ($(filter $(PROFILE),$(PROFILES)),)",
                "$(error Unknown PROFILE '$(PROFILE)', expected one of: $(PROFILES))",
                "endif",
                "",
            ]
        )

        artifacts = {
            ctx.target_names[i]: "$(OUT_DIR)/"
            + artifact_name(ctx.target_names[i], ctx.target_type(i), platform)
            for i in targets
        }
        lines.append(".PHONY: all clean")
        lines.append(f"all: {' '.join(artifacts.values())}".rstrip())
        lines.append("")

        for index in targets:
            lines.extend(self._generate_target(ctx, index, platform, architectures, artifacts))
            lines.append("")

        lines.extend(["clean:", "\trm -rf $(OUT_DIR)", ""])
        logger.debug(f"Make: {len(targets)} target(s) for {platform}")
        return "\n".join(lines)

    def _generate_target(
        self,
        ctx: ResolvedContext,
        index: int,
        platform: PlatformType,
        architectures: List[Architecture],
        artifacts: Dict[str, str],
    ) -> List[str]:
        name = ctx.target_names[index]
        target_type = ctx.target_type(index)
        var = _variable(name)

        sources = [
            f.as_posix()
            for f in platform_sources(ctx, index, platform)
            if f.extension.lower() in COMPILED_EXTENSIONS
        ]
        extensions = sorted({Path(s).suffix[1:] for s in sources})

        lines = [
            f"# Target: {name} ({target_type})",
            f"{var}_SOURCES := {' '.join(sources)}".rstrip(),
            f"{var}_OBJECTS := $(patsubst %,$(OUT_DIR)/{name}/%.o,$({var}_SOURCES))",
        ]

        combinations = [(p, a) for p in ctx.profiles for a in architectures or [None]]
        for profile, architecture in combinations:
            settings = ctx.composed_settings(index, profile, platform, architecture)
            extra = ARCHITECTURE_FLAGS.get(architecture, []) if architecture else []
            condition = f"{profile}-{architecture}" if architecture else profile
            selector = "$(PROFILE)-$(ARCH)" if architecture else "$(PROFILE)"
            lines.extend(
                [
                    f"ifeq ({selector},{condition})",
                    f"{var}_CFLAGS := {' '.join(extra + c_flags(settings, '$(SRC_DIR)'))}".rstrip(),
                    f"{var}_CXXFLAGS := {' '.join(extra + cxx_flags(settings, '$(SRC_DIR)'))}".rstrip(),
                    f"{var}_LDFLAGS := {' '.join(extra + link_flags(settings, '$(SRC_DIR)'))}".rstrip(),
                    "endif",
                ]
            )

        dependencies = [
            artifacts[d]
            for d in ctx.target(index).depends
            if d in artifacts and _is_library(ctx, d)
        ]
        artifact = artifacts[name]
        prerequisites = " ".join([f"$({var}_OBJECTS)"] + dependencies)
        lines.append(f"{artifact}: {prerequisites}")
        lines.append("\t@mkdir -p $(dir $@)")

        if target_type == TargetType.STATIC_LIBRARY:
            lines.append(f"\t$(AR) rcs $@ $({var}_OBJECTS)")
        else:
            shared = ""
            if target_type == TargetType.SHARED_LIBRARY:
                shared = " -sSIDE_MODULE=1" if platform == PlatformType.HTML5 else " -shared"
            command = [f"$(CXX){shared}", f"$({var}_OBJECTS)"] + dependencies
            command += [f"$({var}_LDFLAGS)", "$(ENV_LDFLAGS)", "-o $@"]
            lines.append("\t" + " ".join(command))

        for extension in extensions:
            compiler, flags, env = (
                ("$(CC)", f"$({var}_CFLAGS)", "$(ENV_CFLAGS)")
                if extension.lower() in C_EXTENSIONS
                else ("$(CXX)", f"$({var}_CXXFLAGS)", "$(ENV_CXXFLAGS)")
            )
            lines.extend(
                [
                    f"$(OUT_DIR)/{name}/%.{extension}.o: $(SRC_DIR)/%.{extension}",
                    "\t@mkdir -p $(dir $@)",
                    f"\t{compiler} {flags} {env}{_pic(target_type)} -c $< -o $@",
                ]
            )
        return lines

    def _architectures(
        self, ctx: ResolvedContext, targets: List[int], platform: PlatformType
    ) -> List[Architecture]:
        supported = get_platform(platform).architectures
        selected = []
        for index in targets:
            for architecture in ctx.architectures_for(index, supported):
                if architecture not in selected:
                    selected.append(architecture)
        return [a for a in supported if a in selected]

    def _default_profile(self, ctx: ResolvedContext) -> str:
        return "Debug" if "Debug" in ctx.profiles else ctx.profiles[0]


def _variable(name: str) -> str:
    return "".join(c if c.isalnum() else "_" for c in name)


def _pic(target_type: TargetType) -> str:
    return " -fPIC" if target_type == TargetType.SHARED_LIBRARY else ""


def _is_library(ctx: ResolvedContext, name: str) -> bool:
    return ctx.target_type(ctx.target_index(name)) in (
        TargetType.STATIC_LIBRARY,
        TargetType.SHARED_LIBRARY,
    )
