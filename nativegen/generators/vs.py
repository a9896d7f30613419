"""
Visual Studio solution generator.

Writes a ``.sln`` with one ``.vcxproj`` (and ``.vcxproj.filters``) per
generated target, plus a ``.vcxitems`` project listing the project's root
files. Configurations are the catalog profiles crossed with the Windows
architectures each target allows; the settings of every configuration come
from ``ResolvedContext.composed_settings``.

All files use CRLF line endings.
"""

import logging
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Tuple

from nativegen.config.settings import Settings
from nativegen.config.types import (
    Architecture,
    CStandard,
    CXXStandard,
    Optimize,
    PlatformType,
    TargetType,
)
from nativegen.context import COMPILED_EXTENSIONS, HEADER_EXTENSIONS, ResolvedContext
from nativegen.core.platforms import get_platform
from nativegen.generators.base import (
    GENERATED_HEADER,
    Generator,
    Identifiers,
    Output,
    generated_targets,
    owned_sources,
)

logger = logging.getLogger(__name__)

CRLF = "\r\n"
MSBUILD_NS = "http://schemas.microsoft.com/developer/msbuild/2003"
CXX_PROJECT_KIND = "8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942"
VS_VERSION = "16.0.28729.10"
PLATFORM_TOOLSET = "v142"

DISABLE_WARNINGS = "4324;4514;4571;4623;4625;4626;4710;4711;4820;5026;5027;5045"

ARCHITECTURE_PLATFORMS = {
    Architecture.X86: "Win32",
    Architecture.X64: "x64",
    Architecture.ARM: "ARM",
    Architecture.ARM64: "ARM64",
}

SOLUTION_PLATFORMS = {
    Architecture.X86: "x86",
    Architecture.X64: "x64",
    Architecture.ARM: "ARM",
    Architecture.ARM64: "ARM64",
}

CONFIGURATION_TYPES = {
    TargetType.CONSOLE: "Application",
    TargetType.APPLICATION: "Application",
    TargetType.STATIC_LIBRARY: "StaticLibrary",
    TargetType.SHARED_LIBRARY: "DynamicLibrary",
}

WARNING_LEVELS = {
    0: "TurnOffAllWarnings",
    1: "Level1",
    2: "Level2",
    3: "Level3",
    4: "Level4",
}

OPTIMIZATIONS = {
    Optimize.NONE: "Disabled",
    Optimize.SIZE: "MinSpace",
    Optimize.SPEED: "MaxSpeed",
    Optimize.FULL: "Full",
}

CXX_STANDARDS = {
    CXXStandard.CXX14: "stdcpp14",
    CXXStandard.CXX17: "stdcpp17",
    CXXStandard.CXX20: "stdcpp20",
}

C_STANDARDS = {
    CStandard.C11: "stdc11",
}


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _windows_path(path: str) -> str:
    return path.replace("/", "\\")


def _escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def item_element(ctx: ResolvedContext, owner: int, path: PurePosixPath) -> str:
    """MSBuild item type of a source file, ``None`` when excluded on Windows."""
    if not ctx.match_file(owner, path, PlatformType.WINDOWS):
        return "None"
    extension = path.suffix[1:].lower()
    if extension in COMPILED_EXTENSIONS:
        return "ClCompile"
    if extension in HEADER_EXTENSIONS:
        return "ClInclude"
    if extension == "xml":
        return "Xml"
    return "None"


class VisualStudioGenerator(Generator):
    """Generates a Visual Studio 2019 solution for Windows builds."""

    name = "vs"
    platforms = frozenset({PlatformType.WINDOWS})

    def render(self, ctx: ResolvedContext, ids: Identifiers) -> List[Output]:
        targets = generated_targets(ctx, PlatformType.WINDOWS)
        outputs = []

        for index in targets:
            name = ctx.target_names[index]
            outputs.append(
                (
                    ctx.build_dir / f"{name}.vcxproj",
                    self.generate_project(ctx, ids, index, targets),
                )
            )
            outputs.append(
                (
                    ctx.build_dir / f"{name}.vcxproj.filters",
                    self.generate_filters(ctx, ids, index),
                )
            )

        outputs.append(
            (
                ctx.build_dir / f"{ctx.project.name}.vcxitems",
                self.generate_items(ctx, ids),
            )
        )
        outputs.append(
            (
                ctx.build_dir / f"{ctx.project.name}.sln",
                self.generate_solution(ctx, ids, targets),
            )
        )
        return outputs

    # ------------------------------------------------------------------
    # Configurations
    # ------------------------------------------------------------------

    def architectures(self, ctx: ResolvedContext, index: int) -> Tuple[Architecture, ...]:
        supported = get_platform(PlatformType.WINDOWS).architectures
        return ctx.architectures_for(index, supported)

    def configurations(
        self, ctx: ResolvedContext, index: int
    ) -> List[Tuple[str, Architecture]]:
        return [(p, a) for a in self.architectures(ctx, index) for p in ctx.profiles]

    def project_guid(self, ids: Identifiers, name: str) -> str:
        return ids.guid("vs", "project", name)

    # ------------------------------------------------------------------
    # Project file
    # ------------------------------------------------------------------

    def generate_project(
        self, ctx: ResolvedContext, ids: Identifiers, index: int, targets: List[int]
    ) -> str:
        """
        Build a .vcxproj file.

        Args:
            ctx: Resolved context
            ids: Identifier allocator
            index: Target index
            targets: Indices of every generated target, for project references

        Returns:
            Complete file content with CRLF line endings
        """
        name = ctx.target_names[index]
        target_type = ctx.target_type(index)
        prefix = _windows_path(ctx.input_rel.as_posix())
        configurations = self.configurations(ctx, index)

        lines = [
            '<?xml version="1.0" encoding="utf-8"?>',
            f"<!-- {GENERATED_HEADER} -->",
            f'<Project DefaultTargets="Build" xmlns="{MSBUILD_NS}">',
            '  <ItemGroup Label="ProjectConfigurations">',
        ]
        for profile, architecture in configurations:
            platform = ARCHITECTURE_PLATFORMS[architecture]
            lines.extend(
                [
                    f'    <ProjectConfiguration Include="{profile}|{platform}">',
                    f"      <Configuration>{profile}</Configuration>",
                    f"      <Platform>{platform}</Platform>",
                    "    </ProjectConfiguration>",
                ]
            )
        lines.extend(
            [
                "  </ItemGroup>",
                '  <PropertyGroup Label="Globals">',
                "    <VCProjectVersion>16.0</VCProjectVersion>",
                f"    <ProjectGuid>{{{self.project_guid(ids, name)}}}</ProjectGuid>",
                f"    <RootNamespace>{name}</RootNamespace>",
                "    <WindowsTargetPlatformVersion>10.0</WindowsTargetPlatformVersion>",
                "  </PropertyGroup>",
                '  <Import Project="$(VCTargetsPath)\\Microsoft.Cpp.Default.props" />',
            ]
        )

        resolved: Dict[Tuple[str, Architecture], Settings] = {
            (p, a): ctx.composed_settings(index, p, PlatformType.WINDOWS, a)
            for p, a in configurations
        }

        for (profile, architecture), settings in resolved.items():
            condition = self._condition(profile, architecture)
            lines.extend(
                [
                    f'  <PropertyGroup Condition="{condition}" Label="Configuration">',
                    f"    <ConfigurationType>{CONFIGURATION_TYPES[target_type]}</ConfigurationType>",
                    f"    <PlatformToolset>{PLATFORM_TOOLSET}</PlatformToolset>",
                    "    <CharacterSet>Unicode</CharacterSet>",
                    f"    <UseDebugLibraries>{_bool(settings.optimize in (None, Optimize.NONE))}</UseDebugLibraries>",
                ]
            )
            if settings.optimize == Optimize.FULL:
                lines.append("    <WholeProgramOptimization>true</WholeProgramOptimization>")
            lines.append("  </PropertyGroup>")

        lines.extend(
            [
                '  <Import Project="$(VCTargetsPath)\\Microsoft.Cpp.props" />',
                '  <ImportGroup Label="PropertySheets">',
                '    <Import Project="$(UserRootDir)\\Microsoft.Cpp.$(Platform).user.props" '
                "Condition=\"exists('$(UserRootDir)\\Microsoft.Cpp.$(Platform).user.props')\" "
                'Label="LocalAppDataPlatform" />',
                "  </ImportGroup>",
                '  <PropertyGroup Label="UserMacros" />',
            ]
        )

        for (profile, architecture), settings in resolved.items():
            condition = self._condition(profile, architecture)
            lines.append(f'  <PropertyGroup Condition="{condition}">')
            lines.append(
                f"    <OutDir>$(Platform)\\$(Configuration)\\{name}\\</OutDir>"
            )
            lines.append(
                f"    <IntDir>$(Platform)\\$(Configuration)\\{name}\\obj\\</IntDir>"
            )
            if settings.link_incremental is not None:
                lines.append(
                    f"    <LinkIncremental>{_bool(settings.link_incremental)}</LinkIncremental>"
                )
            lines.append("  </PropertyGroup>")

        for (profile, architecture), settings in resolved.items():
            lines.extend(
                self._item_definitions(ctx, profile, architecture, settings, prefix, target_type)
            )

        lines.append("  <ItemGroup>")
        for owner, f in owned_sources(ctx, index):
            element = item_element(ctx, owner, PurePosixPath(f.as_posix()))
            include = _escape(f"{prefix}\\{_windows_path(f.as_posix())}")
            lines.append(f'    <{element} Include="{include}" />')
        lines.append("  </ItemGroup>")

        references = [
            ctx.target_names[i]
            for i in targets
            if ctx.target_names[i] in ctx.target(index).depends
        ]
        if references:
            lines.append("  <ItemGroup>")
            for reference in references:
                lines.extend(
                    [
                        f'    <ProjectReference Include="{reference}.vcxproj">',
                        f"      <Project>{{{self.project_guid(ids, reference)}}}</Project>",
                        "    </ProjectReference>",
                    ]
                )
            lines.append("  </ItemGroup>")

        lines.extend(
            [
                '  <Import Project="$(VCTargetsPath)\\Microsoft.Cpp.targets" />',
                '  <ImportGroup Label="ExtensionTargets" />',
                "</Project>",
                "",
            ]
        )
        return CRLF.join(lines)

    def _condition(self, profile: str, architecture: Architecture) -> str:
        platform = ARCHITECTURE_PLATFORMS[architecture]
        return f"'$(Configuration)|$(Platform)'=='{profile}|{platform}'"

    def _item_definitions(
        self,
        ctx: ResolvedContext,
        profile: str,
        architecture: Architecture,
        settings: Settings,
        prefix: str,
        target_type: TargetType,
    ) -> List[str]:
        compile_lines = []
        if settings.warning_level is not None:
            compile_lines.append(
                f"<WarningLevel>{WARNING_LEVELS[settings.warning_level]}</WarningLevel>"
            )
        if settings.warning_as_error is not None:
            compile_lines.append(
                f"<TreatWarningAsError>{_bool(settings.warning_as_error)}</TreatWarningAsError>"
            )
        if settings.optimize is not None:
            compile_lines.append(
                f"<Optimization>{OPTIMIZATIONS[settings.optimize]}</Optimization>"
            )
            if settings.optimize != Optimize.NONE:
                compile_lines.append("<FunctionLevelLinking>true</FunctionLevelLinking>")
                compile_lines.append("<IntrinsicFunctions>true</IntrinsicFunctions>")
        if settings.omit_frame_pointer is not None:
            compile_lines.append(
                f"<OmitFramePointers>{_bool(settings.omit_frame_pointer)}</OmitFramePointers>"
            )
        if settings.enable_exceptions is not None:
            value = "Sync" if settings.enable_exceptions else "false"
            compile_lines.append(f"<ExceptionHandling>{value}</ExceptionHandling>")
        if settings.enable_rtti is not None:
            compile_lines.append(
                f"<RuntimeTypeInfo>{_bool(settings.enable_rtti)}</RuntimeTypeInfo>"
            )
        if settings.cxx_standard in CXX_STANDARDS:
            compile_lines.append(
                f"<LanguageStandard>{CXX_STANDARDS[settings.cxx_standard]}</LanguageStandard>"
            )
        if settings.c_standard in C_STANDARDS:
            compile_lines.append(
                f"<LanguageStandard_C>{C_STANDARDS[settings.c_standard]}</LanguageStandard_C>"
            )

        includes = "".join(
            f"{prefix}\\{_windows_path(d)};" for d in settings.include_dirs
        )
        defines = "".join(f"{d};" for d in settings.defines)
        compile_lines.extend(
            [
                "<SDLCheck>true</SDLCheck>",
                "<ConformanceMode>true</ConformanceMode>",
                "<MultiProcessorCompilation>true</MultiProcessorCompilation>",
                f"<DisableSpecificWarnings>{DISABLE_WARNINGS}</DisableSpecificWarnings>",
                f"<AdditionalIncludeDirectories>{_escape(includes)}%(AdditionalIncludeDirectories)</AdditionalIncludeDirectories>",
                f"<PreprocessorDefinitions>{_escape(defines)}%(PreprocessorDefinitions)</PreprocessorDefinitions>",
            ]
        )
        if settings.undefs:
            undefs = ";".join(settings.undefs)
            compile_lines.append(
                f"<UndefinePreprocessorDefinitions>{_escape(undefs)};%(UndefinePreprocessorDefinitions)</UndefinePreprocessorDefinitions>"
            )
        if ctx.env.cxxflags:
            compile_lines.append(
                f"<AdditionalOptions>{_escape(ctx.env.cxxflags)} %(AdditionalOptions)</AdditionalOptions>"
            )

        subsystem = "Windows" if target_type == TargetType.APPLICATION else "Console"
        libs = "".join(f"{lib}.lib;" for lib in settings.libs)
        lib_dirs = "".join(f"{prefix}\\{_windows_path(d)};" for d in settings.lib_dirs)
        link_lines = [
            f"<SubSystem>{subsystem}</SubSystem>",
            f"<AdditionalDependencies>{_escape(libs)}%(AdditionalDependencies)</AdditionalDependencies>",
            f"<AdditionalLibraryDirectories>{_escape(lib_dirs)}%(AdditionalLibraryDirectories)</AdditionalLibraryDirectories>",
        ]
        if settings.optimize not in (None, Optimize.NONE):
            link_lines.append("<EnableCOMDATFolding>true</EnableCOMDATFolding>")
            link_lines.append("<OptimizeReferences>true</OptimizeReferences>")
        if ctx.env.ldflags:
            link_lines.append(
                f"<AdditionalOptions>{_escape(ctx.env.ldflags)} %(AdditionalOptions)</AdditionalOptions>"
            )

        section = "Lib" if target_type == TargetType.STATIC_LIBRARY else "Link"
        condition = self._condition(profile, architecture)
        lines = [f'  <ItemDefinitionGroup Condition="{condition}">', "    <ClCompile>"]
        lines.extend(f"      {line}" for line in compile_lines)
        lines.append("    </ClCompile>")
        lines.append(f"    <{section}>")
        if section == "Lib":
            lines.append(f"      {link_lines[1]}")
            lines.append(f"      {link_lines[2]}")
        else:
            lines.extend(f"      {line}" for line in link_lines)
        lines.append(f"    </{section}>")
        lines.append("  </ItemDefinitionGroup>")
        return lines

    # ------------------------------------------------------------------
    # Filters file
    # ------------------------------------------------------------------

    def generate_filters(self, ctx: ResolvedContext, ids: Identifiers, index: int) -> str:
        """Build the .vcxproj.filters file mirroring the source folders."""
        name = ctx.target_names[index]
        prefix = _windows_path(ctx.input_rel.as_posix())
        sources = owned_sources(ctx, index)

        folders: List[str] = []
        for owner in list(ctx.extends[index]) + [index]:
            for f in ctx.sources[owner]:
                path = PurePosixPath(f.as_posix())
                folder = path if f.is_dir else path.parent
                self._add_folder(folders, folder)

        lines = [
            '<?xml version="1.0" encoding="utf-8"?>',
            f'<Project ToolsVersion="4.0" xmlns="{MSBUILD_NS}">',
            "  <ItemGroup>",
        ]
        for folder in folders:
            lines.extend(
                [
                    f'    <Filter Include="{_escape(folder)}">',
                    f"      <UniqueIdentifier>{{{ids.guid('vs', 'filter', name, folder)}}}</UniqueIdentifier>",
                    "    </Filter>",
                ]
            )
        lines.append("  </ItemGroup>")
        lines.append("  <ItemGroup>")
        for owner, f in sources:
            path = PurePosixPath(f.as_posix())
            element = item_element(ctx, owner, path)
            include = _escape(f"{prefix}\\{_windows_path(f.as_posix())}")
            if str(path.parent) == ".":
                lines.append(f'    <{element} Include="{include}" />')
                continue
            lines.extend(
                [
                    f'    <{element} Include="{include}">',
                    f"      <Filter>{_escape(_windows_path(str(path.parent)))}</Filter>",
                    f"    </{element}>",
                ]
            )
        lines.extend(["  </ItemGroup>", "</Project>", ""])
        return CRLF.join(lines)

    def _add_folder(self, folders: List[str], folder: PurePosixPath) -> None:
        if str(folder) == ".":
            return
        key = _windows_path(str(folder))
        if key in folders:
            return
        self._add_folder(folders, folder.parent)
        folders.append(key)

    # ------------------------------------------------------------------
    # Items project
    # ------------------------------------------------------------------

    def generate_items(self, ctx: ResolvedContext, ids: Identifiers) -> str:
        """Build the shared items project listing root files (the metafiles)."""
        prefix = _windows_path(ctx.input_rel.as_posix())
        lines = [
            '<?xml version="1.0" encoding="utf-8"?>',
            f'<Project xmlns="{MSBUILD_NS}">',
            '  <PropertyGroup Label="Globals">',
            f"    <ItemsProjectGuid>{{{self.project_guid(ids, ctx.project.name + '.items')}}}</ItemsProjectGuid>",
            "  </PropertyGroup>",
            "  <ItemGroup>",
        ]
        for f in ctx.metafiles:
            if f.is_file:
                include = _escape(f"$(MSBuildThisFileDirectory){prefix}\\{f.name}")
                lines.append(f'    <None Include="{include}" />')
        lines.extend(["  </ItemGroup>", "</Project>", ""])
        return CRLF.join(lines)

    # ------------------------------------------------------------------
    # Solution file
    # ------------------------------------------------------------------

    def generate_solution(
        self, ctx: ResolvedContext, ids: Identifiers, targets: List[int]
    ) -> str:
        """Build the .sln file (UTF-8 with byte order mark)."""
        major = VS_VERSION.split(".")[0]
        items_guid = self.project_guid(ids, ctx.project.name + ".items")

        projects: List[Tuple[str, str, str, Optional[int]]] = [
            (ctx.project.name, f"{ctx.project.name}.vcxitems", items_guid, None)
        ]
        for index in targets:
            name = ctx.target_names[index]
            projects.append((name, f"{name}.vcxproj", self.project_guid(ids, name), index))

        lines = [
            "\ufeff",
            "Microsoft Visual Studio Solution File, Format Version 12.00",
            f"# Visual Studio Version {major}",
            f"VisualStudioVersion = {VS_VERSION}",
            "MinimumVisualStudioVersion = 10.0.40219.1",
        ]
        for name, path, guid, _ in projects:
            lines.append(
                f'Project("{{{CXX_PROJECT_KIND}}}") = "{name}", "{path}", "{{{guid}}}"'
            )
            lines.append("EndProject")

        profiles = ctx.profiles
        architectures = [
            a
            for a in get_platform(PlatformType.WINDOWS).architectures
            if any(a in self.architectures(ctx, i) for i in targets)
        ]

        lines.append("Global")
        lines.append("\tGlobalSection(SolutionConfigurationPlatforms) = preSolution")
        for profile in profiles:
            for architecture in architectures:
                platform = SOLUTION_PLATFORMS[architecture]
                lines.append(f"\t\t{profile}|{platform} = {profile}|{platform}")
        lines.append("\tEndGlobalSection")

        lines.append("\tGlobalSection(ProjectConfigurationPlatforms) = postSolution")
        for name, _, guid, index in projects:
            if index is None:
                continue
            supported = self.architectures(ctx, index)
            for profile in profiles:
                for architecture in architectures:
                    if architecture not in supported:
                        continue
                    solution_platform = SOLUTION_PLATFORMS[architecture]
                    project_platform = ARCHITECTURE_PLATFORMS[architecture]
                    for action in ("ActiveCfg", "Build.0"):
                        lines.append(
                            f"\t\t{{{guid}}}.{profile}|{solution_platform}.{action} = "
                            f"{profile}|{project_platform}"
                        )
        lines.append("\tEndGlobalSection")

        lines.extend(
            [
                "\tGlobalSection(SolutionProperties) = preSolution",
                "\t\tHideSolutionNode = FALSE",
                "\tEndGlobalSection",
                "\tGlobalSection(ExtensibilityGlobals) = postSolution",
                f"\t\tSolutionGuid = {{{ids.guid('vs', 'solution', ctx.project.name)}}}",
                "\tEndGlobalSection",
                "EndGlobal",
                "",
            ]
        )
        logger.debug(f"VS: {len(targets)} project(s), {len(architectures)} platform(s)")
        return CRLF.join(lines)
