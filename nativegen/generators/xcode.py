"""
Xcode project generator.

Writes ``<project>.xcodeproj/project.pbxproj`` for the Apple platforms
(MacOS, IOS, TVOS, WatchOS). The file is an old-style (NeXTSTEP) property
list: one dictionary of objects keyed by 24 hex digit identifiers, each with
an ``isa`` type, grouped in ``/* Begin <isa> section */`` blocks.

Every (target, platform) pair becomes one PBXNativeTarget. When a target
builds for several Apple platforms its products are named
``"<target> (<platform>)"`` so they stay distinguishable in the IDE.
Application targets also get an ``Info.plist`` under
``<target>_<platform>/`` in the build folder.

With ``project.xcode.group_by_target`` (the default) the navigator holds one
group per target, plus a "Shared" group for files several targets list.
Otherwise every file sits in the main group. Xcode lets a file reference
belong to a single group, hence the Shared group.
"""

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from nativegen.config.settings import Settings
from nativegen.config.types import (
    Architecture,
    CStandard,
    CXXStandard,
    Optimize,
    PlatformType,
    TargetType,
)
from nativegen.context import ResolvedContext
from nativegen.core.platforms import get_platform
from nativegen.generators.base import (
    Generator,
    Identifiers,
    Output,
    generated_targets,
    owned_sources,
)
from nativegen.generators.flags import WARNING_FLAGS, prefixed

logger = logging.getLogger(__name__)

APPLE_PLATFORMS = (
    PlatformType.MACOS,
    PlatformType.IOS,
    PlatformType.TVOS,
    PlatformType.WATCHOS,
)

OBJECT_VERSION = 50
SOURCE_ROOT = "$(SRCROOT)"
SOURCES = "Sources"
FRAMEWORKS = "Frameworks"
RESOURCES = "Resources"

DEPLOYMENT_SETTINGS = {
    PlatformType.MACOS: {"MACOSX_DEPLOYMENT_TARGET": "10.14", "SDKROOT": "macosx"},
    PlatformType.IOS: {
        "IPHONEOS_DEPLOYMENT_TARGET": "13.0",
        "SDKROOT": "iphoneos",
        "TARGETED_DEVICE_FAMILY": "1,2",
    },
    PlatformType.TVOS: {
        "TVOS_DEPLOYMENT_TARGET": "13.0",
        "SDKROOT": "appletvos",
        "TARGETED_DEVICE_FAMILY": "3",
    },
    PlatformType.WATCHOS: {
        "WATCHOS_DEPLOYMENT_TARGET": "6.0",
        "SDKROOT": "watchos",
        "TARGETED_DEVICE_FAMILY": "4",
    },
}

ARCHS = {
    Architecture.X86: "i386",
    Architecture.X64: "x86_64",
    Architecture.ARM: "armv7",
    Architecture.ARM64: "arm64",
}

PRODUCT_TYPES = {
    TargetType.CONSOLE: ("tool", "compiled.mach-o.executable"),
    TargetType.APPLICATION: ("application", "wrapper.application"),
    TargetType.STATIC_LIBRARY: ("library.static", "archive.ar"),
    TargetType.SHARED_LIBRARY: ("library.dynamic", "compiled.mach-o.dylib"),
}

LIBRARY_TYPES = (TargetType.STATIC_LIBRARY, TargetType.SHARED_LIBRARY)

# Extension -> (build phase, lastKnownFileType); files without a phase are
# only listed in the navigator.
FILE_TYPES = {
    "h": (None, "sourcecode.c.h"),
    "hh": (None, "sourcecode.cpp.h"),
    "hpp": (None, "sourcecode.cpp.h"),
    "hxx": (None, "sourcecode.cpp.h"),
    "inl": (None, "sourcecode.cpp.h"),
    "c": (SOURCES, "sourcecode.c.c"),
    "cc": (SOURCES, "sourcecode.cpp.cpp"),
    "cpp": (SOURCES, "sourcecode.cpp.cpp"),
    "cxx": (SOURCES, "sourcecode.cpp.cpp"),
    "m": (SOURCES, "sourcecode.c.objc"),
    "mm": (SOURCES, "sourcecode.cpp.objcpp"),
    "plist": (RESOURCES, "text.plist.xml"),
    "bmp": (None, "image.bmp"),
    "jpg": (None, "image.jpeg"),
    "jpeg": (None, "image.jpeg"),
    "png": (None, "image.png"),
    "xml": (None, "text.xml"),
}

OPTIMIZATION_LEVELS = {
    Optimize.NONE: "0",
    Optimize.SIZE: "s",
    Optimize.SPEED: "2",
    Optimize.FULL: "3",
}

C_STANDARDS = {CStandard.C89: "c89", CStandard.C99: "c99", CStandard.C11: "c11"}

CXX_STANDARDS = {
    CXXStandard.CXX03: "c++03",
    CXXStandard.CXX11: "c++11",
    CXXStandard.CXX14: "c++14",
    CXXStandard.CXX17: "c++17",
    CXXStandard.CXX20: "c++20",
}

INFO_PLIST = """\
<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
  <key>CFBundleDevelopmentRegion</key>
  <string>$(DEVELOPMENT_LANGUAGE)</string>
  <key>CFBundleExecutable</key>
  <string>$(EXECUTABLE_NAME)</string>
  <key>CFBundleIdentifier</key>
  <string>$(PRODUCT_BUNDLE_IDENTIFIER)</string>
  <key>CFBundleInfoDictionaryVersion</key>
  <string>6.0</string>
  <key>CFBundleName</key>
  <string>$(PRODUCT_NAME)</string>
  <key>CFBundlePackageType</key>
  <string>$(PRODUCT_BUNDLE_PACKAGE_TYPE)</string>
  <key>CFBundleShortVersionString</key>
  <string>{version}</string>
  <key>CFBundleVersion</key>
  <string>1</string>
</dict>
</plist>
"""

_BARE_STRING = re.compile(r"^[A-Za-z0-9_$/.]+$")


# ============================================================================
# Property list rendering
# ============================================================================


@dataclass(frozen=True)
class Ref:
    """Reference to another object, rendered with its comment."""

    id: str
    comment: str

    def __str__(self) -> str:
        if not self.comment:
            return self.id
        return f"{self.id} /* {self.comment} */"


def quote(value: str) -> str:
    """Quote a property list string unless it is a bare word."""
    if _BARE_STRING.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def render_value(value: Any, depth: int) -> str:
    """Render a value nested ``depth`` tabs deep."""
    if isinstance(value, Ref):
        return str(value)
    if isinstance(value, (list, tuple)):
        inner = "\t" * (depth + 1)
        items = "".join(f"{inner}{render_value(v, depth + 1)},\n" for v in value)
        return "(\n" + items + "\t" * depth + ")"
    if isinstance(value, dict):
        inner = "\t" * (depth + 1)
        items = "".join(
            f"{inner}{quote(str(k))} = {render_value(v, depth + 1)};\n"
            for k, v in value.items()
        )
        return "{\n" + items + "\t" * depth + "}"
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return quote(str(value))


class PbxObjects:
    """The objects of a project.pbxproj, grouped in sections by isa."""

    def __init__(self):
        self.sections: Dict[str, List[str]] = {}

    def add(self, ref: Ref, isa: str, properties: Dict[str, Any], inline=False):
        """Add one object; inline objects are written on a single line."""
        if inline:
            body = "".join(
                f"{k} = {render_value(v, 0)}; " for k, v in properties.items()
            )
            line = f"\t\t{ref} = {{isa = {isa}; {body}}};"
        else:
            content = OrderedDict(isa=isa)
            content.update(properties)
            line = f"\t\t{ref} = {render_value(dict(content), 2)};"
        self.sections.setdefault(isa, []).append(line)

    def lines(self) -> List[str]:
        lines: List[str] = []
        for isa in sorted(self.sections):
            lines.append(f"/* Begin {isa} section */")
            lines.extend(self.sections[isa])
            lines.append(f"/* End {isa} section */")
            lines.append("")
        return lines


class Group:
    """A PBXGroup: a navigator folder of file references and subgroups."""

    def __init__(self, ids: Identifiers, key: str, name=None, path=None):
        self.ids = ids
        self.key = key
        self.id = ids.object_id("xcode", "group", key)
        self.name = name
        self.path = path
        self.children: List[Ref] = []
        self.groups: List["Group"] = []

    @property
    def label(self) -> str:
        return self.name or self.path or ""

    @property
    def ref(self) -> Ref:
        return Ref(self.id, self.label)

    def add(self, ref: Ref) -> None:
        self.children.append(ref)

    def add_group(self, group: "Group") -> "Group":
        self.add(group.ref)
        self.groups.append(group)
        return group

    def add_path(self, ref: Ref, path: PurePosixPath) -> None:
        """Add a file reference below one subgroup per parent directory."""
        group = self
        for part in path.parts[:-1]:
            existing = [g for g in group.groups if g.path == part]
            if existing:
                group = existing[0]
            else:
                group = group.add_group(
                    Group(self.ids, f"{group.key}/{part}", path=part)
                )
        group.add(ref)

    def write(self, objects: PbxObjects) -> None:
        properties: Dict[str, Any] = {"children": self.children}
        if self.name:
            properties["name"] = self.name
        if self.path:
            properties["path"] = self.path
        properties["sourceTree"] = "<group>"
        objects.add(Ref(self.id, self.label), "PBXGroup", properties)
        for group in self.groups:
            group.write(objects)


def file_type(path: PurePosixPath) -> Tuple[Optional[str], str]:
    """Build phase and Xcode file type of a source file."""
    return FILE_TYPES.get(path.suffix[1:].lower(), (None, "text"))


def product_path(name: str, target_type: TargetType) -> str:
    if target_type == TargetType.APPLICATION:
        return f"{name}.app"
    if target_type == TargetType.STATIC_LIBRARY:
        return f"lib{name}.a"
    if target_type == TargetType.SHARED_LIBRARY:
        return f"lib{name}.dylib"
    return name


def bundle_identifier(project_name: str, target_name: str) -> str:
    parts = [re.sub(r"[^A-Za-z0-9.-]", "-", n) for n in (project_name, target_name)]
    return "com." + ".".join(parts)


def setting_values(settings: Settings, env) -> Dict[str, Any]:
    """Xcode build settings for one resolved settings layer."""
    values: Dict[str, Any] = {}
    if settings.include_dirs:
        values["HEADER_SEARCH_PATHS"] = [
            prefixed(SOURCE_ROOT, d) for d in settings.include_dirs
        ] + ["$(inherited)"]
    if settings.defines:
        values["GCC_PREPROCESSOR_DEFINITIONS"] = list(settings.defines) + [
            "$(inherited)"
        ]
    if settings.lib_dirs:
        values["LIBRARY_SEARCH_PATHS"] = [
            prefixed(SOURCE_ROOT, d) for d in settings.lib_dirs
        ] + ["$(inherited)"]
    if settings.optimize is not None:
        values["GCC_OPTIMIZATION_LEVEL"] = OPTIMIZATION_LEVELS[settings.optimize]
    if settings.warning_as_error is not None:
        values["GCC_TREAT_WARNINGS_AS_ERRORS"] = _yes(settings.warning_as_error)
    if settings.strict_aliasing is not None:
        values["GCC_STRICT_ALIASING"] = _yes(settings.strict_aliasing)
    if settings.enable_exceptions is not None:
        values["GCC_ENABLE_CPP_EXCEPTIONS"] = _yes(settings.enable_exceptions)
    if settings.enable_rtti is not None:
        values["GCC_ENABLE_CPP_RTTI"] = _yes(settings.enable_rtti)
    if settings.c_standard is not None:
        values["GCC_C_LANGUAGE_STANDARD"] = C_STANDARDS[settings.c_standard]
    if settings.cxx_standard is not None:
        values["CLANG_CXX_LANGUAGE_STANDARD"] = CXX_STANDARDS[settings.cxx_standard]
    if settings.warning_level is not None:
        values["WARNING_CFLAGS"] = list(WARNING_FLAGS[settings.warning_level])

    cflags = [f"-U{u}" for u in settings.undefs]
    if settings.omit_frame_pointer is not None:
        cflags.append(
            "-fomit-frame-pointer"
            if settings.omit_frame_pointer
            else "-fno-omit-frame-pointer"
        )
    cflags.extend(env.cflags.split())
    cxxflags = env.cxxflags.split()
    ldflags = [f"-l{lib}" for lib in settings.libs] + env.ldflags.split()

    if cflags:
        values["OTHER_CFLAGS"] = cflags + ["$(inherited)"]
    if cxxflags:
        values["OTHER_CPLUSPLUSFLAGS"] = ["$(OTHER_CFLAGS)"] + cxxflags
    if ldflags:
        values["OTHER_LDFLAGS"] = ldflags + ["$(inherited)"]
    return values


def _yes(value: bool) -> str:
    return "YES" if value else "NO"


# ============================================================================
# Generator
# ============================================================================


@dataclass
class NativeTarget:
    """One PBXNativeTarget: a target built for one Apple platform."""

    index: int
    platform: PlatformType
    name: str
    product_name: str
    target_type: TargetType
    architectures: Tuple[Architecture, ...]

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.platform.value)


class XcodeGenerator(Generator):
    """Generates an Xcode project for the Apple platforms."""

    name = "xcode"
    platforms = frozenset(APPLE_PLATFORMS)

    def render(self, ctx: ResolvedContext, ids: Identifiers) -> List[Output]:
        natives = self.native_targets(ctx)
        project_dir = ctx.build_dir / f"{ctx.project.name}.xcodeproj"
        pbxproj = self.generate_pbxproj(ctx, ids, natives)
        outputs = [(project_dir / "project.pbxproj", pbxproj)]
        for native in natives:
            if native.target_type == TargetType.APPLICATION:
                outputs.append(
                    (
                        ctx.build_dir / self.plist_path(native),
                        INFO_PLIST.format(version=ctx.project.version),
                    )
                )
        return outputs

    def native_targets(self, ctx: ResolvedContext) -> List[NativeTarget]:
        """Every (target, Apple platform) pair that produces a product."""
        pairs = []
        for platform in APPLE_PLATFORMS:
            supported = get_platform(platform).architectures
            for index in generated_targets(ctx, platform):
                architectures = ctx.architectures_for(index, supported)
                if not architectures:
                    logger.debug(
                        f"Xcode: {ctx.target_names[index]} has no architecture "
                        f"for {platform}"
                    )
                    continue
                pairs.append((index, platform, architectures))

        counts: Dict[int, int] = {}
        for index, _, _ in pairs:
            counts[index] = counts.get(index, 0) + 1

        natives = []
        for index, platform, architectures in sorted(
            pairs, key=lambda p: (p[0], APPLE_PLATFORMS.index(p[1]))
        ):
            name = ctx.target_names[index]
            product_name = f"{name} ({platform})" if counts[index] > 1 else name
            natives.append(
                NativeTarget(
                    index=index,
                    platform=platform,
                    name=name,
                    product_name=product_name,
                    target_type=ctx.target_type(index),
                    architectures=architectures,
                )
            )
        return natives

    def plist_path(self, native: NativeTarget) -> PurePosixPath:
        return PurePosixPath(f"{native.name}_{native.platform}") / "Info.plist"

    def generate_pbxproj(
        self, ctx: ResolvedContext, ids: Identifiers, natives: List[NativeTarget]
    ) -> str:
        """
        Build the project.pbxproj text.

        Args:
            ctx: Resolved context
            ids: Identifier allocator; object IDs are derived from it
            natives: Native targets from ``native_targets``

        Returns:
            Complete file content
        """
        objects = PbxObjects()
        group_by_target = ctx.project.xcode.group_by_target

        project_ref = Ref(ids.object_id("xcode", "project"), "Project object")
        main_group = Group(ids, "main")
        shared_group = Group(ids, "shared", name="Shared")
        products_group = Group(ids, "products", name="Products")
        target_groups = [
            Group(ids, f"target/{name}", name=name) for name in ctx.target_names
        ]

        # File references, each owned by exactly one group.
        owners: Dict[PurePosixPath, List[int]] = OrderedDict()
        for index, files in enumerate(ctx.sources):
            for f in files:
                if f.is_file:
                    owners.setdefault(PurePosixPath(f.as_posix()), []).append(index)

        file_refs: Dict[PurePosixPath, Ref] = {}
        for path, owner_indices in owners.items():
            ref = Ref(ids.object_id("xcode", "file", path.as_posix()), path.name)
            file_refs[path] = ref
            objects.add(
                ref,
                "PBXFileReference",
                {
                    "lastKnownFileType": file_type(path)[1],
                    "path": path.name,
                    "sourceTree": "<group>",
                },
                inline=True,
            )
            if not group_by_target:
                group = main_group
            elif len(set(owner_indices)) > 1:
                group = shared_group
            else:
                group = target_groups[owner_indices[0]]
            group.add_path(ref, path)

        # Products and native targets.
        product_refs: Dict[Tuple[str, str], Ref] = {}
        target_refs: Dict[Tuple[str, str], Ref] = {}
        for native in natives:
            _, explicit_type = PRODUCT_TYPES[native.target_type]
            path = product_path(native.name, native.target_type)
            product_ref = Ref(ids.object_id("xcode", "product", *native.key), path)
            product_refs[native.key] = product_ref
            target_refs[native.key] = Ref(
                ids.object_id("xcode", "target", *native.key), native.product_name
            )
            objects.add(
                product_ref,
                "PBXFileReference",
                {
                    "explicitFileType": explicit_type,
                    "includeInIndex": 0,
                    "name": native.product_name,
                    "path": path,
                    "sourceTree": "BUILT_PRODUCTS_DIR",
                },
                inline=True,
            )
            products_group.add(product_ref)

        for native in natives:
            group = target_groups[native.index] if group_by_target else main_group
            self._write_native_target(
                ctx,
                ids,
                objects,
                native,
                group,
                file_refs,
                product_refs,
                target_refs,
                project_ref,
            )

        # Navigator tree.
        if group_by_target:
            for group in target_groups:
                if group.children:
                    main_group.add_group(group)
            if shared_group.children:
                main_group.add_group(shared_group)
        main_group.add_group(products_group)
        main_group.write(objects)

        # Project-level configurations.
        project_configs = self._write_configurations(
            ids,
            objects,
            ("project",),
            {
                profile: {
                    "ALWAYS_SEARCH_USER_PATHS": "NO",
                    "CLANG_CXX_LANGUAGE_STANDARD": "c++17",
                    "CLANG_CXX_LIBRARY": "libc++",
                    "GCC_C_LANGUAGE_STANDARD": "c11",
                }
                for profile in ctx.profiles
            },
            ctx,
            f'PBXProject "{ctx.project.name}"',
        )

        objects.add(
            project_ref,
            "PBXProject",
            {
                "attributes": {
                    "BuildIndependentTargetsInParallel": "YES",
                    "LastUpgradeCheck": 1100,
                    "ORGANIZATIONNAME": ctx.project.name,
                    "TargetAttributes": {
                        target_refs[n.key].id: {"CreatedOnToolsVersion": "11.0"}
                        for n in natives
                    },
                },
                "buildConfigurationList": project_configs,
                "compatibilityVersion": "Xcode 9.3",
                "developmentRegion": "en",
                "hasScannedForEncodings": 0,
                "knownRegions": ["en", "Base"],
                "mainGroup": main_group.id,
                "productRefGroup": products_group.ref,
                "projectDirPath": ctx.input_rel.as_posix(),
                "projectRoot": "",
                "targets": [target_refs[n.key] for n in natives],
            },
        )

        lines = [
            "// !$*UTF8*$!",
            "{",
            "\tarchiveVersion = 1;",
            "\tclasses = {",
            "\t};",
            f"\tobjectVersion = {OBJECT_VERSION};",
            "\tobjects = {",
            "",
        ]
        lines.extend(objects.lines())
        lines.extend(["\t};", f"\trootObject = {project_ref};", "}", ""])

        logger.debug(f"Xcode: {len(natives)} native target(s)")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def _write_native_target(
        self,
        ctx: ResolvedContext,
        ids: Identifiers,
        objects: PbxObjects,
        native: NativeTarget,
        group: Group,
        file_refs: Dict[PurePosixPath, Ref],
        product_refs: Dict[Tuple[str, str], Ref],
        target_refs: Dict[Tuple[str, str], Ref],
        project_ref: Ref,
    ) -> None:
        phases: Dict[str, List[Ref]] = {SOURCES: [], FRAMEWORKS: [], RESOURCES: []}
        seen = set()

        for owner, f in owned_sources(ctx, native.index):
            path = PurePosixPath(f.as_posix())
            phase = file_type(path)[0]
            if phase is None or path in seen:
                continue
            if not ctx.match_file(owner, f.path, native.platform):
                continue
            seen.add(path)
            build_file = self._build_file(
                ids, objects, native, phase, file_refs[path], path.as_posix()
            )
            phases[phase].append(build_file)

        build_settings: Dict[str, Any] = {}
        if ctx.env.xcode_team:
            build_settings["DEVELOPMENT_TEAM"] = ctx.env.xcode_team

        if native.target_type == TargetType.APPLICATION:
            plist = ctx.build_rel.as_posix() + "/" + self.plist_path(native).as_posix()
            plist_ref = Ref(
                ids.object_id("xcode", "plist", *native.key),
                f"Info.plist ({native.platform})"
                if native.product_name != native.name
                else "Info.plist",
            )
            objects.add(
                plist_ref,
                "PBXFileReference",
                {
                    "lastKnownFileType": "text.plist.xml",
                    "name": plist_ref.comment,
                    "path": plist,
                    "sourceTree": "<group>",
                },
                inline=True,
            )
            group.add(plist_ref)
            build_settings["INFOPLIST_FILE"] = plist
            build_settings["CODE_SIGN_STYLE"] = "Automatic"
            build_settings["PRODUCT_BUNDLE_IDENTIFIER"] = bundle_identifier(
                ctx.project.name, native.name
            )

        if native.target_type in LIBRARY_TYPES:
            build_settings["EXECUTABLE_PREFIX"] = "lib"
            build_settings["SKIP_INSTALL"] = "YES"

        build_settings["PRODUCT_NAME"] = native.name
        build_settings.update(DEPLOYMENT_SETTINGS[native.platform])
        if native.architectures != get_platform(native.platform).architectures:
            build_settings["ARCHS"] = [ARCHS[a] for a in native.architectures]

        # Dependencies on other targets built for the same platform.
        dependencies: List[Ref] = []
        for depend in ctx.target(native.index).depends:
            key = (depend, native.platform.value)
            if key not in target_refs:
                continue
            dependencies.append(
                self._dependency(
                    ids, objects, native, depend, target_refs[key], project_ref
                )
            )
            dependency_type = ctx.target_type(ctx.target_index(depend))
            if dependency_type in LIBRARY_TYPES:
                phases[FRAMEWORKS].append(
                    self._build_file(
                        ids, objects, native, FRAMEWORKS, product_refs[key], depend
                    )
                )

        phase_refs = []
        for phase, build_files in phases.items():
            ref = Ref(ids.object_id("xcode", "phase", phase, *native.key), phase)
            objects.add(
                ref,
                f"PBX{phase}BuildPhase",
                {
                    "buildActionMask": 2147483647,
                    "files": build_files,
                    "runOnlyForDeploymentPostprocessing": 0,
                },
            )
            phase_refs.append(ref)

        configs = {}
        for profile in ctx.profiles:
            settings = ctx.composed_settings(native.index, profile, native.platform)
            values = dict(build_settings)
            values.update(setting_values(settings, ctx.env))
            configs[profile] = values

        config_list = self._write_configurations(
            ids,
            objects,
            ("target",) + native.key,
            configs,
            ctx,
            f'PBXNativeTarget "{native.product_name}"',
        )

        product_type, _ = PRODUCT_TYPES[native.target_type]
        objects.add(
            target_refs[native.key],
            "PBXNativeTarget",
            {
                "buildConfigurationList": config_list,
                "buildPhases": phase_refs,
                "buildRules": [],
                "dependencies": dependencies,
                "name": native.product_name,
                "productName": native.product_name,
                "productReference": product_refs[native.key],
                "productType": f"com.apple.product-type.{product_type}",
            },
        )

    def _build_file(
        self,
        ids: Identifiers,
        objects: PbxObjects,
        native: NativeTarget,
        phase: str,
        file_ref: Ref,
        key: str,
    ) -> Ref:
        ref = Ref(
            ids.object_id("xcode", "build", phase, *native.key, key),
            f"{file_ref.comment} in {phase}",
        )
        objects.add(ref, "PBXBuildFile", {"fileRef": file_ref}, inline=True)
        return ref

    def _dependency(
        self,
        ids: Identifiers,
        objects: PbxObjects,
        native: NativeTarget,
        depend: str,
        depend_ref: Ref,
        project_ref: Ref,
    ) -> Ref:
        proxy = Ref(
            ids.object_id("xcode", "proxy", *native.key, depend),
            "PBXContainerItemProxy",
        )
        objects.add(
            proxy,
            "PBXContainerItemProxy",
            {
                "containerPortal": project_ref,
                "proxyType": 1,
                "remoteGlobalIDString": depend_ref.id,
                "remoteInfo": depend_ref.comment,
            },
        )
        dependency = Ref(
            ids.object_id("xcode", "dependency", *native.key, depend),
            "PBXTargetDependency",
        )
        objects.add(
            dependency,
            "PBXTargetDependency",
            {"target": depend_ref, "targetProxy": proxy},
        )
        return dependency

    # ------------------------------------------------------------------
    # Configurations
    # ------------------------------------------------------------------

    def _write_configurations(
        self,
        ids: Identifiers,
        objects: PbxObjects,
        key: Tuple[str, ...],
        configs: Dict[str, Dict[str, Any]],
        ctx: ResolvedContext,
        owner: str,
    ) -> Ref:
        refs = []
        for profile, values in configs.items():
            ref = Ref(ids.object_id("xcode", "configuration", *key, profile), profile)
            objects.add(
                ref,
                "XCBuildConfiguration",
                {"buildSettings": values, "name": profile},
            )
            refs.append(ref)

        config_list = Ref(
            ids.object_id("xcode", "configurations", *key),
            f"Build configuration list for {owner}",
        )
        objects.add(
            config_list,
            "XCConfigurationList",
            {
                "buildConfigurations": refs,
                "defaultConfigurationIsVisible": 0,
                "defaultConfigurationName": default_configuration(ctx.profiles),
            },
        )
        return config_list


def default_configuration(profiles: Tuple[str, ...]) -> str:
    return "Release" if "Release" in profiles else profiles[0]
