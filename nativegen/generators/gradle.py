"""
Gradle project generator.

Writes ``settings.gradle`` and ``build.gradle`` wrapping the CMake project the
cmake generator emits next to them, plus a native activity manifest when the
project has an Application target.
"""

import logging
from typing import List, Optional

from nativegen.config.types import Architecture, Optimize, PlatformType, TargetType
from nativegen.context import ResolvedContext
from nativegen.core.platforms import get_platform
from nativegen.generators.base import (
    GENERATED_HEADER,
    Generator,
    Identifiers,
    Output,
    generated_targets,
)
from nativegen.generators.cmake import CMAKE_MINIMUM_VERSION

logger = logging.getLogger(__name__)

DEFAULT_API_LEVEL = 21

ANDROID_ABIS = {
    Architecture.ARM: "armeabi-v7a",
    Architecture.ARM64: "arm64-v8a",
    Architecture.X86: "x86",
    Architecture.X64: "x86_64",
}


class GradleGenerator(Generator):
    """Generates Gradle build files for Android builds."""

    name = "gradle"
    platforms = frozenset({PlatformType.ANDROID})

    def render(self, ctx: ResolvedContext, ids: Identifiers) -> List[Output]:
        outputs = [
            (ctx.build_dir / "settings.gradle", self.generate_settings(ctx)),
            (ctx.build_dir / "build.gradle", self.generate_build(ctx)),
        ]
        application = self._application(ctx)
        if application is not None:
            outputs.append(
                (
                    ctx.build_dir / "src" / "main" / "AndroidManifest.xml",
                    self.generate_manifest(ctx, application),
                )
            )
        return outputs

    def generate_settings(self, ctx: ResolvedContext) -> str:
        return "\n".join(
            [
                f"// {GENERATED_HEADER}",
                f"rootProject.name = '{ctx.project.name}'",
                "",
            ]
        )

    def generate_build(self, ctx: ResolvedContext) -> str:
        """
        Build the build.gradle text.

        Build types mirror the profile catalog. Profiles that resolve to no
        optimization start from Gradle's debug type, the others from release.
        """
        api_level = self.api_level(ctx)
        plugin = (
            "com.android.application"
            if self._application(ctx) is not None
            else "com.android.library"
        )

        lines = [
            f"// {GENERATED_HEADER}",
            f"apply plugin: '{plugin}'",
            "",
            "android {",
            f"    compileSdkVersion {api_level}",
            "",
            "    defaultConfig {",
            f"        minSdkVersion {api_level}",
            f"        targetSdkVersion {api_level}",
            f"        versionName '{ctx.project.version}'",
        ]

        abis = self.abis(ctx)
        if abis:
            lines.append("        ndk {")
            lines.append(f"            abiFilters {', '.join(repr(a) for a in abis)}")
            lines.append("        }")
        lines.append("    }")
        lines.append("")

        lines.append("    buildTypes {")
        for profile in ctx.profiles:
            settings = ctx.catalog.project_settings(profile, PlatformType.ANDROID)
            debuggable = settings.optimize in (None, Optimize.NONE)
            base = "debug" if debuggable else "release"
            lines.append(f"        {profile.lower()} {{")
            if profile.lower() != base:
                lines.append(f"            initWith {base}")
            lines.append(f"            jniDebuggable {str(debuggable).lower()}")
            lines.append("        }")
        lines.append("    }")
        lines.append("")

        lines.extend(
            [
                "    externalNativeBuild {",
                "        cmake {",
                '            path "CMakeLists.txt"',
                f'            version "{CMAKE_MINIMUM_VERSION}"',
                "        }",
                "    }",
                "}",
                "",
            ]
        )
        return "\n".join(lines)

    def generate_manifest(self, ctx: ResolvedContext, index: int) -> str:
        name = ctx.target_names[index]
        api_level = self.api_level(ctx)
        return "\n".join(
            [
                '<?xml version="1.0" encoding="utf-8"?>',
                f"<!-- {GENERATED_HEADER} -->",
                '<manifest xmlns:android="http://schemas.android.com/apk/res/android"',
                f'          package="org.nativegen.{_package_name(ctx.project.name)}"',
                f'          android:versionName="{ctx.project.version}">',
                f'  <uses-sdk android:minSdkVersion="{api_level}" />',
                f'  <application android:label="{ctx.project.name}" android:hasCode="false">',
                '    <activity android:name="android.app.NativeActivity"',
                '              android:exported="true">',
                f'      <meta-data android:name="android.app.lib_name" android:value="{name}" />',
                "      <intent-filter>",
                '        <action android:name="android.intent.action.MAIN" />',
                '        <category android:name="android.intent.category.LAUNCHER" />',
                "      </intent-filter>",
                "    </activity>",
                "  </application>",
                "</manifest>",
                "",
            ]
        )

    def api_level(self, ctx: ResolvedContext) -> int:
        """First API level the project sets, in profile order."""
        levels = [
            ctx.catalog.project_settings(p, PlatformType.ANDROID).android_target_api_level
            for p in ctx.profiles
        ]
        return next((level for level in levels if level is not None), DEFAULT_API_LEVEL)

    def abis(self, ctx: ResolvedContext) -> List[str]:
        """ABIs of every architecture some generated target builds for."""
        supported = get_platform(PlatformType.ANDROID).architectures
        selected = []
        for index in generated_targets(ctx, PlatformType.ANDROID):
            for architecture in ctx.architectures_for(index, supported):
                if ANDROID_ABIS[architecture] not in selected:
                    selected.append(ANDROID_ABIS[architecture])
        return selected

    def _application(self, ctx: ResolvedContext) -> Optional[int]:
        for index in generated_targets(ctx, PlatformType.ANDROID):
            if ctx.target_type(index) == TargetType.APPLICATION:
                return index
        return None


def _package_name(name: str) -> str:
    cleaned = "".join(c if c.isalnum() else "_" for c in name.lower())
    return cleaned or "app"
