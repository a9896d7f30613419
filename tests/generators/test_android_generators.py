"""
Tests for the Android generators (CMake and Gradle).
"""

import pytest

from nativegen.generators import CMakeGenerator, GradleGenerator, Identifiers
from nativegen.generators.cmake import CMAKE_MINIMUM_VERSION
from tests.fixtures.projects import core_app_data

CORE_APP_SOURCES = {
    "core": ["core/a.cpp", "core/b.cpp", "core/a.h"],
    "app": ["app/main.cpp", "app/win/io.cpp", "app/README.md"],
}


@pytest.fixture
def android_ctx(make_context, tmp_path):
    data = core_app_data(platforms=["Android"])
    data["targets"]["app"]["exclude"] = {"app/win": ["Android"]}
    data["targets"]["app"]["depends"] = ["core"]
    return make_context(data, CORE_APP_SOURCES, build_dir=tmp_path / "project" / "build")


@pytest.mark.unit
class TestCMakeGenerator:
    """Test CMakeLists.txt content."""

    def test_header(self, android_ctx):
        content = CMakeGenerator().generate_content(android_ctx)

        assert content.startswith("# Generated by nativegen - DO NOT EDIT")
        assert f"cmake_minimum_required(VERSION {CMAKE_MINIMUM_VERSION})" in content
        assert "project(demo LANGUAGES C CXX)" in content
        assert 'set(CMAKE_CONFIGURATION_TYPES Debug Release CACHE STRING "" FORCE)' in content
        assert 'set(NATIVEGEN_SOURCE_DIR "${CMAKE_CURRENT_SOURCE_DIR}/..")' in content

    def test_targets(self, android_ctx):
        content = CMakeGenerator().generate_content(android_ctx)

        assert "add_library(core STATIC" in content
        assert "add_executable(app" in content
        assert content.index("add_library(core") < content.index("add_executable(app")

    def test_composed_sources_in_order(self, android_ctx):
        content = CMakeGenerator().generate_content(android_ctx)
        app_block = content[content.index("add_executable(app") :]

        core_source = app_block.index('"${NATIVEGEN_SOURCE_DIR}/core/a.cpp"')
        app_source = app_block.index('"${NATIVEGEN_SOURCE_DIR}/app/main.cpp"')
        assert core_source < app_source
        assert "core/a.h" in app_block

    def test_excluded_and_non_source_files_dropped(self, android_ctx):
        content = CMakeGenerator().generate_content(android_ctx)

        assert "app/win/io.cpp" not in content
        assert "README.md" not in content

    def test_per_profile_settings(self, android_ctx):
        content = CMakeGenerator().generate_content(android_ctx)

        assert '"$<$<CONFIG:Debug>:CORE;APP>"' in content
        assert '"$<$<CONFIG:Release>:CORE;APP>"' in content
        assert "$<$<COMPILE_LANGUAGE:CXX>:-O3>" in content
        assert "target_link_libraries(app PRIVATE core)" in content

    def test_application_target(self, make_context):
        data = core_app_data(platforms=["Android"])
        data["targets"]["app"]["type"] = "Application"
        ctx = make_context(data, CORE_APP_SOURCES)

        content = CMakeGenerator().generate_content(ctx)

        assert "add_library(app SHARED" in content
        assert "-u ANativeActivity_onCreate" in content
        assert "target_link_libraries(app PRIVATE android log)" in content

    def test_target_not_built_on_android(self, make_context):
        data = core_app_data()
        data["targets"]["app"]["platforms"] = ["Linux"]
        ctx = make_context(data, CORE_APP_SOURCES)

        content = CMakeGenerator().generate_content(ctx)

        assert "add_library(core STATIC" in content
        assert "(app" not in content

    def test_env_flags(self, make_context):
        from nativegen.context import Env

        ctx = make_context(
            core_app_data(platforms=["Android"]),
            CORE_APP_SOURCES,
            env=Env(cflags="-g", cxxflags="", ldflags=""),
        )

        content = CMakeGenerator().generate_content(ctx)

        assert 'set(CMAKE_C_FLAGS "${CMAKE_C_FLAGS} -g")' in content
        assert "CMAKE_CXX_FLAGS" not in content

    def test_run_writes_file(self, android_ctx):
        written = CMakeGenerator().run(android_ctx, Identifiers("demo"))

        assert written == [android_ctx.build_dir / "CMakeLists.txt"]
        assert written[0].read_text() == CMakeGenerator().generate_content(android_ctx)


@pytest.mark.unit
class TestGradleGenerator:
    """Test Gradle build files."""

    def test_library_project(self, android_ctx):
        content = GradleGenerator().generate_build(android_ctx)

        assert "apply plugin: 'com.android.library'" in content
        assert "minSdkVersion 21" in content
        assert "versionName '1.0.0'" in content
        assert "abiFilters 'armeabi-v7a', 'arm64-v8a', 'x86'" in content
        assert 'path "CMakeLists.txt"' in content

    def test_build_types_follow_profiles(self, make_context):
        data = core_app_data(platforms=["Android"])
        data["profiles"] = {"Profile": {"optimize": "Speed"}, "Checked": {}}
        ctx = make_context(data)

        content = GradleGenerator().generate_build(ctx)

        assert "        debug {\n            jniDebuggable true" in content
        assert "        release {\n            jniDebuggable false" in content
        assert "        profile {\n            initWith release" in content
        assert "        checked {\n            initWith debug" in content

    def test_api_level_and_abis(self, make_context):
        data = core_app_data(
            platforms=["Android"], architectures=["ARM64"], android_target_api_level=24
        )
        ctx = make_context(data)

        generator = GradleGenerator()

        assert generator.api_level(ctx) == 24
        assert generator.abis(ctx) == ["arm64-v8a"]

    def test_settings_gradle(self, android_ctx):
        assert "rootProject.name = 'demo'" in GradleGenerator().generate_settings(
            android_ctx
        )

    def test_library_run(self, android_ctx):
        written = GradleGenerator().run(android_ctx, Identifiers("demo"))

        assert [p.name for p in written] == ["settings.gradle", "build.gradle"]

    def test_application_run(self, make_context, tmp_path):
        data = core_app_data(platforms=["Android"])
        data["targets"]["app"]["type"] = "Application"
        ctx = make_context(data, CORE_APP_SOURCES, build_dir=tmp_path / "out")

        written = GradleGenerator().run(ctx, Identifiers("demo"))

        manifest = tmp_path / "out" / "src" / "main" / "AndroidManifest.xml"
        assert manifest in written
        text = manifest.read_text()
        assert 'android:name="android.app.NativeActivity"' in text
        assert 'android:name="android.app.lib_name" android:value="app"' in text
        assert "com.android.application" in (tmp_path / "out" / "build.gradle").read_text()
