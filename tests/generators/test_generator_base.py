"""
Unit tests for the generator registry, identifiers, shared helpers and
compiler flags.
"""

import pytest

from nativegen.config.settings import DEBUG_SETTINGS, RELEASE_SETTINGS, Settings
from nativegen.config.types import CStandard, CXXStandard, PlatformType
from nativegen.core.exceptions import GeneratorNotFoundError, WildcardValueError
from nativegen.generators import (
    CMakeGenerator,
    Identifiers,
    MakeGenerator,
    VisualStudioGenerator,
    XcodeGenerator,
    available_generators,
    get_generator,
)
from nativegen.generators.base import (
    generated_targets,
    owned_sources,
    platform_sources,
)
from nativegen.generators.flags import (
    c_flags,
    common_flags,
    cxx_flags,
    link_flags,
    prefixed,
)
from tests.fixtures.projects import core_app_data


@pytest.mark.unit
class TestIdentifiers:
    """Test deterministic GUID allocation."""

    def test_same_key_same_guid(self):
        assert Identifiers("demo").guid("vs", "project", "app") == Identifiers(
            "demo"
        ).guid("vs", "project", "app")

    def test_keys_and_projects_differ(self):
        ids = Identifiers("demo")
        assert ids.guid("vs", "project", "app") != ids.guid("vs", "project", "core")
        assert ids.guid("a") != Identifiers("other").guid("a")

    def test_object_id(self):
        ids = Identifiers("demo")
        object_id = ids.object_id("xcode", "project")

        assert len(object_id) == 24
        assert all(c in "0123456789ABCDEF" for c in object_id)
        assert ids.guid("xcode", "project").replace("-", "").startswith(object_id)

    def test_format(self):
        value = Identifiers("demo").guid("x")
        assert value == value.upper()
        assert len(value) == 36
        assert value.count("-") == 4

    def test_issued_count(self):
        ids = Identifiers("demo")
        ids.guid("a")
        ids.guid("a")
        ids.guid("b")
        assert len(ids) == 2


@pytest.mark.unit
class TestRegistry:
    """Test generator lookup."""

    def test_available(self):
        assert available_generators() == ["cmake", "gradle", "make", "vs", "xcode"]

    def test_get(self):
        assert isinstance(get_generator("make"), MakeGenerator)

    def test_unknown(self):
        with pytest.raises(GeneratorNotFoundError) as exc_info:
            get_generator("ninja")

        assert str(exc_info.value) == (
            "Unknown generator: ninja (available: cmake, gradle, make, vs, xcode)"
        )

    def test_supported_platforms(self):
        assert CMakeGenerator().supports_platform(PlatformType.ANDROID)
        assert not CMakeGenerator().supports_platform(PlatformType.LINUX)
        assert MakeGenerator().supports_platform(PlatformType.HTML5)
        assert VisualStudioGenerator().supports_platform(PlatformType.WINDOWS)
        assert XcodeGenerator().supports_platform(PlatformType.IOS)
        assert not XcodeGenerator().supports_platform(PlatformType.WINDOWS)

    def test_wildcard_platform(self):
        with pytest.raises(WildcardValueError):
            MakeGenerator().supports_platform(PlatformType.ANY)

    def test_applies_to(self, make_context):
        ctx = make_context(core_app_data(platforms=["Linux"]))

        assert MakeGenerator().applies_to(ctx)
        assert not VisualStudioGenerator().applies_to(ctx)


@pytest.mark.unit
class TestSourceHelpers:
    """Test helpers shared by the writers."""

    @pytest.fixture
    def ctx(self, make_context):
        data = core_app_data()
        data["targets"]["app"]["exclude"] = {"app/win": ["Linux"]}
        data["targets"]["docs"] = {"type": "None", "sources": ["docs/*"]}
        return make_context(
            data,
            {
                "core": ["core/a.cpp", "core/sub/"],
                "app": ["app/main.cpp", "app/win/io.cpp"],
                "docs": ["docs/readme.md"],
            },
        )

    def test_generated_targets(self, ctx):
        assert generated_targets(ctx, PlatformType.LINUX) == [0, 1]

    def test_owned_sources(self, ctx):
        owned = [(owner, f.as_posix()) for owner, f in owned_sources(ctx, 1)]
        assert owned == [(0, "core/a.cpp"), (1, "app/main.cpp"), (1, "app/win/io.cpp")]

    def test_platform_sources(self, ctx):
        linux = [f.as_posix() for f in platform_sources(ctx, 1, PlatformType.LINUX)]
        windows = [f.as_posix() for f in platform_sources(ctx, 1, PlatformType.WINDOWS)]

        assert linux == ["core/a.cpp", "app/main.cpp"]
        assert windows == ["core/a.cpp", "app/main.cpp", "app/win/io.cpp"]


@pytest.mark.unit
class TestFlags:
    """Test GCC/Clang flag rendering."""

    def test_debug(self):
        flags = common_flags(DEBUG_SETTINGS)

        assert flags == [
            "-Wall",
            "-Wextra",
            "-Wpedantic",
            "-O0",
            "-fno-strict-aliasing",
            "-fno-omit-frame-pointer",
        ]

    def test_release(self):
        flags = common_flags(RELEASE_SETTINGS)
        assert "-Werror" in flags
        assert "-O3" in flags
        assert "-fomit-frame-pointer" in flags

    def test_preprocessor_and_includes(self):
        settings = Settings(defines=("A=1",), undefs=("B",), include_dirs=("inc", "/abs"))

        flags = common_flags(settings, "$(SRC_DIR)")

        assert flags == ["-DA=1", "-UB", "-I$(SRC_DIR)/inc", "-I/abs"]

    def test_language_flags(self):
        settings = Settings(
            c_standard=CStandard.C11,
            cxx_standard=CXXStandard.CXX17,
            enable_exceptions=False,
            enable_rtti=False,
        )

        assert c_flags(settings) == ["-std=c11"]
        assert cxx_flags(settings) == ["-std=c++17", "-fno-exceptions", "-fno-rtti"]

    def test_link_order(self):
        settings = Settings(lib_dirs=("lib",), libs=("png", "z"))
        assert link_flags(settings, "..") == ["-L../lib", "-lpng", "-lz"]

    def test_prefixed(self):
        assert prefixed("", "inc") == "inc"
        assert prefixed("..", "/usr/include") == "/usr/include"
