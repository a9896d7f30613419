"""
Tests for the Xcode project generator (MacOS, IOS, TVOS, WatchOS).
"""

import pytest

from nativegen.config.types import PlatformType
from nativegen.context import Env
from nativegen.generators import Identifiers, XcodeGenerator
from nativegen.generators.xcode import Ref, default_configuration, quote
from tests.fixtures.projects import core_app_data

CORE_APP_SOURCES = {
    "core": ["core/a.cpp", "core/a.h", "core/sub/b.c", "shared/util.cpp"],
    "app": ["app/main.cpp", "app/ios/touch.mm", "shared/util.cpp"],
}


@pytest.fixture
def macos_ctx(make_context):
    data = core_app_data(platforms=["MacOS"])
    data["targets"]["app"]["exclude"] = {"app/ios": ["MacOS"]}
    data["targets"]["app"]["depends"] = ["core"]
    data["targets"]["app"]["libs"] = ["z"]
    return make_context(data, CORE_APP_SOURCES)


def _pbxproj(ctx):
    generator = XcodeGenerator()
    return generator.generate_pbxproj(
        ctx, Identifiers("demo"), generator.native_targets(ctx)
    )


def _section(content, isa):
    begin = content.index(f"/* Begin {isa} section */")
    end = content.index(f"/* End {isa} section */")
    return content[begin:end]


def _flat(text):
    return " ".join(text.split())


@pytest.mark.unit
class TestPropertyList:
    """Test old-style property list values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Release", "Release"),
            ("core/sub/b.c", "core/sub/b.c"),
            ("$(SRCROOT)/core", '"$(SRCROOT)/core"'),
            ("<group>", '"<group>"'),
            ("app (MacOS)", '"app (MacOS)"'),
            ("1,2", '"1,2"'),
            ('say "hi"', '"say \\"hi\\""'),
            ("", '""'),
        ],
    )
    def test_quote(self, value, expected):
        assert quote(value) == expected

    def test_ref_comment(self):
        assert str(Ref("0123", "main.cpp")) == "0123 /* main.cpp */"
        assert str(Ref("0123", "")) == "0123"

    def test_default_configuration(self):
        assert default_configuration(("Debug", "Release")) == "Release"
        assert default_configuration(("Profile", "Ship")) == "Profile"


@pytest.mark.unit
class TestNativeTargets:
    """Test (target, platform) pairs."""

    def test_one_per_platform(self, macos_ctx):
        natives = XcodeGenerator().native_targets(macos_ctx)

        assert [(n.name, n.platform, n.product_name) for n in natives] == [
            ("core", PlatformType.MACOS, "core"),
            ("app", PlatformType.MACOS, "app"),
        ]

    def test_several_platforms_named_by_platform(self, make_context):
        data = core_app_data(platforms=["MacOS", "IOS"])
        ctx = make_context(data, CORE_APP_SOURCES)

        natives = XcodeGenerator().native_targets(ctx)

        assert [n.product_name for n in natives] == [
            "core (MacOS)",
            "core (IOS)",
            "app (MacOS)",
            "app (IOS)",
        ]

    def test_architecture_filter(self, make_context):
        data = core_app_data(platforms=["MacOS", "IOS"])
        data["targets"]["app"]["architectures"] = ["ARM64"]
        ctx = make_context(data, CORE_APP_SOURCES)

        natives = XcodeGenerator().native_targets(ctx)

        assert [n.product_name for n in natives] == ["core (MacOS)", "core (IOS)", "app"]
        content = _pbxproj(ctx)
        assert "ARCHS = ( arm64, );" in _flat(content)

    def test_non_apple_project(self, make_context):
        ctx = make_context(core_app_data(platforms=["Linux"]), CORE_APP_SOURCES)

        assert not XcodeGenerator().applies_to(ctx)
        assert XcodeGenerator().native_targets(ctx) == []


@pytest.mark.unit
class TestProjectFile:
    """Test project.pbxproj content."""

    def test_header_and_root(self, macos_ctx):
        content = _pbxproj(macos_ctx)

        assert content.startswith("// !$*UTF8*$!\n{\n\tarchiveVersion = 1;")
        assert "\tobjectVersion = 50;" in content
        assert "rootObject = " in content
        assert "projectDirPath = ..;" in content

    def test_sections_sorted(self, macos_ctx):
        content = _pbxproj(macos_ctx)

        sections = [
            line[len("/* Begin "):-len(" section */")]
            for line in content.splitlines()
            if line.startswith("/* Begin ")
        ]
        assert sections == sorted(sections)
        assert "PBXNativeTarget" in sections
        assert "XCConfigurationList" in sections

    def test_file_references(self, macos_ctx):
        references = _section(_pbxproj(macos_ctx), "PBXFileReference")

        assert "lastKnownFileType = sourcecode.cpp.cpp; path = main.cpp;" in references
        assert "lastKnownFileType = sourcecode.c.h; path = a.h;" in references
        assert "lastKnownFileType = sourcecode.cpp.objcpp; path = touch.mm;" in references
        assert "explicitFileType = archive.ar;" in references
        assert "path = libcore.a; sourceTree = BUILT_PRODUCTS_DIR;" in references
        assert 'explicitFileType = "compiled.mach-o.executable";' in references
        assert references.count("path = util.cpp;") == 1

    def test_sources_phase(self, macos_ctx):
        build_files = _section(_pbxproj(macos_ctx), "PBXBuildFile")

        assert "/* main.cpp in Sources */" in build_files
        assert "/* b.c in Sources */" in build_files
        assert "/* a.h in Sources */" not in build_files
        assert "/* touch.mm in Sources */" not in build_files

    def test_composed_sources(self, macos_ctx):
        build_files = _section(_pbxproj(macos_ctx), "PBXBuildFile")

        # core's a.cpp builds in both core and app; util.cpp only once per target.
        assert build_files.count("/* a.cpp in Sources */") == 2
        assert build_files.count("/* util.cpp in Sources */") == 2

    def test_dependencies(self, macos_ctx):
        content = _pbxproj(macos_ctx)

        assert "/* libcore.a in Frameworks */" in _section(content, "PBXBuildFile")
        dependency = _flat(_section(content, "PBXTargetDependency"))
        assert "isa = PBXTargetDependency;" in dependency
        assert "/* core */" in dependency
        proxy = _flat(_section(content, "PBXContainerItemProxy"))
        assert "proxyType = 1;" in proxy
        assert "remoteInfo = core;" in proxy

    def test_product_types(self, macos_ctx):
        targets = _section(_pbxproj(macos_ctx), "PBXNativeTarget")

        assert 'productType = "com.apple.product-type.library.static";' in targets
        assert 'productType = "com.apple.product-type.tool";' in targets

    def test_build_settings(self, macos_ctx):
        configurations = _flat(_section(_pbxproj(macos_ctx), "XCBuildConfiguration"))

        assert (
            'GCC_PREPROCESSOR_DEFINITIONS = ( CORE, APP, "$(inherited)", );'
            in configurations
        )
        assert 'OTHER_LDFLAGS = ( "-lz", "$(inherited)", );' in configurations
        assert "GCC_OPTIMIZATION_LEVEL = 0;" in configurations
        assert "GCC_OPTIMIZATION_LEVEL = 3;" in configurations
        assert "GCC_TREAT_WARNINGS_AS_ERRORS = YES;" in configurations
        assert "MACOSX_DEPLOYMENT_TARGET = 10.14;" in configurations
        assert "SDKROOT = macosx;" in configurations
        assert "EXECUTABLE_PREFIX = lib;" in configurations
        assert "ALWAYS_SEARCH_USER_PATHS = NO;" in configurations
        assert "ARCHS" not in configurations

    def test_configuration_lists(self, macos_ctx):
        lists = _flat(_section(_pbxproj(macos_ctx), "XCConfigurationList"))

        assert lists.count("defaultConfigurationName = Release;") == 3
        assert 'Build configuration list for PBXNativeTarget "app"' in lists
        assert 'Build configuration list for PBXProject "demo"' in lists

    def test_include_dirs_prefixed(self, make_context):
        data = core_app_data(platforms=["MacOS"])
        data["targets"]["core"]["include_dirs"] = ["core/include", "/opt/include"]
        ctx = make_context(data, CORE_APP_SOURCES)

        configurations = _flat(_section(_pbxproj(ctx), "XCBuildConfiguration"))

        assert (
            'HEADER_SEARCH_PATHS = ( "$(SRCROOT)/core/include", /opt/include, '
            '"$(inherited)", );' in configurations
        )

    def test_environment_flags_and_team(self, make_context):
        data = core_app_data(platforms=["MacOS"])
        env = Env(cflags="-g", cxxflags="-fno-common", ldflags="", xcode_team="TEAM123")
        ctx = make_context(data, CORE_APP_SOURCES, env=env)

        configurations = _flat(_section(_pbxproj(ctx), "XCBuildConfiguration"))

        assert "DEVELOPMENT_TEAM = TEAM123;" in configurations
        assert '"-fno-omit-frame-pointer", "-g",' in configurations
        assert 'OTHER_CPLUSPLUSFLAGS = ( "$(OTHER_CFLAGS)", "-fno-common", );' in (
            configurations
        )

    def test_platform_settings(self, make_context):
        data = core_app_data(platforms=["IOS", "TVOS", "WatchOS"])
        ctx = make_context(data, CORE_APP_SOURCES)

        configurations = _flat(_section(_pbxproj(ctx), "XCBuildConfiguration"))

        assert "SDKROOT = iphoneos;" in configurations
        assert 'TARGETED_DEVICE_FAMILY = "1,2";' in configurations
        assert "SDKROOT = appletvos;" in configurations
        assert "TVOS_DEPLOYMENT_TARGET = 13.0;" in configurations
        assert "SDKROOT = watchos;" in configurations
        assert "TARGETED_DEVICE_FAMILY = 4;" in configurations


@pytest.mark.unit
class TestGroups:
    """Test the navigator tree."""

    def test_grouped_by_target(self, macos_ctx):
        groups = _flat(_section(_pbxproj(macos_ctx), "PBXGroup"))

        assert "name = core;" in groups
        assert "name = app;" in groups
        assert "name = Shared;" in groups
        assert "name = Products;" in groups
        assert "path = sub;" in groups

    def test_shared_files_in_shared_group(self, macos_ctx):
        content = _pbxproj(macos_ctx)
        groups = _section(content, "PBXGroup")

        shared = groups[groups.index("/* Shared */ = {"):]
        shared = shared[: shared.index("};")]
        assert "/* shared */" in shared

    def test_single_owner_has_no_shared_group(self, make_context):
        sources = {"core": ["core/a.cpp"], "app": ["app/main.cpp"]}
        ctx = make_context(core_app_data(platforms=["MacOS"]), sources)

        groups = _flat(_section(_pbxproj(ctx), "PBXGroup"))

        assert "name = Shared;" not in groups
        assert "name = core;" in groups

    def test_flat_main_group(self, make_context):
        data = core_app_data(platforms=["MacOS"])
        data["project"]["xcode"] = {"group_by_target": False}
        ctx = make_context(data, CORE_APP_SOURCES)

        groups = _flat(_section(_pbxproj(ctx), "PBXGroup"))

        assert "name = core;" not in groups
        assert "name = app;" not in groups
        assert "name = Shared;" not in groups
        assert "name = Products;" in groups
        for folder in ("core", "app", "shared"):
            assert f"path = {folder};" in groups


@pytest.mark.integration
class TestWrite:
    """Test files written to the build folder."""

    @pytest.fixture
    def application_ctx(self, make_context):
        data = core_app_data(platforms=["MacOS", "IOS"])
        data["targets"]["app"]["type"] = "Application"
        return make_context(data, CORE_APP_SOURCES)

    def test_run_writes_every_file(self, application_ctx):
        written = XcodeGenerator().run(application_ctx, Identifiers("demo"))

        build = application_ctx.build_dir
        assert [p.relative_to(build).as_posix() for p in written] == [
            "demo.xcodeproj/project.pbxproj",
            "app_MacOS/Info.plist",
            "app_IOS/Info.plist",
        ]
        assert "<string>1.0.0</string>" in (build / "app_IOS" / "Info.plist").read_text()

    def test_application_settings(self, application_ctx):
        content = _pbxproj(application_ctx)
        configurations = _flat(_section(content, "XCBuildConfiguration"))

        assert "INFOPLIST_FILE = build/app_MacOS/Info.plist;" in configurations
        assert "PRODUCT_BUNDLE_IDENTIFIER = com.demo.app;" in configurations
        assert "CODE_SIGN_STYLE = Automatic;" in configurations
        assert "explicitFileType = wrapper.application;" in content
        assert "/* Info.plist (IOS) */" in _section(content, "PBXGroup")

    def test_regeneration_is_byte_identical(self, application_ctx):
        generator = XcodeGenerator()

        first = [p.read_bytes() for p in generator.run(application_ctx, Identifiers("demo"))]
        second = [p.read_bytes() for p in generator.run(application_ctx, Identifiers("demo"))]

        assert first == second
