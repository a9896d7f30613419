"""GCC/Clang style command line flags for a resolved settings layer.

Used by the CMake and Make writers; Emscripten accepts the same flags.
"""

from pathlib import PurePosixPath
from typing import List

from nativegen.config.settings import Settings
from nativegen.config.types import CStandard, CXXStandard, Optimize

WARNING_FLAGS = {
    0: ["-w"],
    1: ["-Wall"],
    2: ["-Wall", "-Wextra"],
    3: ["-Wall", "-Wextra", "-Wpedantic"],
    4: ["-Wall", "-Wextra", "-Wpedantic", "-Wconversion"],
}

OPTIMIZE_FLAGS = {
    Optimize.NONE: "-O0",
    Optimize.SIZE: "-Os",
    Optimize.SPEED: "-O2",
    Optimize.FULL: "-O3",
}

C_STANDARD_FLAGS = {
    CStandard.C89: "-std=c89",
    CStandard.C99: "-std=c99",
    CStandard.C11: "-std=c11",
}

CXX_STANDARD_FLAGS = {
    CXXStandard.CXX03: "-std=c++03",
    CXXStandard.CXX11: "-std=c++11",
    CXXStandard.CXX14: "-std=c++14",
    CXXStandard.CXX17: "-std=c++17",
    CXXStandard.CXX20: "-std=c++20",
}


def prefixed(prefix: str, path: str) -> str:
    """Join a project relative path onto a prefix, leaving absolute paths alone."""
    if not prefix or PurePosixPath(path).is_absolute():
        return path
    return str(PurePosixPath(prefix) / path)


def _toggle(value, on: str, off: str) -> List[str]:
    if value is None:
        return []
    return [on if value else off]


def common_flags(settings: Settings, include_prefix: str = "") -> List[str]:
    """Flags shared by the C and C++ compilers."""
    flags: List[str] = []
    if settings.warning_level is not None:
        flags.extend(WARNING_FLAGS[settings.warning_level])
    if settings.warning_as_error:
        flags.append("-Werror")
    if settings.optimize is not None:
        flags.append(OPTIMIZE_FLAGS[settings.optimize])
    flags.extend(
        _toggle(settings.strict_aliasing, "-fstrict-aliasing", "-fno-strict-aliasing")
    )
    flags.extend(
        _toggle(
            settings.omit_frame_pointer,
            "-fomit-frame-pointer",
            "-fno-omit-frame-pointer",
        )
    )
    flags.extend(_toggle(settings.arm_thumb_mode, "-mthumb", "-marm"))
    flags.extend(f"-D{d}" for d in settings.defines)
    flags.extend(f"-U{u}" for u in settings.undefs)
    flags.extend(f"-I{prefixed(include_prefix, d)}" for d in settings.include_dirs)
    return flags


def c_flags(settings: Settings, include_prefix: str = "") -> List[str]:
    flags = common_flags(settings, include_prefix)
    if settings.c_standard is not None:
        flags.append(C_STANDARD_FLAGS[settings.c_standard])
    return flags


def cxx_flags(settings: Settings, include_prefix: str = "") -> List[str]:
    flags = common_flags(settings, include_prefix)
    if settings.cxx_standard is not None:
        flags.append(CXX_STANDARD_FLAGS[settings.cxx_standard])
    flags.extend(_toggle(settings.enable_exceptions, "-fexceptions", "-fno-exceptions"))
    flags.extend(_toggle(settings.enable_rtti, "-frtti", "-fno-rtti"))
    return flags


def link_flags(settings: Settings, lib_prefix: str = "") -> List[str]:
    """Library search paths followed by libraries, in link order."""
    flags = [f"-L{prefixed(lib_prefix, d)}" for d in settings.lib_dirs]
    flags.extend(f"-l{lib}" for lib in settings.libs)
    return flags
