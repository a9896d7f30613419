"""nativegen: platform-native project generator.

Reads one declarative project description and produces CMake, Gradle, Make,
Visual Studio and Xcode projects from a single resolved configuration model.
"""

try:
    from importlib.metadata import version

    __version__ = version("nativegen")
except Exception:
    __version__ = "0.1.0"
