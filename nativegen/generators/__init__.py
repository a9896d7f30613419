"""
Output generators for nativegen.

Each generator is registered under the name used by ``nativegen gen
--generator NAME``.
"""

from typing import Dict, List, Type

from nativegen.core.exceptions import GeneratorNotFoundError
from nativegen.generators.base import Generator, Identifiers
from nativegen.generators.cmake import CMakeGenerator
from nativegen.generators.gradle import GradleGenerator
from nativegen.generators.make import MakeGenerator
from nativegen.generators.vs import VisualStudioGenerator
from nativegen.generators.xcode import XcodeGenerator

GENERATORS: Dict[str, Type[Generator]] = {
    CMakeGenerator.name: CMakeGenerator,
    GradleGenerator.name: GradleGenerator,
    MakeGenerator.name: MakeGenerator,
    VisualStudioGenerator.name: VisualStudioGenerator,
    XcodeGenerator.name: XcodeGenerator,
}


def available_generators() -> List[str]:
    return sorted(GENERATORS)


def get_generator(name: str) -> Generator:
    """
    Instantiate a registered generator.

    Raises:
        GeneratorNotFoundError: If no generator has that name
    """
    if name not in GENERATORS:
        raise GeneratorNotFoundError(name, available_generators())
    return GENERATORS[name]()


__all__ = [
    "Generator",
    "Identifiers",
    "CMakeGenerator",
    "GradleGenerator",
    "MakeGenerator",
    "VisualStudioGenerator",
    "XcodeGenerator",
    "GENERATORS",
    "available_generators",
    "get_generator",
]
