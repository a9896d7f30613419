"""
Gen command implementation.

Loads the project and runs every generator that applies to a platform the
project builds for.
"""

import logging

from nativegen.cli.utils import load_context
from nativegen.generators import Identifiers, available_generators, get_generator

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the gen command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = load_context(args.folder, args.build, args.config)

    requested = getattr(args, "generator", None)
    generators = [get_generator(name) for name in requested or available_generators()]

    selected = []
    for generator in generators:
        if generator.applies_to(ctx):
            selected.append(generator)
        elif requested:
            logger.warning(
                f"Skipping {generator.name}: no target is buildable on "
                f"{', '.join(sorted(p.value for p in generator.platforms))}"
            )

    if not selected:
        logger.warning("No generator applies to this project's platforms")
        return 0

    # Nothing is written until every selected generator has rendered.
    ids = Identifiers(ctx.project.name)
    rendered = []
    for generator in selected:
        logger.debug(f"Rendering {generator.name} generator")
        rendered.append((generator, generator.render(ctx, ids)))

    written = []
    for generator, outputs in rendered:
        written.extend(generator.write_all(outputs))

    logger.info(f"Generated {len(written)} file(s) in {ctx.build_dir}")
    return 0
