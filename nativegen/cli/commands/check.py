"""
Check command implementation.

Loads the project (which rejects schema, reference and version errors) and
reports the semantic issues found by ConfigValidator.
"""

import logging

from nativegen.cli.utils import load_context, safe_print
from nativegen.config.validation import ConfigValidator, format_validation_results

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when valid, 1 on errors or, with --strict, warnings)
    """
    ctx = load_context(args.folder, args.build, args.config)
    result = ConfigValidator(ctx).validate()

    safe_print(format_validation_results(result))

    if not result.valid:
        return 1
    if getattr(args, "strict", False) and any(
        issue.level == "warning" for issue in result.issues
    ):
        logger.debug("Warnings reported with --strict")
        return 1
    return 0
