"""spmresolve command line entry point.

Resolves one specifier and prints the result as JSON, which makes it easy to
check a project's spm_modules layout without running a build.
"""

import json
import logging
import sys

from args import parse_args
from common.errors import ManifestError, ResolutionError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes, _load_yaml_config
from resolution import SpecifierResolver


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    level = getattr(logging, args.LOG_LEVEL) if args.LOG_LEVEL else None
    configure_logging(level, args.LOG_FILE)

    _load_yaml_config(args.CONFIG)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    resolver = SpecifierResolver(args.ROOT)
    try:
        target = resolver.resolve(args.specifier, args.REQUESTER, args.QUERY)
    except ManifestError as e:
        logging.error("Manifest error: %s", e)
        return ExitCodes.CONFIG_ERROR.value
    except ResolutionError as e:
        logging.error("%s", e)
        return ExitCodes.RESOLUTION_ERROR.value

    print(json.dumps(target.as_dict(), indent=2))
    logger.info("Resolved %s -> %s", args.specifier, target.path)
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
