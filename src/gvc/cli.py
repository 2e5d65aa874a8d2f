"""gvc command-line entry point."""
import logging
import sys

from gvc.args import parse_args
from gvc.common.logging_utils import configure_logging, extra_context, is_debug_enabled
from gvc.config import apply_http_settings, load_config
from gvc.constants import ExitCodes
from gvc.errors import CatalogError, GvcError, UserCancelledError, ValidationError
from gvc import workflow

logger = logging.getLogger(__name__)


def run(args):
    """Dispatch a parsed command; exceptions propagate to ``main``."""
    config = load_config(args.CONFIG, args.PROJECT_PATH)
    apply_http_settings(config.http)

    if args.COMMAND == "check":
        # check looks at stable versions unless asked otherwise
        if args.INCLUDE_UNSTABLE:
            stable_only = False
        else:
            stable_only = True if config.stable_only is None else config.stable_only
    elif getattr(args, "STABLE_ONLY", None):
        stable_only = True
    else:
        stable_only = bool(config.stable_only)

    if args.COMMAND == "update":
        workflow.execute_update(
            args.PROJECT_PATH,
            config,
            stable_only=stable_only,
            interactive=args.INTERACTIVE,
            pattern=args.FILTER,
        )
    elif args.COMMAND == "check":
        workflow.execute_check(args.PROJECT_PATH, config, stable_only=stable_only)
    elif args.COMMAND == "add":
        workflow.execute_add(
            args.PROJECT_PATH,
            config,
            args.COORDINATE,
            plugin=args.PLUGIN,
            alias=args.ALIAS,
            version_alias=args.VERSION_ALIAS,
            stable_only=stable_only,
        )
    elif args.COMMAND == "list":
        workflow.execute_list(args.PROJECT_PATH)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND)
        )

    try:
        run(args)
    except UserCancelledError:
        print("\nUpdate cancelled by user.")
        sys.exit(ExitCodes.USER_CANCELLED.value)
    except ValidationError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.VALIDATION_ERROR.value)
    except CatalogError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except OSError as exc:
        logger.error("File error: %s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except GvcError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.VALIDATION_ERROR.value)
    except KeyboardInterrupt:
        print("\nUpdate cancelled by user.")
        sys.exit(ExitCodes.USER_CANCELLED.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
