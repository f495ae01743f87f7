"""
CLI Module

Architectural Intent:
- Command-line interface for Parrot
- Entry point for all user interactions
- Delegates to the interactive TUI via composition root
- Supports --verbose/--debug flags for log level control
"""

import argparse
import sys
import asyncio
import logging
import traceback

from parrot.domain.services.banner import CLI_USAGE
from parrot.infrastructure.logging import configure_logging, parse_level

EXIT_OUT_OF_MEMORY = 3


async def async_main():
    parser = argparse.ArgumentParser(
        prog="parrot",
        description="Parrot Terminal: a multi-session shell front-end",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output with tracebacks"
    )
    parser.add_argument(
        "--config", "-c", default=None, help="Path to JSON config (default: parrot.json)"
    )
    parser.add_argument(
        "args", nargs="*", help="'manual' prints usage; no arguments starts the terminal"
    )

    args, unknown = parser.parse_known_args()
    verbose = args.verbose or args.debug

    # unrecognised options such as -x are reported like any other argument
    commands = unknown + args.args
    if commands:
        command = commands[0]
        if command == "manual":
            print(CLI_USAGE)
        else:
            print(f"Unknown command: {command}")
        return

    from parrot.infrastructure.config import load_config

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"[-] Invalid configuration: {e}")
        sys.exit(1)

    # Configure logging based on flags, falling back to the configured level
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = parse_level(config.log_level)
    configure_logging(
        level=level, json_format=config.log_json, log_file=config.log_file or None
    )

    from parrot.composition_root import create_context
    from parrot.presentation.tui.app import ParrotApp

    try:
        context = create_context(config)
        app = ParrotApp(context)
        await app.run_async()
    except OSError as e:
        print(f"[-] Parrot Terminal failed: {e}")
        if verbose:
            traceback.print_exc()
        sys.exit(1)


def main():
    try:
        asyncio.run(async_main())
    except MemoryError:
        print("[-] Critical error: out of memory", file=sys.stderr)
        sys.exit(EXIT_OUT_OF_MEMORY)
    except KeyboardInterrupt:
        print("\n[*] Parrot Terminal stopped.")


if __name__ == "__main__":
    main()
