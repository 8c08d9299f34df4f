#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the AllStarLink 3 multi-app installer.

Installs SkywarnPlus, AllScan Dashboard, DVSwitch Server and Supermon 7.4+
on a new AllStarLink node.
"""

import argparse
import logging
import sys
from typing import List, Optional

from asl_common.command_utils import is_root
from asl_common.exceptions import InstallationError
from asl_common.logging_config import setup_logging
from asl_installer.config_loader import load_app_settings
from asl_installer.orchestrator import ComponentOrchestrator, load_all_components
from asl_installer.registry import ComponentRegistry

PROG = "m-app-install"
EXIT_OK = 0
EXIT_ERROR = 1


class UsageError(Exception):
    """Raised instead of argparse's default exit for invalid usage."""


class InstallerArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def build_parser() -> InstallerArgumentParser:
    """Build the parser; one flag per registered component."""
    parser = InstallerArgumentParser(
        prog=PROG,
        description="Installer for AllStarLink 3 add-ons.",
        epilog=f"You can combine options to install multiple software (e.g., {PROG} -a -s -w).",
        add_help=False,
    )
    components = ComponentRegistry.get_all_components()
    for name in ComponentRegistry.ordered(components):
        metadata = components[name].metadata
        parser.add_argument(
            metadata["flag"],
            metadata["long_flag"],
            dest=f"install_{name}",
            action="store_true",
            help=metadata.get("description") or f"Install {name}",
        )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )
    parser.add_argument(
        "-t", "--dry-run", action="store_true", help="Dry run (test mode)"
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="YAML settings file (default: /etc/m_app_install/config.yaml)",
    )
    parser.add_argument(
        "-h", "--help", action="store_true", help="Display this help message"
    )
    return parser


def selected_components(parsed_args: argparse.Namespace) -> List[str]:
    return [
        name
        for name in ComponentRegistry.get_all_components()
        if getattr(parsed_args, f"install_{name}", False)
    ]


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the multi-app installer."""
    argv = list(sys.argv[1:] if args is None else args)

    load_all_components()
    parser = build_parser()

    try:
        parsed_args = parser.parse_args(argv)
    except UsageError as e:
        print(f"{PROG}: {e}", file=sys.stderr)
        parser.print_help()
        return EXIT_ERROR

    if parsed_args.help:
        parser.print_help()
        return EXIT_OK
    if not argv:
        parser.print_help()
        return EXIT_ERROR

    try:
        app_settings = load_app_settings(parsed_args)
    except InstallationError as e:
        setup_logging(verbose=parsed_args.verbose)
        logging.getLogger(__name__).error(str(e))
        return EXIT_ERROR

    logger = setup_logging(app_settings.log_file, app_settings.verbose)

    if not is_root():
        logger.error("This script must be run as root or with sudo")
        return EXIT_ERROR

    if app_settings.dry_run:
        logger.info("Dry run mode enabled")
    if app_settings.verbose:
        logger.info("Verbose mode enabled")

    orchestrator = ComponentOrchestrator(app_settings, logger=logger)
    try:
        orchestrator.run(selected_components(parsed_args))
    except InstallationError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.error("Installation interrupted")
        return EXIT_ERROR
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return EXIT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
