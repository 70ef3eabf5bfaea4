"""
Main CLI Entry Point
Command-line interface for the Namecheap registrar API:
- domains, DNS records, nameservers and email forwarding
- saved addresses, account balances and pricing, WhoisGuard
- credential and configuration management
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from namecheap_cli import __version__
from namecheap_cli.api.exceptions import NamecheapError
from namecheap_cli.cli import address, auth, config, dns, domains, ns, users, whoisguard
from namecheap_cli.cli.context import CliContext, confirm_parent, output_parent
from namecheap_cli.cli.guard import EXIT_ERROR, EXIT_OK
from namecheap_cli.output.renderer import HUMAN, STRUCTURED, render_error
from namecheap_cli.utils.config import get_settings
from namecheap_cli.utils.logger import get_logger, setup_logger

logger = get_logger(__name__)

COMMAND_GROUPS = (auth, config, domains, dns, ns, address, users, whoisguard)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="namecheap",
        description="Namecheap domain registrar CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Store API credentials (prompts for anything missing)
  namecheap auth login --api-user myuser --client-ip 203.0.113.10

  # Check availability
  namecheap domains check example.com example.net

  # List domains as JSON
  namecheap domains list --page-size 50 --json

  # Add an A record
  namecheap dns add example.com www A 203.0.113.10 --ttl 600

  # Use custom nameservers
  namecheap ns set example.com ns1.host.net ns2.host.net

  # Register a domain
  namecheap domains register mynewdomain.com --contact-file contacts.json --years 2
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    parents = {"output": output_parent(), "confirm": confirm_parent()}
    for group in COMMAND_GROUPS:
        group.register(subparsers, parents)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and run one command.

    Returns:
        Process exit code: 0 on success, 1 on any error or a declined confirmation
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    mode = STRUCTURED if getattr(args, "json", False) else HUMAN

    try:
        settings = get_settings()
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = error["loc"][0] if error["loc"] else "settings"
        sys.stderr.write(f"Error: Invalid NAMECHEAP_{str(field).upper()}: {error['msg']}\n")
        return EXIT_ERROR

    setup_logger(level="DEBUG" if args.verbose else settings.log_level, log_file=settings.log_file)

    if not hasattr(args, "func"):
        getattr(args, "help_parser", parser).print_help()
        return EXIT_OK

    try:
        ctx = CliContext(args, settings=settings)
    except NamecheapError as e:
        sys.stderr.write(render_error(e, mode) + "\n")
        return EXIT_ERROR

    logger.debug(f"Running {args.func.__name__}")
    try:
        return args.func(args, ctx)
    except KeyboardInterrupt:
        sys.stderr.write("Cancelled.\n")
        return EXIT_ERROR


def run():
    """Console script entry point"""
    sys.exit(main())
