"""Check command: run the loopback health probe on its own."""

import asyncio
import logging
import sys

from evodock.deploy.health import (
    DEFAULT_ATTEMPTS,
    DEFAULT_EXPECTED,
    DEFAULT_INTERVAL,
    HealthStatus,
    probe,
)

logger = logging.getLogger(__name__)


def handle_check(args):
    """Handle the check command. Exit 1 when the endpoint stays unreachable."""
    status = asyncio.run(probe(args.url, args.expect, max_attempts=args.attempts, interval=args.interval))
    if status is HealthStatus.HEALTHY:
        logger.info(f"OK: {args.url} responded with '{args.expect}'")
        return
    logger.warning(f"WARNING: {args.url} did not respond with '{args.expect}' after {args.attempts} attempt(s)")
    sys.exit(1)


def register_check_command(subparsers):
    """Register the check subcommand."""
    parser = subparsers.add_parser("check", help="Poll the local API until it answers")
    parser.add_argument("--url", default="http://127.0.0.1:8080/", help="URL to poll (default: http://127.0.0.1:8080/)")
    parser.add_argument("--expect", default=DEFAULT_EXPECTED, help=f"Expected body substring (default: {DEFAULT_EXPECTED})")
    parser.add_argument("--attempts", type=int, default=DEFAULT_ATTEMPTS, help="Maximum attempts")
    parser.add_argument("--interval", type=float, default=DEFAULT_INTERVAL, help="Seconds between attempts")
    parser.set_defaults(func=handle_check)
