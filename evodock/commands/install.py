"""Install command: provision the host and deploy Evolution API behind NGINX."""

import asyncio
import logging
import sys

from evodock.commands import add_config_arguments, params_from_args
from evodock.deploy.apply import DEFAULT_NGINX_DIR
from evodock.deploy.health import DEFAULT_ATTEMPTS, DEFAULT_INTERVAL
from evodock.deploy.orchestrate import RunOptions, install
from evodock.errors import EvodockError, MissingArgumentError

logger = logging.getLogger(__name__)


def handle_install(args):
    """Handle the install command. Exit 1 on any fatal error; a failed health probe is only a warning."""
    options = RunOptions(
        nginx_dir=args.nginx_dir,
        dry_run=args.dry_run,
        skip_packages=args.skip_packages,
        health_attempts=args.health_attempts,
        health_interval=args.health_interval,
    )
    try:
        params = params_from_args(args)
        asyncio.run(install(params, options))
    except MissingArgumentError as e:
        logger.error(f"[ERROR] {e}")
        logger.error(args.usage.rstrip())
        sys.exit(1)
    except EvodockError as e:
        logger.error(f"[ERROR] {e}")
        sys.exit(1)

    status = "dry-run (not deployed)" if args.dry_run else "deployed"
    logger.info(f"Status: {status}")


def register_install_command(subparsers):
    """Register the install subcommand."""
    parser = subparsers.add_parser(
        "install",
        help="Install Docker, NGINX, Evolution API + Postgres + Manager (requires root)",
    )
    add_config_arguments(parser)
    parser.add_argument("--nginx-dir", default=DEFAULT_NGINX_DIR, help="nginx configuration root")
    parser.add_argument("--skip-packages", action="store_true", help="Do not run apt (Docker/NGINX already set up)")
    parser.add_argument("--health-attempts", type=int, default=DEFAULT_ATTEMPTS,
                        help=f"Health probe attempts (default: {DEFAULT_ATTEMPTS})")
    parser.add_argument("--health-interval", type=float, default=DEFAULT_INTERVAL,
                        help=f"Seconds between health probe attempts (default: {DEFAULT_INTERVAL})")
    parser.add_argument("--dry-run", action="store_true", help="Print commands without executing")
    parser.set_defaults(func=handle_install, usage=parser.format_usage())
