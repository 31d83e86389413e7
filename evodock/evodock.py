#!/usr/bin/env python3
"""Evolution API host provisioning: CLI entrypoint."""

from evodock.commands import CLIParser
from evodock.commands.check import register_check_command
from evodock.commands.install import register_install_command
from evodock.commands.render import register_render_command
from evodock.logging_setup import setup_cli_logging


def main(argv=None):
    parser = CLIParser(description="Provision Evolution API + Postgres + Manager behind NGINX")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_install_command(subparsers)
    register_render_command(subparsers)
    register_check_command(subparsers)

    args = parser.parse_args(argv)
    setup_cli_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
