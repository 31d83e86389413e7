"""CLI subcommands and the argument handling they share."""

import argparse
import sys

from evodock.config.loader import load_params_file, merge_params
from evodock.config.types import InstallParams


class CLIParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors (unknown flag, missing argument)."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def add_config_arguments(parser):
    """Arguments that feed InstallParams. Defaults stay None so a --config file can fill them."""
    parser.add_argument("api_domain", metavar="api-domain", help="Public domain of the Evolution API")
    parser.add_argument("--manager-dom", dest="manager_domain", default=None,
                        help="Manager domain (default: manager.<api-domain without www.>)")
    parser.add_argument("--cert", default=None, help="Path to fullchain.pem (default: autodetect)")
    parser.add_argument("--key", default=None, help="Path to privkey.pem (default: autodetect)")
    parser.add_argument("--allow-origins", default=None,
                        help='CORS origins: "*", "https://a,https://b" or \'["https://a"]\' (default: *)')
    parser.add_argument("--cors-format", choices=["json", "comma"], default=None,
                        help="How CORS_ORIGINS is written to .env (default: json)")
    parser.add_argument("--apikey", default=None,
                        help="API key (default: reuse the key in an existing .env, else generate one)")
    parser.add_argument("--rotate-apikey", action="store_true",
                        help="Generate a new API key even if an existing .env holds one")
    parser.add_argument("--api-port", type=int, default=None, help="Loopback port for the API (default: 8080)")
    parser.add_argument("--mgr-port", type=int, default=None, help="Loopback port for the Manager (default: 3000)")
    parser.add_argument("--db-name", default=None, help="PostgreSQL database (default: evolution)")
    parser.add_argument("--db-user", default=None, help="PostgreSQL user (default: evolution)")
    parser.add_argument("--db-pass", default=None, help="PostgreSQL password (default: evolutionpass)")
    parser.add_argument("--webhook-url", default=None, help="Global webhook URL (default: disabled)")
    parser.add_argument("--install-dir", default=None, help="Project directory (default: /opt/evolution)")
    parser.add_argument("--config", default=None, help="YAML file with default values for the flags above")


def params_from_args(args) -> InstallParams:
    """Merge --config file values under explicit CLI flags.

    Raises:
        ConfigError: unreadable config file or unknown keys in it.
    """
    file_values = load_params_file(args.config) if args.config else {}
    cli_values = {name: getattr(args, name) for name in InstallParams.field_names() if hasattr(args, name)}
    return merge_params(file_values, cli_values)
