"""Render command: write the deployment artifacts to a directory without touching the system."""

import asyncio
import logging
import sys

from evodock.commands import add_config_arguments, params_from_args
from evodock.config.assemble import assemble
from evodock.deploy.local import make_write_file
from evodock.deploy.render import API_SITE_NAME, MANAGER_SITE_NAME, RenderTarget, render
from evodock.errors import EvodockError
from evodock.redact import register_secret

logger = logging.getLogger(__name__)

OUTPUT_NAMES = {
    RenderTarget.ENV: ".env",
    RenderTarget.COMPOSE: "docker-compose.yml",
    RenderTarget.API_SITE: API_SITE_NAME,
    RenderTarget.MANAGER_SITE: MANAGER_SITE_NAME,
}


async def write_artifacts(config, output_dir):
    """Write every render target under output_dir. Returns the written names."""
    write_file = make_write_file(output_dir)
    for target, name in OUTPUT_NAMES.items():
        mode = 0o600 if target is RenderTarget.ENV else None
        await write_file(name, render(config, target), mode=mode)
    return list(OUTPUT_NAMES.values())


def handle_render(args):
    """Handle the render command."""
    try:
        config = assemble(params_from_args(args))
    except EvodockError as e:
        logger.error(f"[ERROR] {e}")
        sys.exit(1)
    register_secret(config.api_key)
    register_secret(config.db_pass)

    names = asyncio.run(write_artifacts(config, args.output_dir))
    for name in names:
        logger.info(f"Wrote {args.output_dir}/{name}")
    logger.info(f"API key: {config.api_key_source}")


def register_render_command(subparsers):
    """Register the render subcommand."""
    parser = subparsers.add_parser("render", help="Render .env, compose and nginx sites into a directory")
    add_config_arguments(parser)
    parser.add_argument("--output-dir", required=True, help="Directory to write the artifacts into")
    parser.set_defaults(func=handle_render)
