"""Write rendered artifacts and activate proxy sites behind an nginx -t gate."""

import logging
import shlex

from evodock.config.types import DeploymentConfig
from evodock.deploy.render import (
    API_SITE_NAME,
    MANAGER_SITE_NAME,
    RenderTarget,
    render,
)
from evodock.errors import ApplyError

logger = logging.getLogger(__name__)

DEFAULT_NGINX_DIR = "/etc/nginx"
ENV_FILE_MODE = 0o600

_SITE_NAMES = {
    RenderTarget.API_SITE: API_SITE_NAME,
    RenderTarget.MANAGER_SITE: MANAGER_SITE_NAME,
}


def target_path(config: DeploymentConfig, target: RenderTarget, nginx_dir=DEFAULT_NGINX_DIR) -> str:
    """Well-known on-disk location of a render target."""
    if target is RenderTarget.ENV:
        return config.env_path
    if target is RenderTarget.COMPOSE:
        return config.compose_path
    return f"{nginx_dir.rstrip('/')}/sites-available/{_SITE_NAMES[target]}"


def enabled_path(target: RenderTarget, nginx_dir=DEFAULT_NGINX_DIR) -> str:
    return f"{nginx_dir.rstrip('/')}/sites-enabled/{_SITE_NAMES[target]}"


async def apply(config, targets, run_cmd, write_file, read_file, nginx_dir=DEFAULT_NGINX_DIR):
    """Render targets from config and write them to their well-known paths.

    Plain files are always rewritten. Site files are validated with
    ``nginx -t`` before reload. If writing, linking or validation fails, the
    previous site files and sites-enabled links are restored and nginx is
    not reloaded.

    Args:
        config: assembled DeploymentConfig
        targets: iterable of RenderTarget
        run_cmd: async callable(command, stream=True, timeout=600) -> (returncode, stdout, stderr)
        write_file: async callable(path, content, mode=None) -> None
        read_file: async callable(path) -> str | None
        nginx_dir: nginx configuration root

    Raises:
        ApplyError: nginx validation or reload failed.
    """
    targets = set(targets)

    for target in (RenderTarget.ENV, RenderTarget.COMPOSE):
        if target in targets:
            path = target_path(config, target, nginx_dir)
            mode = ENV_FILE_MODE if target is RenderTarget.ENV else None
            logger.info(f"Writing {path}")
            await write_file(path, render(config, target), mode=mode)

    sites = [t for t in (RenderTarget.API_SITE, RenderTarget.MANAGER_SITE) if t in targets]
    if sites:
        await _apply_sites(config, sites, run_cmd, write_file, read_file, nginx_dir)


async def _link_exists(run_cmd, path):
    rc, _, _ = await run_cmd(f"test -L {shlex.quote(path)}", stream=False)
    return rc == 0


async def _apply_sites(config, sites, run_cmd, write_file, read_file, nginx_dir):
    # target -> (previous file content or None, whether the sites-enabled link existed)
    previous = {}
    try:
        for target in sites:
            path = target_path(config, target, nginx_dir)
            link = enabled_path(target, nginx_dir)
            previous[target] = (await read_file(path), await _link_exists(run_cmd, link))
            logger.info(f"Writing {path}")
            await write_file(path, render(config, target))
            rc, _, stderr = await run_cmd(f"ln -sf {shlex.quote(path)} {shlex.quote(link)}", stream=False)
            if rc != 0:
                raise ApplyError(f"Failed to enable {path}: {stderr.strip()}")

        rc, stdout, stderr = await run_cmd("nginx -t", stream=False)
        if rc != 0:
            detail = (stderr or stdout).strip()
            raise ApplyError(f"nginx configuration test failed.\n{detail}")
    except Exception as e:
        await _restore_sites(config, previous, run_cmd, write_file, nginx_dir)
        if isinstance(e, ApplyError):
            raise ApplyError(f"{e}\nPrevious sites restored, nginx not reloaded.") from e
        raise ApplyError(f"Failed to write nginx sites: {e}. Previous sites restored, nginx not reloaded.") from e

    default_site = f"{nginx_dir.rstrip('/')}/sites-enabled/default"
    await run_cmd(f"rm -f {shlex.quote(default_site)}", stream=False)

    rc, _, stderr = await run_cmd("systemctl reload nginx", stream=False)
    if rc != 0:
        raise ApplyError(f"Failed to reload nginx: {stderr.strip()}")
    logger.info("NGINX reloaded")


async def _restore_sites(config, previous, run_cmd, write_file, nginx_dir):
    """Put every touched site back as it was. Keeps going past individual failures."""
    for target, (content, linked) in previous.items():
        path = target_path(config, target, nginx_dir)
        link = enabled_path(target, nginx_dir)
        try:
            if not linked:
                await run_cmd(f"rm -f {shlex.quote(link)}", stream=False)
            if content is None:
                logger.info(f"Removing new site {path}")
                await run_cmd(f"rm -f {shlex.quote(path)}", stream=False)
            else:
                logger.info(f"Restoring previous {path}")
                await write_file(path, content)
        except Exception as e:
            logger.error(f"Could not restore {path}: {e}")
