"""Install orchestration: assemble, provision, apply, start, probe, summarize."""

import logging
import os
import shlex
from dataclasses import dataclass

from evodock.config.assemble import FilesystemProbe, assemble
from evodock.config.types import DeploymentConfig, InstallParams
from evodock.deploy.apply import DEFAULT_NGINX_DIR, apply
from evodock.deploy.health import (
    DEFAULT_ATTEMPTS,
    DEFAULT_EXPECTED,
    DEFAULT_INTERVAL,
    HealthStatus,
    probe,
)
from evodock.deploy.local import make_read_file, make_run_cmd, make_write_file
from evodock.deploy.provision import provision_host
from evodock.deploy.render import FILE_TARGETS, SITE_TARGETS
from evodock.errors import PrivilegeError, ProvisionError
from evodock.redact import register_secret

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Per-run switches that do not affect the rendered configuration."""

    nginx_dir: str = DEFAULT_NGINX_DIR
    dry_run: bool = False
    skip_packages: bool = False
    health_attempts: int = DEFAULT_ATTEMPTS
    health_interval: float = DEFAULT_INTERVAL


def is_root():
    return os.geteuid() == 0


def health_url(config: DeploymentConfig) -> str:
    return f"http://127.0.0.1:{config.api_port}/"


def format_summary(config: DeploymentConfig, status: HealthStatus | None) -> list[str]:
    """Summary lines printed at the end of an install. Never includes the API key."""
    lines = [
        "==============================================",
        f" API URL:     https://{config.api_domain}",
        f" Manager:     https://{config.manager_domain}",
        f" API Key:     ({config.api_key_source}, stored in {config.env_path})",
        f" CORS:        {config.cors_value}",
        f" Project:     {config.install_dir}",
        " Containers:",
        f"   - evolution_api     (internal 8080 -> 127.0.0.1:{config.api_port})",
        "   - evolution_db      (127.0.0.1:5432)",
        f"   - evolution_manager (internal 3000 -> 127.0.0.1:{config.manager_port})",
    ]
    if status is HealthStatus.UNREACHABLE:
        lines.append(
            f" WARNING:     API did not respond on loopback port {config.api_port}. "
            f"Check: cd {config.install_dir} && docker compose logs evolution-api"
        )
    lines.append("==============================================")
    return lines


async def _compose(run_cmd, args, timeout=900):
    rc, _, _ = await run_cmd(f"docker compose {args}", timeout=timeout, log_output=True)
    if rc != 0:
        raise ProvisionError(f"'docker compose {args}' failed (exit {rc})")


async def run_install(
    config: DeploymentConfig,
    run_cmd,
    write_file,
    read_file,
    options: RunOptions,
    transport=None,
) -> HealthStatus | None:
    """Provision the host and deploy config. Returns the probe status (None in dry-run).

    Raises:
        ProvisionError: a package or container command failed.
        ApplyError: nginx rejected the rendered sites.
    """
    if not options.skip_packages:
        logger.info("Step 1: base packages (Docker, NGINX)")
        await provision_host(run_cmd)

    logger.info(f"Step 2: environment and compose files in {config.install_dir}")
    await apply(config, FILE_TARGETS, run_cmd, write_file, read_file, options.nginx_dir)

    logger.info("Step 3: starting containers")
    compose_file = shlex.quote(config.compose_path)
    await _compose(run_cmd, f"-f {compose_file} pull", timeout=1800)
    await _compose(run_cmd, f"-f {compose_file} up -d")
    await _compose(run_cmd, f"-f {compose_file} ps", timeout=60)

    logger.info(f"Step 4: NGINX sites for {config.api_domain} and {config.manager_domain}")
    await apply(config, SITE_TARGETS, run_cmd, write_file, read_file, options.nginx_dir)

    status = None
    if options.dry_run:
        logger.info(f"[dry-run] skipping health check of {health_url(config)}")
    else:
        logger.info("Step 5: local health check (loopback)")
        status = await probe(
            health_url(config),
            DEFAULT_EXPECTED,
            max_attempts=options.health_attempts,
            interval=options.health_interval,
            transport=transport,
        )
        if status is HealthStatus.HEALTHY:
            logger.info(f"API responds on loopback port {config.api_port}")
        else:
            logger.warning(
                f"WARNING: API did not respond on loopback port {config.api_port}. "
                f"Check: docker compose logs evolution-api"
            )

    for line in format_summary(config, status):
        logger.info(line)
    return status


async def install(params: InstallParams, options: RunOptions, probe_fs=None, privileged=is_root):
    """Single entry point: assemble config, check privileges, run the install.

    Config assembly touches nothing on disk, so cert/key errors abort
    before any system state changes.
    """
    config = assemble(params, probe_fs or FilesystemProbe())
    register_secret(config.api_key)
    register_secret(config.db_pass)

    if not options.dry_run and not privileged():
        raise PrivilegeError("Run as root (sudo).")

    run_cmd = make_run_cmd(dry_run=options.dry_run)
    write_file = make_write_file(dry_run=options.dry_run)
    read_file = make_read_file()
    return await run_install(config, run_cmd, write_file, read_file, options)
