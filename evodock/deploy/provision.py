"""Host package provisioning: Docker CE and NGINX via apt."""

import logging

from evodock.errors import ProvisionError

logger = logging.getLogger(__name__)

APT_ENV = "DEBIAN_FRONTEND=noninteractive"
APT_FLAGS = "-y -o Dpkg::Options::=--force-confdef -o Dpkg::Options::=--force-confold"

DOCKER_KEYRING = "/etc/apt/keyrings/docker.gpg"
DOCKER_SOURCES = "/etc/apt/sources.list.d/docker.list"
DOCKER_GPG_URL = "https://download.docker.com/linux/ubuntu/gpg"
DOCKER_PACKAGES = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]


def apt_install(packages):
    return f"{APT_ENV} apt-get install {APT_FLAGS} {' '.join(packages)}"


def docker_source_line():
    """Shell snippet that prints the Docker apt source for this host's release."""
    return (
        f'echo "deb [arch=$(dpkg --print-architecture) signed-by={DOCKER_KEYRING}] '
        f'https://download.docker.com/linux/ubuntu $(. /etc/os-release && echo $UBUNTU_CODENAME) stable"'
        f" > {DOCKER_SOURCES}"
    )


async def _run_step(run_cmd, command, timeout=900):
    rc, _, _ = await run_cmd(command, timeout=timeout, log_output=True)
    if rc != 0:
        raise ProvisionError(f"Command failed (exit {rc}): {command}")


async def apt_update(run_cmd):
    await _run_step(run_cmd, f"{APT_ENV} apt-get update -y")


async def ensure_docker(run_cmd):
    """Install Docker CE from the upstream repository unless docker is already on PATH.

    Returns:
        True if Docker was installed, False if it was already present.
    """
    rc, _, _ = await run_cmd("command -v docker", stream=False)
    if rc == 0:
        logger.info("Docker already installed.")
        return False

    logger.info("Installing Docker CE...")
    for command in (
        apt_install(["ca-certificates", "curl", "gnupg", "lsb-release"]),
        "install -m 0755 -d /etc/apt/keyrings",
        f"curl -fsSL {DOCKER_GPG_URL} | gpg --dearmor --yes -o {DOCKER_KEYRING}",
        f"chmod a+r {DOCKER_KEYRING}",
        docker_source_line(),
        f"{APT_ENV} apt-get update -y",
        apt_install(DOCKER_PACKAGES),
        "systemctl enable --now docker",
    ):
        await _run_step(run_cmd, command)
    return True


async def ensure_nginx(run_cmd):
    """Install nginx (a no-op for apt when present) and enable the service."""
    logger.info("Installing NGINX...")
    await _run_step(run_cmd, apt_install(["nginx"]))
    await _run_step(run_cmd, "systemctl enable --now nginx")


async def provision_host(run_cmd):
    """Refresh apt indexes, then make sure Docker and NGINX are installed."""
    await apt_update(run_cmd)
    await ensure_docker(run_cmd)
    await ensure_nginx(run_cmd)
