"""Unit tests for apt-based host provisioning."""

import asyncio

import pytest

from evodock.deploy.provision import ensure_docker, ensure_nginx, provision_host
from evodock.errors import ProvisionError


def test_docker_already_installed_skips_install(fake_host):
    host = fake_host()
    installed = asyncio.run(ensure_docker(host.run_cmd))
    assert installed is False
    assert host.commands == ["command -v docker"]


def test_docker_installed_from_upstream_repo(fake_host):
    host = fake_host(fail_on=["command -v docker"])
    installed = asyncio.run(ensure_docker(host.run_cmd))
    assert installed is True
    joined = "\n".join(host.commands)
    assert "gpg --dearmor" in joined
    assert "/etc/apt/sources.list.d/docker.list" in joined
    assert "docker-compose-plugin" in joined
    assert host.commands[-1] == "systemctl enable --now docker"


def test_apt_runs_noninteractive(fake_host):
    host = fake_host()
    asyncio.run(ensure_nginx(host.run_cmd))
    install_cmd = host.commands[0]
    assert install_cmd.startswith("DEBIAN_FRONTEND=noninteractive apt-get install")
    assert "--force-confold" in install_cmd
    assert install_cmd.endswith(" nginx")


def test_provision_order(fake_host):
    host = fake_host()
    asyncio.run(provision_host(host.run_cmd))
    assert "apt-get update" in host.commands[0]
    assert host.commands[-1] == "systemctl enable --now nginx"


def test_failed_command_raises(fake_host):
    host = fake_host(fail_on=["apt-get update"])
    with pytest.raises(ProvisionError, match="apt-get update"):
        asyncio.run(provision_host(host.run_cmd))
