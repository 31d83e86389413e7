"""Unit tests for install orchestration and the final summary."""

import asyncio

import httpx
import pytest

from evodock.config.types import InstallParams
from evodock.deploy import HealthStatus, RunOptions, format_summary, install, run_install
from evodock.errors import ApplyError, CertNotFoundError, ConfigError, PrivilegeError


def _transport(body):
    return httpx.MockTransport(lambda request: httpx.Response(200, text=body))


def _run(config, host, transport, **options):
    opts = RunOptions(health_attempts=2, health_interval=0, **options)
    return asyncio.run(run_install(config, host.run_cmd, host.write_file, host.read_file, opts, transport=transport))


def test_install_sequence(sample_config, fake_host):
    host = fake_host()
    status = _run(sample_config, host, _transport("Welcome to the Evolution API"))
    assert status is HealthStatus.HEALTHY

    commands = host.commands
    pull = next(i for i, c in enumerate(commands) if "docker compose" in c and c.endswith(" pull"))
    up = next(i for i, c in enumerate(commands) if c.endswith(" up -d"))
    nginx_test = commands.index("nginx -t")
    assert commands.index("command -v docker") < pull < up < nginx_test
    assert "/opt/evolution/.env" in host.files
    assert "/opt/evolution/docker-compose.yml" in host.files


def test_skip_packages(sample_config, fake_host):
    host = fake_host()
    _run(sample_config, host, _transport("Evolution API"), skip_packages=True)
    assert not any("apt-get" in c for c in host.commands)


def test_unreachable_is_warning_not_error(sample_config, fake_host, caplog):
    caplog.set_level("INFO")
    host = fake_host()
    status = _run(sample_config, host, _transport("502 Bad Gateway"), skip_packages=True)
    assert status is HealthStatus.UNREACHABLE
    assert "WARNING: API did not respond on loopback port 8080" in caplog.text
    assert "docker compose logs evolution-api" in caplog.text


def test_nginx_failure_aborts_before_probe(sample_config, fake_host):
    host = fake_host(fail_on=["nginx -t"])
    with pytest.raises(ApplyError):
        _run(sample_config, host, _transport("Evolution API"), skip_packages=True)
    assert "systemctl reload nginx" not in host.commands


def test_summary_hides_api_key(sample_config):
    lines = format_summary(sample_config, HealthStatus.HEALTHY)
    text = "\n".join(lines)
    assert "https://demo.test" in text
    assert "https://manager.demo.test" in text
    assert "/opt/evolution/.env" in text
    assert sample_config.api_key not in text
    assert "WARNING" not in text


def test_summary_warning_when_unreachable(sample_config):
    text = "\n".join(format_summary(sample_config, HealthStatus.UNREACHABLE))
    assert "WARNING" in text
    assert "docker compose logs evolution-api" in text


# ── install() entry point ───────────────────────────────────────────


def test_install_missing_certs_writes_nothing(fake_probe, tmp_path):
    install_dir = tmp_path / "install"
    params = InstallParams(api_domain="demo.test", install_dir=str(install_dir))
    with pytest.raises(CertNotFoundError) as exc_info:
        asyncio.run(install(params, RunOptions(), probe_fs=fake_probe(), privileged=lambda: True))
    assert len(exc_info.value.checked_paths) == 3
    assert not install_dir.exists()


def test_install_requires_root(make_params, tmp_path):
    with pytest.raises(PrivilegeError):
        asyncio.run(install(make_params(), RunOptions(), privileged=lambda: False))
    assert not (tmp_path / "install").exists()


def test_install_bad_existing_env_is_config_error(make_params, tmp_path):
    install_dir = tmp_path / "install"
    install_dir.mkdir()
    (install_dir / ".env").write_bytes(b"AUTHENTICATION_API_KEY=\xff\xfe\n")
    with pytest.raises(ConfigError):
        asyncio.run(install(make_params(), RunOptions(), privileged=lambda: False))


def test_install_dry_run_skips_privilege_check(make_params, tmp_path, caplog):
    caplog.set_level("INFO")
    status = asyncio.run(install(make_params(), RunOptions(dry_run=True), privileged=lambda: False))
    assert status is None
    assert "[dry-run] nginx -t" in caplog.text
    assert not (tmp_path / "install").exists()
