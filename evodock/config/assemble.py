"""Configuration assembly: raw InstallParams + filesystem probing -> DeploymentConfig."""

import logging
import os

from dotenv import dotenv_values

from evodock.config.apikey import DEFAULT_KEY_LENGTH, generate_secret
from evodock.config.cors import CorsForm, parse_origins
from evodock.config.paths import cert_candidates, is_readable_file, key_candidates, resolve_path
from evodock.config.types import (
    DEFAULT_API_PORT,
    DEFAULT_DB_NAME,
    DEFAULT_DB_PASS,
    DEFAULT_DB_USER,
    DEFAULT_INSTALL_DIR,
    DEFAULT_MANAGER_PORT,
    DeploymentConfig,
    InstallParams,
)
from evodock.errors import ConfigError, MissingArgumentError

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "AUTHENTICATION_API_KEY"


class FilesystemProbe:
    """Read-only view of the host filesystem used during assembly."""

    def is_readable(self, path) -> bool:
        return is_readable_file(path)

    def read_env(self, path) -> dict:
        """Parse a dotenv file; empty dict if it does not exist.

        Raises:
            ConfigError: the file exists but cannot be read or decoded.
        """
        if not os.path.isfile(path):
            return {}
        try:
            return dotenv_values(path)
        except PermissionError:
            raise ConfigError(f"Cannot read existing {path}: permission denied. Run as root (sudo).") from None
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot read existing {path}: {e}. Pass --apikey or --rotate-apikey.") from None


def derive_manager_domain(api_domain):
    return f"manager.{api_domain.removeprefix('www.')}"


def _port(value, default, flag):
    port = default if value is None else value
    try:
        port = int(port)
    except (TypeError, ValueError):
        raise ConfigError(f"{flag} must be an integer, got {value!r}") from None
    if not 1 <= port <= 65535:
        raise ConfigError(f"{flag} must be between 1 and 65535, got {port}")
    return port


def _cors_form(value):
    if value is None:
        return CorsForm.JSON_ARRAY
    try:
        return CorsForm(value)
    except ValueError:
        choices = ", ".join(f.value for f in CorsForm)
        raise ConfigError(f"Unknown CORS format '{value}'. Available formats: {choices}") from None


def _resolve_api_key(params, install_dir, probe):
    """Return (api_key, source). Source is 'supplied', 'reused' or 'generated'."""
    if params.apikey:
        return params.apikey, "supplied"
    if not params.rotate_apikey:
        previous = probe.read_env(f"{install_dir.rstrip('/')}/.env").get(API_KEY_ENV_VAR)
        if previous:
            logger.debug(f"Reusing API key from existing {install_dir}/.env")
            return previous, "reused"
    return generate_secret(DEFAULT_KEY_LENGTH), "generated"


def assemble(params: InstallParams, probe: FilesystemProbe | None = None) -> DeploymentConfig:
    """Resolve partial user input into a complete DeploymentConfig.

    Certificate resolution happens before anything else touches the
    system, so a missing cert/key aborts the run with no side effects.

    Raises:
        MissingArgumentError: api_domain is empty.
        CertNotFoundError: no candidate cert or key path exists.
        ConfigError: invalid port, CORS value or CORS format.
    """
    probe = probe or FilesystemProbe()

    api_domain = (params.api_domain or "").strip()
    if not api_domain:
        raise MissingArgumentError("API domain is required")

    manager_domain = (params.manager_domain or "").strip() or derive_manager_domain(api_domain)

    cert_path = resolve_path(cert_candidates(params.cert, api_domain), "fullchain.pem", probe.is_readable)
    key_path = resolve_path(key_candidates(params.key, api_domain), "privkey.pem", probe.is_readable)

    install_dir = params.install_dir or DEFAULT_INSTALL_DIR
    api_key, api_key_source = _resolve_api_key(params, install_dir, probe)

    cors_origins = parse_origins(params.allow_origins)

    return DeploymentConfig(
        api_domain=api_domain,
        manager_domain=manager_domain,
        cert_path=cert_path,
        key_path=key_path,
        api_key=api_key,
        api_key_source=api_key_source,
        cors_origins=cors_origins,
        cors_form=_cors_form(params.cors_format),
        api_port=_port(params.api_port, DEFAULT_API_PORT, "--api-port"),
        manager_port=_port(params.mgr_port, DEFAULT_MANAGER_PORT, "--mgr-port"),
        db_name=params.db_name or DEFAULT_DB_NAME,
        db_user=params.db_user or DEFAULT_DB_USER,
        db_pass=params.db_pass or DEFAULT_DB_PASS,
        install_dir=install_dir,
        webhook_url=params.webhook_url or "",
    )
