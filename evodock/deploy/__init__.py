"""Deploy library: rendering, apply, provisioning, health probing, orchestration."""

from evodock.deploy.apply import apply, enabled_path, target_path
from evodock.deploy.health import HealthStatus, probe
from evodock.deploy.orchestrate import RunOptions, format_summary, install, run_install
from evodock.deploy.provision import ensure_docker, ensure_nginx, provision_host
from evodock.deploy.render import (
    ALL_TARGETS,
    FILE_TARGETS,
    SITE_TARGETS,
    RenderTarget,
    generate_compose,
    generate_env,
    generate_nginx_site,
    render,
)

__all__ = [
    "ALL_TARGETS",
    "FILE_TARGETS",
    "SITE_TARGETS",
    "HealthStatus",
    "RenderTarget",
    "RunOptions",
    "apply",
    "enabled_path",
    "ensure_docker",
    "ensure_nginx",
    "format_summary",
    "generate_compose",
    "generate_env",
    "generate_nginx_site",
    "install",
    "probe",
    "provision_host",
    "render",
    "run_install",
    "target_path",
]
