"""Parameter resolution: secrets, cert paths, CORS origins, config assembly."""

from evodock.config.apikey import generate_secret
from evodock.config.assemble import FilesystemProbe, assemble, derive_manager_domain
from evodock.config.cors import CorsForm, OriginList, Wildcard, format_origins, parse_origins
from evodock.config.loader import load_params_file, merge_params
from evodock.config.paths import cert_candidates, key_candidates, resolve_path
from evodock.config.types import DeploymentConfig, InstallParams

__all__ = [
    "CorsForm",
    "DeploymentConfig",
    "FilesystemProbe",
    "InstallParams",
    "OriginList",
    "Wildcard",
    "assemble",
    "cert_candidates",
    "derive_manager_domain",
    "format_origins",
    "generate_secret",
    "key_candidates",
    "load_params_file",
    "merge_params",
    "parse_origins",
    "resolve_path",
]
