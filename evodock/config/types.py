"""Parameter and configuration dataclasses."""

from dataclasses import dataclass, fields

from evodock.config.cors import CorsForm, CorsSpec

DEFAULT_INSTALL_DIR = "/opt/evolution"
DEFAULT_API_PORT = 8080
DEFAULT_MANAGER_PORT = 3000
DEFAULT_DB_NAME = "evolution"
DEFAULT_DB_USER = "evolution"
DEFAULT_DB_PASS = "evolutionpass"


@dataclass
class InstallParams:
    """Raw, possibly partial user input. None means "not supplied"."""

    api_domain: str = ""
    manager_domain: str | None = None
    cert: str | None = None
    key: str | None = None
    allow_origins: str | None = None
    apikey: str | None = None
    api_port: int | None = None
    mgr_port: int | None = None
    db_name: str | None = None
    db_user: str | None = None
    db_pass: str | None = None
    cors_format: str | None = None
    webhook_url: str | None = None
    install_dir: str | None = None
    rotate_apikey: bool = False

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}


@dataclass(frozen=True)
class DeploymentConfig:
    """Fully resolved deployment configuration. Built once by assemble()."""

    api_domain: str
    manager_domain: str
    cert_path: str
    key_path: str
    api_key: str
    cors_origins: CorsSpec
    api_key_source: str = "supplied"
    cors_form: CorsForm = CorsForm.JSON_ARRAY
    api_port: int = DEFAULT_API_PORT
    manager_port: int = DEFAULT_MANAGER_PORT
    db_name: str = DEFAULT_DB_NAME
    db_user: str = DEFAULT_DB_USER
    db_pass: str = DEFAULT_DB_PASS
    install_dir: str = DEFAULT_INSTALL_DIR
    webhook_url: str = ""

    @property
    def env_path(self) -> str:
        return f"{self.install_dir.rstrip('/')}/.env"

    @property
    def compose_path(self) -> str:
        return f"{self.install_dir.rstrip('/')}/docker-compose.yml"

    @property
    def cors_value(self) -> str:
        """CORS origins as written to the environment file."""
        return self.cors_origins.render(self.cors_form)
