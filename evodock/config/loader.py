"""Optional YAML parameter file, merged under explicit CLI flags."""

import os

import yaml

from evodock.config.types import InstallParams
from evodock.errors import ConfigError

# Keys a parameter file may not set: the domain is positional and rotation is a per-run choice
_RESERVED_KEYS = {"api_domain", "rotate_apikey"}

_PORT_KEYS = {"api_port", "mgr_port"}


def _coerce(path, name, value):
    """Normalize one parameter file value to the type InstallParams expects.

    Ports stay int (or str, validated later by assemble); everything else
    becomes str. Lists, mappings, booleans and dates are rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigError(
            f"Invalid value for '{name}' in {path}: expected a single string or number, "
            f"got {type(value).__name__}. Quote the value if it should be a string."
        )
    if name in _PORT_KEYS:
        if isinstance(value, float):
            raise ConfigError(f"Invalid value for '{name}' in {path}: expected an integer port, got {value}")
        return value
    return str(value)


def load_params_file(path) -> dict:
    """Load a YAML mapping of install parameters (keys use flag names, '-' or '_').

    Raises:
        ConfigError: missing or malformed file, unknown keys, or values of the wrong type.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from None

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(raw).__name__}")

    allowed = InstallParams.field_names() - _RESERVED_KEYS
    values = {}
    unknown = []
    for key, value in raw.items():
        name = str(key).replace("-", "_")
        if name not in allowed:
            unknown.append(str(key))
            continue
        values[name] = _coerce(path, name, value)
    if unknown:
        raise ConfigError(
            f"Unknown keys in {path}: {', '.join(sorted(unknown))}. "
            f"Available keys: {', '.join(sorted(allowed))}"
        )
    return values


def merge_params(file_values: dict, cli_values: dict) -> InstallParams:
    """Build InstallParams; CLI values that are not None override file values."""
    merged = dict(file_values)
    for key, value in cli_values.items():
        if value is not None:
            merged[key] = value
    return InstallParams(**merged)
