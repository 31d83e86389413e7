"""Exception types raised by the provisioning pipeline."""


class EvodockError(Exception):
    """Base class for fatal provisioning errors."""


class ConfigError(EvodockError):
    """Invalid or inconsistent configuration input."""


class MissingArgumentError(ConfigError):
    """A required argument was not supplied."""


class CertNotFoundError(ConfigError):
    """None of the candidate certificate/key paths exists."""

    def __init__(self, label, checked_paths):
        self.label = label
        self.checked_paths = list(checked_paths)
        checked = ", ".join(self.checked_paths) if self.checked_paths else "none"
        super().__init__(
            f"No {label} found. Use --cert/--key or place it in one of: {checked}"
        )


class PrivilegeError(EvodockError):
    """The command must run as root."""


class ProvisionError(EvodockError):
    """A package or container command failed."""


class ApplyError(EvodockError):
    """Rendered proxy configuration failed validation; nothing was reloaded."""
