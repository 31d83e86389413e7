"""Random credential generation."""

import secrets
import string

ALPHABET = string.ascii_letters + string.digits
DEFAULT_KEY_LENGTH = 48


def generate_secret(length=DEFAULT_KEY_LENGTH):
    """Return `length` characters drawn uniformly from [A-Za-z0-9] via the OS CSPRNG."""
    if length < 1:
        raise ValueError(f"Secret length must be positive, got {length}")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))
