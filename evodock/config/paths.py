"""Certificate and key autodiscovery over ordered candidate paths."""

import os

from evodock.errors import CertNotFoundError

SERVICE_CERT_DIR = "/etc/ssl/certificados"
LETSENCRYPT_LIVE_DIR = "/etc/letsencrypt/live"


def is_readable_file(path):
    return os.path.isfile(path) and os.access(path, os.R_OK)


def cert_candidates(cert_flag, api_domain):
    """Candidate fullchain paths: explicit flag first, then conventions from specific to generic."""
    return [
        cert_flag,
        f"{SERVICE_CERT_DIR}/fullchain.pem",
        f"{LETSENCRYPT_LIVE_DIR}/{api_domain}/fullchain.pem",
        "/etc/ssl/certs/fullchain.pem",
    ]


def key_candidates(key_flag, api_domain):
    """Candidate private key paths, same precedence as cert_candidates()."""
    return [
        key_flag,
        f"{SERVICE_CERT_DIR}/privkey.pem",
        f"{LETSENCRYPT_LIVE_DIR}/{api_domain}/privkey.pem",
        "/etc/ssl/private/privkey.pem",
    ]


def resolve_path(candidates, label="file", is_readable=is_readable_file):
    """Return the first candidate that is a readable file.

    Empty and None entries are skipped and not reported as checked.

    Raises:
        CertNotFoundError: no candidate matched; lists every checked path.
    """
    checked = []
    for path in candidates:
        if not path:
            continue
        checked.append(path)
        if is_readable(path):
            return path
    raise CertNotFoundError(label, checked)
