"""CORS origin parsing and per-format serialization.

Accepted inputs: ``*``, a comma list (``https://a, https://b``), a bracketed
list (``["https://a","https://b"]``) or a single bare origin. Each normalizes
to a CorsSpec, which renders canonically for the requested CorsForm.
"""

import json
from dataclasses import dataclass
from enum import Enum

from evodock.errors import ConfigError

WILDCARD = "*"


class CorsForm(Enum):
    JSON_ARRAY = "json"
    COMMA_STRING = "comma"


@dataclass(frozen=True)
class Wildcard:
    """Any origin."""

    def render(self, form: CorsForm) -> str:
        return WILDCARD


@dataclass(frozen=True)
class OriginList:
    """Explicit origins in user order.

    ``scalar`` marks a single bare origin, rendered as a JSON string
    rather than a one-element array.
    """

    origins: tuple[str, ...]
    scalar: bool = False

    def render(self, form: CorsForm) -> str:
        if form is CorsForm.COMMA_STRING:
            return ",".join(self.origins)
        if self.scalar:
            return json.dumps(self.origins[0])
        return json.dumps(list(self.origins), separators=(",", ":"))


CorsSpec = Wildcard | OriginList


def _split_bracketed(raw: str) -> list[str]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list) and all(isinstance(item, str) for item in parsed):
        return [item.strip() for item in parsed]
    # Loosely quoted list like [https://a, 'https://b']
    return [item.strip().strip("\"'").strip() for item in raw[1:-1].split(",")]


def parse_origins(raw) -> CorsSpec:
    """Normalize a user-supplied origin specification into a CorsSpec."""
    text = (raw or "").strip()
    if text in ("", WILDCARD):
        return Wildcard()

    if text.startswith("[") and text.endswith("]"):
        items = _split_bracketed(text)
        scalar = False
    elif "," in text:
        items = [item.strip() for item in text.split(",")]
        scalar = False
    else:
        return OriginList((text,), scalar=True)

    origins = tuple(item for item in items if item)
    if not origins:
        raise ConfigError(f"No origins found in --allow-origins value {raw!r}")
    return OriginList(origins)


def format_origins(raw, form: CorsForm) -> str:
    """Format a raw origin specification for a target config format."""
    return parse_origins(raw).render(form)
