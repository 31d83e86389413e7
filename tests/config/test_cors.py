"""Unit tests for CORS origin parsing and formatting."""

import pytest

from evodock.config.cors import CorsForm, OriginList, Wildcard, format_origins, parse_origins
from evodock.errors import ConfigError

# ── format_origins ──────────────────────────────────────────────────


@pytest.mark.parametrize("form", list(CorsForm))
def test_wildcard_unchanged_for_every_form(form):
    assert format_origins("*", form) == "*"


@pytest.mark.parametrize("form", list(CorsForm))
def test_empty_value_means_wildcard(form):
    assert format_origins("", form) == "*"
    assert format_origins(None, form) == "*"


def test_comma_list_to_json_array():
    assert format_origins("https://a, https://b", CorsForm.JSON_ARRAY) == '["https://a","https://b"]'


def test_comma_list_to_comma_string():
    assert format_origins("https://a,https://b", CorsForm.COMMA_STRING) == "https://a,https://b"


def test_comma_list_trims_whitespace():
    assert format_origins("  https://a ,   https://b  ", CorsForm.COMMA_STRING) == "https://a,https://b"


def test_single_origin_json_is_quoted_string():
    assert format_origins("https://solo", CorsForm.JSON_ARRAY) == '"https://solo"'


def test_single_origin_comma_string_as_is():
    assert format_origins("https://solo", CorsForm.COMMA_STRING) == "https://solo"


def test_bracketed_passes_through_for_json():
    raw = '["https://a","https://b"]'
    assert format_origins(raw, CorsForm.JSON_ARRAY) == raw


def test_bracketed_flattened_for_comma_string():
    assert format_origins('[ "https://a" , "https://b" ]', CorsForm.COMMA_STRING) == "https://a,https://b"


def test_loosely_quoted_bracketed_list():
    assert format_origins("[https://a, 'https://b']", CorsForm.COMMA_STRING) == "https://a,https://b"


def test_bracketed_single_origin_stays_array():
    assert format_origins('["https://a"]', CorsForm.JSON_ARRAY) == '["https://a"]'


def test_same_logical_input_same_output():
    """Comma list and bracketed list describing the same origins render identically."""
    inputs = ["https://a,https://b", "https://a, https://b", '["https://a", "https://b"]']
    for form in CorsForm:
        outputs = {format_origins(raw, form) for raw in inputs}
        assert len(outputs) == 1


def test_format_is_deterministic():
    raw = "https://x.com, https://y.com"
    assert format_origins(raw, CorsForm.JSON_ARRAY) == format_origins(raw, CorsForm.JSON_ARRAY)


# ── parse_origins ───────────────────────────────────────────────────


def test_parse_comma_list():
    spec = parse_origins("https://x.com,https://y.com")
    assert spec == OriginList(("https://x.com", "https://y.com"))


def test_parse_drops_empty_elements():
    assert parse_origins("https://a,,https://b,") == OriginList(("https://a", "https://b"))


def test_parse_wildcard():
    assert parse_origins(" * ") == Wildcard()


def test_bracketed_wildcard_stays_a_list():
    assert parse_origins('["*"]') == OriginList(("*",))
    assert format_origins('["*"]', CorsForm.JSON_ARRAY) == '["*"]'
    assert format_origins('["*"]', CorsForm.COMMA_STRING) == "*"


def test_parse_bare_origin_is_scalar():
    assert parse_origins("https://solo") == OriginList(("https://solo",), scalar=True)


def test_parse_only_commas_raises():
    with pytest.raises(ConfigError, match="No origins"):
        parse_origins(" , , ")


def test_parse_empty_brackets_raises():
    with pytest.raises(ConfigError):
        parse_origins("[]")
