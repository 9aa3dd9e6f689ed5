"""Unit tests for URL and content helpers."""

from datetime import date

import pytest

from keyword_crawler.utils.content_utils import (
    collapse_whitespace,
    http_date_to_iso,
    parse_date,
    summarize,
)
from keyword_crawler.utils.url_utils import (
    classify_url_type,
    is_same_domain,
    is_valid_url,
    normalize_seed,
    normalize_url,
    registrable_domain,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("HTTPS://Example.COM", "https://example.com/"),
        ("https://example.com:443/a#top", "https://example.com/a"),
        ("http://example.com:8080/a?page=2", "http://example.com:8080/a?page=2"),
        ("http://example.com:80", "http://example.com/"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_normalize_seed_defaults_to_https():
    """Seeds without a scheme are fetched over https."""
    assert normalize_seed("example.com/news") == "https://example.com/news"
    assert normalize_seed("  `https://example.com`  ") == "https://example.com/"


@pytest.mark.parametrize("raw", ["", "   ", "https://", "http://"])
def test_normalize_seed_rejects_garbage(raw):
    assert normalize_seed(raw) is None


@pytest.mark.parametrize("raw", ["ftp://example.com/file", "mailto:team@example.com", "javascript:alert(1)"])
def test_normalize_seed_rejects_other_schemes(raw):
    """Explicit non-HTTP schemes are refused, not rewritten into a host."""
    assert normalize_seed(raw) is None


def test_normalize_seed_keeps_ports_and_scheme_case():
    """A host:port seed is not mistaken for a scheme."""
    assert normalize_seed("localhost:8000/admin") == "https://localhost:8000/admin"
    assert normalize_seed("HTTP://Example.com") == "http://example.com/"


def test_is_valid_url():
    assert is_valid_url("https://example.com")
    assert not is_valid_url("mailto:someone@example.com")
    assert not is_valid_url("/relative/path")


def test_registrable_domain():
    """Subdomains collapse onto the registrable domain."""
    assert registrable_domain("https://blog.example.co.uk/x") == "example.co.uk"
    assert registrable_domain("https://www.example.com") == "example.com"
    assert registrable_domain("http://127.0.0.1:8000/") == "127.0.0.1"
    assert registrable_domain("http://localhost/") == "localhost"
    assert registrable_domain("not a url") is None


def test_is_same_domain():
    assert is_same_domain("https://a.example.com/", "http://b.example.com/x")
    assert not is_same_domain("https://example.com/", "https://example.org/")
    assert not is_same_domain("http://127.0.0.1/", "http://127.0.0.2/")


def test_classify_url_type():
    assert classify_url_type("https://example.com/report.PDF") == "document"
    assert classify_url_type("https://example.com/logo.png") == "image"
    assert classify_url_type("https://example.com/blog/") == "page"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-03-05", date(2024, 3, 5)),
        ("2024-03-05T10:00:00Z", date(2024, 3, 5)),
        ("2024-03-05T23:30:00+02:00", date(2024, 3, 5)),
        ("2024/03/05", date(2024, 3, 5)),
        ("March 5, 2024", date(2024, 3, 5)),
        ("2024-03-05T10:00:00.123456789Z", date(2024, 3, 5)),
        ("yesterday", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_date(value, expected):
    assert parse_date(value) == expected


def test_http_date_to_iso():
    assert http_date_to_iso("Wed, 21 Oct 2015 07:28:00 GMT") == "2015-10-21T07:28:00+00:00"
    assert http_date_to_iso("garbage") is None
    assert http_date_to_iso(None) is None


def test_summarize_cuts_at_word_boundary():
    text = "word " * 100

    summary = summarize(collapse_whitespace(text), limit=50)

    assert summary.endswith("...")
    assert len(summary) <= 53
    assert not summary[:-3].endswith(" ")
    assert summarize("") is None
    assert summarize("short") == "short"
