"""URL parsing and validation utilities."""
from typing import Optional
from urllib.parse import urlparse, urljoin, urlunparse
import ipaddress
import re

import tldextract

from ..core.logging import logger


# Bundled public suffix snapshot only; crawling must not depend on fetching the list.
_extract = tldextract.TLDExtract(suffix_list_urls=())

_DEFAULT_PORTS = {"http": 80, "https": 443}

# "ftp://..." or "mailto:..."; "host:8080" is a port, not a scheme
_SCHEME = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*):(?!\d)")


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is an absolute HTTP(S) URL.

    Args:
        url: URL string to validate

    Returns:
        True if URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return result.scheme in ("http", "https") and bool(result.hostname)
    except ValueError:
        return False


def normalize_seed(raw: str) -> Optional[str]:
    """
    Turn user input into an absolute seed URL.

    A missing scheme defaults to https. Returns None for any other explicit
    scheme and for input that still does not parse as an HTTP(S) URL.
    """
    candidate = raw.strip().replace("`", "")
    if not candidate:
        return None
    scheme = _SCHEME.match(candidate)
    if scheme is None:
        candidate = f"https://{candidate}"
    elif scheme.group(1).lower() not in _DEFAULT_PORTS:
        logger.warning(f"Discarding seed URL with unsupported scheme: {raw!r}")
        return None
    if not is_valid_url(candidate):
        logger.warning(f"Discarding unparsable seed URL: {raw!r}")
        return None
    return normalize_url(candidate)


def normalize_url(url: str) -> str:
    """
    Normalize a URL for visited-set comparisons.

    Lowercases scheme and host, drops the fragment and default ports, and
    turns an empty path into ``/``. The query string is kept because
    pagination commonly lives there.

    Args:
        url: URL to normalize

    Returns:
        Normalized URL
    """
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    host = (parsed.hostname or "").lower()
    try:
        port = parsed.port
    except ValueError:
        port = None
    netloc = host
    if port and _DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{host}:{port}"
    if parsed.username:
        credentials = parsed.username
        if parsed.password:
            credentials = f"{credentials}:{parsed.password}"
        netloc = f"{credentials}@{netloc}"
    path = parsed.path or "/"
    return urlunparse((scheme, netloc, path, parsed.params, parsed.query, ""))


def get_domain(url: str) -> Optional[str]:
    """
    Extract the lowercase hostname from a URL.

    Args:
        url: URL to extract domain from

    Returns:
        Hostname or None if invalid URL
    """
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return host.lower().strip(".") if host else None


def registrable_domain(url: str) -> Optional[str]:
    """
    Registrable domain of a URL (``blog.example.co.uk`` -> ``example.co.uk``).

    Hosts without a public suffix (``localhost``, IP addresses, internal
    names) are returned unchanged so they only match themselves.
    """
    host = get_domain(url)
    if not host:
        return None
    try:
        ipaddress.ip_address(host)
        return host
    except ValueError:
        pass
    extracted = _extract(host)
    if extracted.domain and extracted.suffix:
        return f"{extracted.domain}.{extracted.suffix}"
    return host


def is_same_domain(url1: str, url2: str) -> bool:
    """
    Check if two URLs share a registrable domain.

    Args:
        url1: First URL
        url2: Second URL

    Returns:
        True if same domain, False otherwise
    """
    domain1 = registrable_domain(url1)
    domain2 = registrable_domain(url2)
    return domain1 == domain2 and domain1 is not None


def resolve_url(base_url: str, relative_url: str) -> str:
    """
    Resolve a relative URL against a base URL.

    Args:
        base_url: Base URL
        relative_url: Relative URL to resolve

    Returns:
        Absolute URL
    """
    return urljoin(base_url, relative_url)


def classify_url_type(url: str) -> str:
    """
    Classify URL type based on path and extension.

    Args:
        url: URL to classify

    Returns:
        URL type classification
    """
    parsed = urlparse(url)
    path = parsed.path.lower()

    # Check for common file extensions
    if any(path.endswith(ext) for ext in ['.pdf', '.doc', '.docx', '.xls', '.xlsx', '.zip']):
        return 'document'
    elif any(path.endswith(ext) for ext in ['.jpg', '.jpeg', '.png', '.gif', '.svg', '.webp', '.ico']):
        return 'image'
    elif any(path.endswith(ext) for ext in ['.mp4', '.avi', '.mov', '.wmv', '.mp3', '.wav', '.ogg']):
        return 'media'
    elif path.endswith('.css'):
        return 'stylesheet'
    elif path.endswith('.js'):
        return 'javascript'
    else:
        return 'page'
