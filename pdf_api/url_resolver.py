"""
Source URL validation and document-platform rewrites.

Gamma share links (gamma.app/docs/<id> or gamma.app/embed/<id>) point at an
HTML viewer; the PDF lives at the document's export endpoint.
"""

import re
from urllib.parse import urlparse

from pdf_api.config import get
from pdf_api.errors import InvalidUrlError
from pdf_api.logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_SCHEMES = ("http", "https")

_GAMMA_HOST = get("gamma", "host")
_GAMMA_DOC_PATTERN = re.compile(get("gamma", "doc_pattern"))
_GAMMA_EXPORT_URL = get("gamma", "export_url")


def validate_source_url(url: str) -> str:
    """Return url with surrounding whitespace removed.

    Raises InvalidUrlError unless url is an absolute http(s) URL.
    """
    if not url or not url.strip():
        raise InvalidUrlError()

    normalized = url.strip()
    try:
        parsed = urlparse(normalized)
    except ValueError as e:
        raise InvalidUrlError(f"Malformed URL: {e}")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(f"Unsupported URL scheme: {parsed.scheme or '(none)'}")
    if not parsed.netloc:
        raise InvalidUrlError("URL must include a host")
    return normalized


def resolve_pdf_url(url: str) -> str:
    """Return the URL the PDF should actually be downloaded from."""
    if _GAMMA_HOST not in url:
        return url

    match = _GAMMA_DOC_PATTERN.search(url)
    if not match:
        return url

    resolved = _GAMMA_EXPORT_URL.format(doc_id=match.group(1))
    logger.debug(f"Rewrote Gamma URL {url} -> {resolved}")
    return resolved
