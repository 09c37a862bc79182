"""Document identity derivation - map a URL to a single safe path segment."""

import hashlib
import re
from urllib.parse import unquote, urlsplit

import structlog

from readpub.utils.exceptions import InvalidUrlError

logger = structlog.get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[/\\]")
_REMOVED = re.compile(r'[?:*"<>|\x00-\x1f\x7f]')
_ALPHANUMERIC = re.compile(r"[^\W_]")

FALLBACK_HASH_LENGTH = 12


def sanitize_segment(candidate: str) -> str:
    """Make *candidate* safe to use as a single file or directory name."""
    candidate = _WHITESPACE.sub("_", candidate)
    candidate = _SEPARATORS.sub("_", candidate)
    return _REMOVED.sub("", candidate)


def derive_identity(url: str) -> str:
    """
    Derive a stable, filesystem-safe document identity from a URL.

    The identity is the final non-empty path segment of the URL, decoded and
    sanitized. URLs without a usable segment (bare domains, "/", "/..") fall
    back to the host followed by a short hash of the full URL.

    Args:
        url: Absolute article URL

    Returns:
        Identity string usable as a workspace directory and output file stem

    Raises:
        InvalidUrlError: If the URL cannot be parsed or is not absolute
    """
    url = url.strip()
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError as e:
        raise InvalidUrlError(f"Unable to parse URL {url!r}: {e}") from e

    if not parts.scheme or not host:
        raise InvalidUrlError(f"Unable to parse URL {url!r}: not an absolute URL")

    segments = [segment for segment in parts.path.split("/") if segment]
    candidate = sanitize_segment(unquote(segments[-1])) if segments else ""

    if _ALPHANUMERIC.search(candidate):
        return candidate

    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:FALLBACK_HASH_LENGTH]
    identity = f"{sanitize_segment(host)}-{digest}"
    logger.info("identity_fallback", url=url, identity=identity)
    return identity
