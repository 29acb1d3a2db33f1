"""Source URL validation for the scrape pipeline.

This is a coarse guard: it rejects malformed URLs, non-HTTP schemes and a
short list of obviously private hostnames by string comparison.  It does
NOT resolve DNS, so it misses IPv6 loopback, decimal/octal IP encodings and
DNS rebinding.  The ``172.`` prefix also blocks public 172.x addresses.

The scraper re-applies :func:`validate_source_url` to every redirect target
so a public URL cannot bounce the fetch onto a private host.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from protege.utils.errors import InputValidationError

_ALLOWED_SCHEMES = frozenset({"http", "https"})
_BLOCKED_HOSTS = frozenset({"localhost", "127.0.0.1"})
_BLOCKED_PREFIXES = ("192.168.", "10.", "172.")

_INVALID_FORMAT = "Invalid URL format. Please provide a valid HTTP or HTTPS URL."
_INVALID_SCHEME = "Only HTTP and HTTPS URLs are supported."
_PRIVATE_HOST = "Cannot scrape localhost or private IP addresses."


def validate_source_url(raw_url: str) -> str:
    """Validate *raw_url* and return it stripped of surrounding whitespace.

    Raises
    ------
    InputValidationError
        If the URL does not parse as an absolute URL, uses a scheme other
        than ``http``/``https``, or points at a blocked host.
    """
    candidate = (raw_url or "").strip()
    if not candidate:
        raise InputValidationError(_INVALID_FORMAT)

    try:
        parts = urlsplit(candidate)
        # Accessing .port validates the port component.
        parts.port  # noqa: B018
    except ValueError as exc:
        raise InputValidationError(_INVALID_FORMAT) from exc

    scheme = parts.scheme.lower()
    if not scheme:
        raise InputValidationError(_INVALID_FORMAT)
    if scheme not in _ALLOWED_SCHEMES:
        raise InputValidationError(_INVALID_SCHEME)

    hostname = (parts.hostname or "").lower()
    if not hostname:
        raise InputValidationError(_INVALID_FORMAT)

    if is_blocked_host(hostname):
        raise InputValidationError(_PRIVATE_HOST)

    return candidate


def is_blocked_host(hostname: str) -> bool:
    """Return ``True`` for localhost and the private-range prefixes."""
    host = hostname.lower()
    return host in _BLOCKED_HOSTS or host.startswith(_BLOCKED_PREFIXES)
