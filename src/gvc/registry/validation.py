"""Repository URL validation performed before any request is made."""
from __future__ import annotations

import ipaddress
from urllib.parse import urlsplit

from gvc.constants import Constants
from gvc.errors import InsecureRepositoryError


def _is_forbidden_address(host: str) -> bool:
    """Return True if ``host`` is a literal private/loopback/local address."""
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    mapped = getattr(address, "ipv4_mapped", None)
    if mapped is not None:
        address = mapped
    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_unspecified
        or address.is_reserved
        or address.is_multicast
    )


def validate_repository_url(url: str) -> str:
    """Check a repository base URL and return it without a trailing slash.

    Raises:
        InsecureRepositoryError: non-HTTP(S) scheme, missing host, or a
            loopback/private host.
    """
    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
    except ValueError as exc:
        raise InsecureRepositoryError(f"Invalid repository URL '{url}': {exc}") from exc

    if parts.scheme.lower() not in Constants.ALLOWED_SCHEMES:
        raise InsecureRepositoryError(
            f"Repository URL '{url}' must use http or https"
        )
    if not host:
        raise InsecureRepositoryError(f"Repository URL '{url}' has no host")
    if host == "localhost" or host.endswith(".localhost"):
        raise InsecureRepositoryError(f"Repository URL '{url}' targets a loopback host")
    if _is_forbidden_address(host):
        raise InsecureRepositoryError(
            f"Repository URL '{url}' targets a private or loopback address"
        )
    return url.strip().rstrip("/")
