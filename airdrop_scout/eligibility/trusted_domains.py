"""
Trusted claim-domain checks.

A claim URL is trusted only when it is HTTPS and its host equals, or is a
strict subdomain of, one of the campaign's configured domains. An empty
domain list never trusts anything.
"""

from __future__ import annotations

from typing import Iterable
from urllib.parse import SplitResult, urlsplit


def normalize_host(hostname: str) -> str:
    """Lower-case, IDNA-encode (punycode) and strip a leading 'www.'."""
    host = (hostname or "").strip().lower().rstrip(".")
    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError:
        pass
    if host.startswith("www."):
        host = host[4:]
    return host


def parse_url(url: str) -> SplitResult | None:
    """Split a URL; None when it has no scheme or no host."""
    try:
        parts = urlsplit((url or "").strip())
        hostname = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return parts


def matches_trusted_host(hostname: str, trusted_domains: Iterable[str]) -> bool:
    """Exact or strict-subdomain host match; ignores scheme entirely."""
    host = normalize_host(hostname)
    if not host:
        return False
    for domain in trusted_domains:
        trusted = normalize_host(domain)
        if not trusted:
            continue
        if host == trusted or host.endswith("." + trusted):
            return True
    return False


def is_trusted_claim_domain(claim_url: str, trusted_domains: Iterable[str]) -> bool:
    parts = parse_url(claim_url)
    if parts is None or parts.scheme.lower() != "https":
        return False
    return matches_trusted_host(parts.hostname or "", trusted_domains)
