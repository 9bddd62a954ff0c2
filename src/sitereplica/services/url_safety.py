"""Classify user-supplied URLs as externally fetchable or not.

The check runs after normalisation and before any outbound request.  It only
inspects the URL text: a public hostname that later resolves to a private
address (DNS rebinding) is not caught here.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

__all__ = [
    "SafetyVerdict",
    "classify",
    "normalize_url",
    "ALLOWED_SCHEMES",
    "BLOCKED_HOSTNAMES",
    "BLOCKED_IPV4_NETWORKS",
    "METADATA_HOSTNAMES",
    "BLOCKED_SUFFIXES",
]

ALLOWED_SCHEMES = frozenset({"http", "https"})

BLOCKED_HOSTNAMES = frozenset({"localhost", "127.0.0.1", "::1", "0.0.0.0", "[::1]"})

BLOCKED_IPV4_NETWORKS = tuple(
    ipaddress.IPv4Network(cidr)
    for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "169.254.0.0/16",
        "127.0.0.0/8",
        "0.0.0.0/8",
        "100.64.0.0/10",
        "198.18.0.0/15",
    )
)

METADATA_HOSTNAMES = (
    "metadata.google.internal",
    "metadata.goog",
    "instance-data",
    "metadata.azure.com",
    "metadata.azure.internal",
    "169.254.169.254",
    "fd00:ec2::254",
)

BLOCKED_SUFFIXES = (".local", ".internal", ".localhost")

_DOTTED_QUAD_RE = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$")
_NUMERIC_PART_RE = re.compile(r"^(0x[0-9a-f]+|0[0-7]*|[1-9][0-9]*)$")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")


@dataclass(frozen=True, slots=True)
class SafetyVerdict:
    """One-shot classification of a candidate URL."""

    allowed: bool
    reason: str | None = None


_ALLOWED = SafetyVerdict(allowed=True)


def normalize_url(raw_url: str) -> str:
    """Trim ``raw_url`` and prefix ``https://`` when no scheme is present."""

    url = raw_url.strip()
    if url and not _SCHEME_RE.match(url):
        url = f"https://{url}"
    return url


def _parse_numeric_host(hostname: str) -> ipaddress.IPv4Address | None:
    """Read ``hostname`` the way ``inet_aton`` does (``127.1``, ``0x7f.0.0.1``, ``2130706433``)."""

    parts = hostname.split(".")
    if len(parts) > 4 or not all(_NUMERIC_PART_RE.match(part) for part in parts):
        return None

    values = []
    for part in parts:
        if part.startswith("0x"):
            values.append(int(part, 16))
        elif part.startswith("0"):
            values.append(int(part, 8))
        else:
            values.append(int(part))

    # Leading parts are single octets; the last one fills the remaining bytes.
    *head, last = values
    if any(value > 255 for value in head) or last >= 256 ** (4 - len(head)):
        return None
    number = last
    for index, value in enumerate(head):
        number += value << (8 * (3 - index))
    return ipaddress.IPv4Address(number)


def _is_blocked_ipv4(address: ipaddress.IPv4Address) -> bool:
    return any(address in network for network in BLOCKED_IPV4_NETWORKS)


def _ipv4_verdict(hostname: str) -> SafetyVerdict | None:
    match = _DOTTED_QUAD_RE.match(hostname)
    if match is not None:
        octets = [int(part) for part in match.groups()]
        if any(octet > 255 for octet in octets):
            return SafetyVerdict(False, "Invalid IP address")
        if _is_blocked_ipv4(ipaddress.IPv4Address(".".join(str(octet) for octet in octets))):
            return SafetyVerdict(False, "Private or internal IP addresses are not allowed")

    address = _parse_numeric_host(hostname)
    if address is not None and _is_blocked_ipv4(address):
        return SafetyVerdict(False, "Private or internal IP addresses are not allowed")
    return None


def _ipv6_verdict(hostname: str) -> SafetyVerdict | None:
    if ":" not in hostname:
        return None
    try:
        address = ipaddress.IPv6Address(hostname.split("%", 1)[0])
    except ValueError:
        return SafetyVerdict(False, "Invalid IP address")

    mapped = address.ipv4_mapped
    if mapped is not None and _is_blocked_ipv4(mapped):
        return SafetyVerdict(False, "Private or internal IP addresses are not allowed")
    if (
        address.is_loopback
        or address.is_unspecified
        or address.is_link_local
        or address.is_private
        or address.is_site_local
        or address.is_multicast
        or address.is_reserved
    ):
        return SafetyVerdict(False, "Private or internal IP addresses are not allowed")
    return None


def classify(url: str) -> SafetyVerdict:
    """Return whether ``url`` may be fetched on a caller's behalf."""

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return SafetyVerdict(False, "Invalid URL format")

    if not parts.scheme:
        return SafetyVerdict(False, "Invalid URL format")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return SafetyVerdict(False, "Only HTTP and HTTPS URLs are allowed")
    if not hostname:
        return SafetyVerdict(False, "Invalid URL format")

    hostname = hostname.lower().rstrip(".")
    if hostname in BLOCKED_HOSTNAMES:
        return SafetyVerdict(False, "Localhost URLs are not allowed")

    verdict = _ipv4_verdict(hostname) or _ipv6_verdict(hostname)
    if verdict is not None:
        return verdict

    if any(blocked in hostname for blocked in METADATA_HOSTNAMES):
        return SafetyVerdict(False, "Cloud metadata endpoints are not allowed")

    if hostname.endswith(BLOCKED_SUFFIXES):
        return SafetyVerdict(False, "Internal hostnames are not allowed")

    return _ALLOWED
