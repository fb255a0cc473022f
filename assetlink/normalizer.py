"""Field normalizers for identity-bearing inventory values.

Every normalizer is pure and total: it returns the canonical form of a value,
or None when the value cannot be used as a linking key. Malformed input only
weakens a row's identifying power, it never aborts processing.
"""

import re
from typing import Any, Optional

from .schema import MAC_SEPARATORS

_MAC_SEPARATOR_RE = re.compile(f"[{re.escape(MAC_SEPARATORS)}]")
_MAC_HEX_RE = re.compile(r"^[0-9a-f]{12}$")
# All-zero and all-f MACs are placeholder values reported by many tools
_MAC_GARBAGE_RE = re.compile(r"^(0+|f+)$")

_IPV4_RE = re.compile(r"^(?:[0-9]{1,3}\.){3}[0-9]{1,3}$")
_IP_GARBAGE = {"0.0.0.0", "127.0.0.1"}

_HOSTNAME_GARBAGE = {"null", "undefined", "unknown"}


def normalize_mac(value: Any) -> Optional[str]:
    """Normalize a MAC address to 12 lower-case hex characters.

    Accepts colon, hyphen and dot separated forms ("AA:BB:CC:DD:EE:FF",
    "aa-bb-cc-dd-ee-ff", "aabb.ccdd.eeff").

    Args:
        value: Raw cell value

    Returns:
        Canonical MAC (e.g. "aabbccddeeff"), or None if unusable
    """
    if not value or not isinstance(value, str):
        return None

    clean = _MAC_SEPARATOR_RE.sub("", value).lower().strip()
    if not _MAC_HEX_RE.match(clean):
        return None
    if _MAC_GARBAGE_RE.match(clean):
        return None
    return clean


def normalize_hostname(value: Any) -> Optional[str]:
    """Lower-case and trim a hostname, rejecting placeholder tokens."""
    if not value or not isinstance(value, str):
        return None

    clean = value.lower().strip()
    if not clean or clean in _HOSTNAME_GARBAGE:
        return None
    return clean


def normalize_ip(value: Any) -> Optional[str]:
    """Trim an IPv4 address and validate its shape.

    Validation is syntactic only: four dot-separated groups of 1-3 digits.
    Out-of-range octets such as "999" are accepted.
    """
    if not value or not isinstance(value, str):
        return None

    clean = value.strip()
    if not clean or clean in _IP_GARBAGE:
        return None
    if not _IPV4_RE.match(clean):
        return None
    return clean


def normalize_generic_id(value: Any) -> Optional[str]:
    """Trim a generic asset id / serial / tag. Any non-empty string is usable."""
    if not value or not isinstance(value, str):
        return None

    clean = value.strip()
    return clean or None


def format_mac(normalized: Optional[str]) -> str:
    """Render a canonical MAC as colon-separated upper-case hex for display.

    Presentation only; identity comparison always uses the canonical form.

    Args:
        normalized: Canonical 12-character MAC

    Returns:
        e.g. "0B:5A:A8:00:01:02", or an em dash placeholder when absent
    """
    if not normalized or len(normalized) != 12:
        return "—"
    pairs = [normalized[i:i + 2] for i in range(0, 12, 2)]
    return ":".join(pairs).upper()
