"""Locate identity fields in rows with arbitrary, source-specific column names."""

import re
from typing import Any, Dict, List, Optional

from .models import IdentityCandidates, Row
from .normalizer import (
    normalize_generic_id,
    normalize_hostname,
    normalize_ip,
    normalize_mac,
)
from .schema import COLUMN_MAPPINGS

_HEADER_NOISE_RE = re.compile(r"[\s\-_]")


def normalize_header(header: Any) -> str:
    """Lower-case a header name and drop whitespace, hyphens and underscores.

    "MAC Address", "mac_address" and "Mac-Address" all become "macaddress".
    """
    if header is None:
        return ""
    return _HEADER_NOISE_RE.sub("", str(header).lower())


def get_row_value(row: Row, aliases: List[str]) -> Optional[str]:
    """Return the trimmed value of the first row column matching any alias.

    Columns are scanned in the row's own order; alias order does not matter.

    Args:
        row: Mapping of column name to raw value
        aliases: Acceptable header names for one semantic field

    Returns:
        The value as a trimmed string, or None if no column matches or the
        matched value is empty
    """
    wanted = {normalize_header(alias) for alias in aliases}

    for key, value in row.items():
        if normalize_header(key) not in wanted:
            continue
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    return None


class FieldExtractor:
    """Extracts and normalizes all identity candidates from a row.

    The alias lists default to the fixed COLUMN_MAPPINGS; a custom mapping
    may be supplied for sources with unusual headers.
    """

    def __init__(self, column_mappings: Optional[Dict[str, List[str]]] = None):
        self.column_mappings = dict(COLUMN_MAPPINGS)
        if column_mappings:
            self.column_mappings.update(column_mappings)

    def get(self, row: Row, field_name: str) -> Optional[str]:
        """Raw trimmed value for one semantic field."""
        return get_row_value(row, self.column_mappings.get(field_name, []))

    def extract(self, row: Row) -> IdentityCandidates:
        """Extract and normalize MAC, hostname, IP, generic id and manufacturer."""
        return IdentityCandidates(
            mac=normalize_mac(self.get(row, "mac")),
            hostname=normalize_hostname(self.get(row, "hostname")),
            ip=normalize_ip(self.get(row, "ip")),
            generic_id=normalize_generic_id(self.get(row, "generic_id")),
            manufacturer=self.get(row, "manufacturer"),
        )
