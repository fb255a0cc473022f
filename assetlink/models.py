"""Core data model shared by the parser, resolver, query layer and exporter."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Union

# A raw cell value as produced by a tabular adapter
Scalar = Union[str, int, float, bool, None]

# One row of a source: column name (trimmed, as it appeared) -> raw value.
# Plain dicts preserve insertion order, which the field extractor relies on.
Row = Dict[str, Scalar]


@dataclass
class Source:
    """
    One imported tabular dataset.

    The data payload (rows, headers, file name, color) is fixed once the
    source is created; only the label is user-editable.
    """
    id: str
    label: str
    file_name: str
    rows: List[Row]
    headers: List[str] = field(default_factory=list)
    color: str = ""

    @property
    def name(self) -> str:
        """File name without its extension."""
        stem, _, _ = self.file_name.rpartition(".")
        return stem or self.file_name

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass
class SourceDetail:
    """
    Provenance record: one contributing row and the source it came from.

    The row is a copy, so later changes to the source's rows never leak
    into an already-resolved asset.
    """
    source_id: str
    source_label: str
    source_color: str
    data: Row


@dataclass
class NormalizedAsset:
    """
    One physical asset inferred from one or more source rows.

    mac, hostname, ip and manufacturer are first-writer-wins: once set by a
    contributing row they are never overwritten.
    """
    id: str
    mac: Optional[str] = None
    hostname: Optional[str] = None
    ip: Optional[str] = None
    manufacturer: Optional[str] = None
    sources: Set[str] = field(default_factory=set)
    source_details: List[SourceDetail] = field(default_factory=list)

    @property
    def source_count(self) -> int:
        return len(self.sources)

    @property
    def is_synced(self) -> bool:
        """True when more than one source reported this asset."""
        return len(self.sources) > 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "mac": self.mac,
            "hostname": self.hostname,
            "ip": self.ip,
            "manufacturer": self.manufacturer,
            "sources": sorted(self.sources),
            "source_details": [
                {
                    "source_id": detail.source_id,
                    "source_label": detail.source_label,
                    "source_color": detail.source_color,
                    "data": dict(detail.data),
                }
                for detail in self.source_details
            ],
        }


@dataclass(frozen=True)
class IdentityCandidates:
    """Normalized identity values extracted from a single row."""
    mac: Optional[str] = None
    hostname: Optional[str] = None
    ip: Optional[str] = None
    generic_id: Optional[str] = None
    manufacturer: Optional[str] = None

    def has_identity(self) -> bool:
        """True when at least one linking key (not manufacturer) is present."""
        return any((self.mac, self.hostname, self.ip, self.generic_id))

    def primary_id(self) -> Optional[str]:
        """First present key in priority order MAC > hostname > IP > generic id."""
        return self.mac or self.hostname or self.ip or self.generic_id


@dataclass(frozen=True)
class SourceLoadError:
    """A file that could not be turned into a source."""
    file_name: str
    message: str


@dataclass
class LoadResult:
    """Outcome of importing a batch of files."""
    sources: List[Source] = field(default_factory=list)
    errors: List[SourceLoadError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
