"""Filtering, pagination and summary statistics over resolved assets.

These are pure functions of an already-resolved asset list; they never
change asset order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .models import NormalizedAsset, Source
from .schema import MAC_SEPARATORS, PAGE_SIZE

_MAC_SEARCH_TABLE = str.maketrans("", "", MAC_SEPARATORS)


class CardinalityMode(Enum):
    """Filter on how many sources reported an asset."""
    ALL = "all"
    UNIQUE = "unique"        # exactly one source
    MULTIPLE = "multiple"    # more than one source

    def matches(self, asset: NormalizedAsset) -> bool:
        if self is CardinalityMode.UNIQUE:
            return len(asset.sources) == 1
        if self is CardinalityMode.MULTIPLE:
            return len(asset.sources) > 1
        return True


def _matches_text(asset: NormalizedAsset, lower_term: str, mac_term: str) -> bool:
    if asset.mac and mac_term in asset.mac:
        return True
    for value in (asset.hostname, asset.ip, asset.manufacturer, asset.id):
        if value and lower_term in value.lower():
            return True
    return False


def filter_assets(
    assets: Sequence[NormalizedAsset],
    search: str = "",
    source_ids: Optional[Iterable[str]] = None,
    mode: Union[CardinalityMode, str] = CardinalityMode.ALL,
) -> List[NormalizedAsset]:
    """Filter assets by free text, source membership and cardinality.

    All three predicates are ANDed and the original order is preserved.

    Args:
        assets: Resolved assets
        search: Case-insensitive term matched against hostname, IP,
            manufacturer and id; MAC is matched with ":", "-" and "."
            stripped from the term
        source_ids: Keep assets reported by at least one of these sources
            (None or empty: no constraint)
        mode: CardinalityMode or its string value

    Returns:
        Filtered list of assets
    """
    mode = CardinalityMode(mode)
    selected = set(source_ids or ())
    search = search or ""
    lower_term = search.lower().strip()
    mac_term = search.translate(_MAC_SEARCH_TABLE).lower().strip()

    results = []
    for asset in assets:
        if search and not _matches_text(asset, lower_term, mac_term):
            continue
        if selected and not (selected & asset.sources):
            continue
        if not mode.matches(asset):
            continue
        results.append(asset)
    return results


@dataclass
class Page:
    """One page of results."""
    items: List[NormalizedAsset]
    page: int
    page_size: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total


def paginate(assets: Sequence[NormalizedAsset], page: int = 1, page_size: int = PAGE_SIZE) -> Page:
    """Slice a result list into a 1-based page."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    start = (page - 1) * page_size
    return Page(
        items=list(assets[start:start + page_size]),
        page=page,
        page_size=page_size,
        total=len(assets),
    )


@dataclass
class SourceCoverage:
    source_id: str
    label: str
    asset_count: int
    percentage: float


@dataclass
class AssetSummary:
    """Headline numbers for a resolved inventory."""
    total: int
    synced: int
    unique: int
    coverage: List[SourceCoverage] = field(default_factory=list)

    def coverage_by_source(self) -> Dict[str, SourceCoverage]:
        return {item.source_id: item for item in self.coverage}


def summarize(assets: Sequence[NormalizedAsset], sources: Sequence[Source]) -> AssetSummary:
    """Count synced/unique assets and the share of assets each source reported."""
    total = len(assets)
    synced = sum(1 for asset in assets if len(asset.sources) > 1)
    unique = sum(1 for asset in assets if len(asset.sources) == 1)

    coverage = []
    for source in sources:
        count = sum(1 for asset in assets if source.id in asset.sources)
        percentage = (count / total) * 100 if total else 0.0
        coverage.append(SourceCoverage(source.id, source.label, count, percentage))

    return AssetSummary(total=total, synced=synced, unique=unique, coverage=coverage)
