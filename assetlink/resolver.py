"""
Identity resolution across independently-sourced inventories.

Folds every row of every source, in source order then row order, into a list
of NormalizedAsset clusters. Rows are linked by exact match on canonical
identity keys, checked in strict priority order:

    MAC > hostname > IP > generic asset id

LINKING IS SINGLE-PASS AND NON-TRANSITIVE:
Resolution stops at the first key that hits an existing cluster. If a later
row carries a MAC owned by cluster A and a hostname owned by cluster B, the
row joins A and B stays separate. merge_transitive() is an opt-in post-pass
that unions such clusters; it is never applied implicitly.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from .extractor import FieldExtractor
from .models import IdentityCandidates, NormalizedAsset, Row, Source, SourceDetail
from .schema import IDENTITY_FIELDS

logger = logging.getLogger(__name__)

# Fields an existing asset may learn from a later row (first writer wins)
_LEARNABLE_FIELDS = ["mac", "hostname", "ip", "manufacturer"]


@dataclass
class ResolutionResult:
    """Assets produced by one resolution pass, plus row accounting."""
    assets: List[NormalizedAsset]
    rows_processed: int = 0
    rows_dropped: int = 0

    @property
    def rows_linked(self) -> int:
        return self.rows_processed - self.rows_dropped


@dataclass
class _FoldState:
    """Mutable state owned by exactly one resolution pass."""
    assets: List[NormalizedAsset] = field(default_factory=list)
    # One index per identity field: canonical value -> asset position
    indexes: Dict[str, Dict[str, int]] = field(
        default_factory=lambda: {name: {} for name in IDENTITY_FIELDS}
    )

    def lookup(self, candidates: IdentityCandidates) -> Optional[int]:
        """Position of the first asset matched in priority order, if any."""
        for name in IDENTITY_FIELDS:
            value = getattr(candidates, name)
            if value and value in self.indexes[name]:
                return self.indexes[name][value]
        return None

    def register(self, name: str, value: Optional[str], position: int) -> None:
        if value:
            self.indexes[name][value] = position


def _provenance(source: Source, row: Row) -> SourceDetail:
    return SourceDetail(
        source_id=source.id,
        source_label=source.label,
        source_color=source.color,
        data=dict(row),
    )


class IdentityResolver:
    """Resolves rows from many sources into deduplicated assets.

    Each call to resolve() is a pure recomputation: no state survives between
    calls, so the same ordered sources always yield the same assets, ids and
    provenance order.
    """

    def __init__(self, extractor: Optional[FieldExtractor] = None, debug: bool = False):
        """
        Args:
            extractor: Field extractor (default: fixed header aliases)
            debug: Log every create/link decision at DEBUG level
        """
        self.extractor = extractor or FieldExtractor()
        self.debug = debug

    def resolve(self, sources: Iterable[Source]) -> ResolutionResult:
        """Fold all rows of all sources into assets.

        Args:
            sources: Sources in a fixed, stable order (import order)

        Returns:
            ResolutionResult with assets in creation order
        """
        state = _FoldState()
        processed = 0
        dropped = 0

        for source in sources:
            for row in source.rows:
                processed += 1
                if not self._fold_row(state, source, row):
                    dropped += 1

        logger.info(
            f"Resolved {processed} rows into {len(state.assets)} assets "
            f"({dropped} rows without identity dropped)"
        )
        return ResolutionResult(
            assets=state.assets,
            rows_processed=processed,
            rows_dropped=dropped,
        )

    def _fold_row(self, state: _FoldState, source: Source, row: Row) -> bool:
        """Apply one row to the fold. Returns False if the row was dropped."""
        candidates = self.extractor.extract(row)
        if not candidates.has_identity():
            return False

        position = state.lookup(candidates)
        if position is None:
            self._create_asset(state, source, row, candidates)
        else:
            self._link_row(state, position, source, row, candidates)
        return True

    def _create_asset(
        self,
        state: _FoldState,
        source: Source,
        row: Row,
        candidates: IdentityCandidates,
    ) -> None:
        position = len(state.assets)
        asset = NormalizedAsset(
            # Rows without any key are dropped before this point, so the
            # synthetic id is unreachable in practice.
            id=candidates.primary_id() or uuid4().hex,
            mac=candidates.mac,
            hostname=candidates.hostname,
            ip=candidates.ip,
            manufacturer=candidates.manufacturer,
            sources={source.id},
            source_details=[_provenance(source, row)],
        )
        state.assets.append(asset)
        for name in IDENTITY_FIELDS:
            state.register(name, getattr(candidates, name), position)

        if self.debug:
            logger.debug(f"Asset created: '{asset.id}' from source '{source.label}' (#{position})")

    def _link_row(
        self,
        state: _FoldState,
        position: int,
        source: Source,
        row: Row,
        candidates: IdentityCandidates,
    ) -> None:
        asset = state.assets[position]
        asset.sources.add(source.id)
        asset.source_details.append(_provenance(source, row))

        for name in _LEARNABLE_FIELDS:
            value = getattr(candidates, name)
            if value and not getattr(asset, name):
                setattr(asset, name, value)
                if name in state.indexes:
                    state.register(name, value, position)
                if self.debug:
                    logger.debug(f"Asset '{asset.id}' learned {name}='{value}' from '{source.label}'")

        if self.debug:
            logger.debug(f"Row from '{source.label}' linked to asset '{asset.id}' (#{position})")


# =============================================================================
# OPT-IN TRANSITIVE MERGE
# =============================================================================

class _DisjointSet:
    """Union-find over asset positions; the lowest position is the root."""

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, item: int) -> int:
        while self.parent[item] != item:
            self.parent[item] = self.parent[self.parent[item]]
            item = self.parent[item]
        return item

    def union(self, a: int, b: int) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        if root_a < root_b:
            self.parent[root_b] = root_a
        else:
            self.parent[root_a] = root_b


def merge_transitive(
    assets: List[NormalizedAsset],
    extractor: Optional[FieldExtractor] = None,
) -> List[NormalizedAsset]:
    """Union clusters whose provenance rows share any identity key.

    Every provenance row is re-extracted; when one of its canonical keys is
    already owned by a different cluster, the two clusters are merged. A
    merged group takes the position and id of its lowest-index member, fields
    are first-writer-wins in member order and provenance is concatenated in
    member order. Unmerged assets are returned as-is.

    Args:
        assets: Output of a non-transitive resolution pass
        extractor: Field extractor used for the original pass

    Returns:
        New asset list with transitively linked clusters merged
    """
    extractor = extractor or FieldExtractor()
    groups = _DisjointSet(len(assets))
    owners: Dict[str, Dict[str, int]] = {name: {} for name in IDENTITY_FIELDS}

    for position, asset in enumerate(assets):
        for detail in asset.source_details:
            candidates = extractor.extract(detail.data)
            for name in IDENTITY_FIELDS:
                value = getattr(candidates, name)
                if not value:
                    continue
                owner = owners[name].setdefault(value, position)
                if owner != position:
                    groups.union(owner, position)

    members: Dict[int, List[int]] = {}
    for position in range(len(assets)):
        members.setdefault(groups.find(position), []).append(position)

    merged: List[NormalizedAsset] = []
    for root in sorted(members):
        group = members[root]
        if len(group) == 1:
            merged.append(assets[root])
            continue

        logger.info(f"Transitive merge: {len(group)} clusters folded into '{assets[root].id}'")
        combined = NormalizedAsset(id=assets[root].id)
        for position in group:
            member = assets[position]
            for name in _LEARNABLE_FIELDS:
                if not getattr(combined, name) and getattr(member, name):
                    setattr(combined, name, getattr(member, name))
            combined.sources.update(member.sources)
            combined.source_details.extend(member.source_details)
        merged.append(combined)

    return merged


def resolve_assets(
    sources: Iterable[Source],
    transitive: bool = False,
    extractor: Optional[FieldExtractor] = None,
    debug: bool = False,
) -> List[NormalizedAsset]:
    """Resolve sources into a deduplicated, ordered asset list.

    Args:
        sources: Sources in import order
        transitive: Also merge clusters linked through shared keys
        extractor: Custom field extractor (optional)
        debug: Enable debug logging of resolution decisions

    Returns:
        List of NormalizedAsset in creation order
    """
    resolver = IdentityResolver(extractor=extractor, debug=debug)
    assets = resolver.resolve(sources).assets
    if transitive:
        assets = merge_transitive(assets, extractor=resolver.extractor)
    return assets
