"""
Inventory workspace: the set of loaded sources for one session.

The resolved asset list is never patched incrementally. Any change to the
source set (add, remove, relabel) discards it, and the next access rebuilds
it from scratch over the sources in import order.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .adapters import CsvAdapter, ExcelAdapter
from .config import AssetLinkConfig
from .models import LoadResult, NormalizedAsset, Source
from .parser import InventoryParser
from .query import CardinalityMode, filter_assets, summarize, AssetSummary
from .resolver import resolve_assets

logger = logging.getLogger(__name__)


def default_parser() -> InventoryParser:
    """Parser with the CSV and Excel adapters registered."""
    parser = InventoryParser()
    parser.register_adapter(CsvAdapter())
    parser.register_adapter(ExcelAdapter())
    return parser


class InventoryWorkspace:
    """Holds loaded sources and serves the resolved, filterable asset view."""

    def __init__(
        self,
        parser: Optional[InventoryParser] = None,
        config: Optional[AssetLinkConfig] = None,
        debug: bool = False,
    ):
        self.parser = parser or default_parser()
        self.config = config or AssetLinkConfig.from_env()
        self.debug = debug
        self._sources: List[Source] = []
        self._assets: Optional[List[NormalizedAsset]] = None

    @property
    def sources(self) -> Tuple[Source, ...]:
        return tuple(self._sources)

    @property
    def remaining_capacity(self) -> int:
        return max(self.config.max_sources - len(self._sources), 0)

    def _invalidate(self) -> None:
        self._assets = None

    def _find(self, source_id: str) -> Source:
        for source in self._sources:
            if source.id == source_id:
                return source
        raise KeyError(f"Unknown source: {source_id}")

    def import_files(
        self,
        file_paths: Sequence[str],
        labels: Optional[Sequence[Optional[str]]] = None,
    ) -> LoadResult:
        """Parse files and append the successfully loaded ones as sources.

        Args:
            file_paths: Files in import order
            labels: Optional labels matched positionally

        Returns:
            LoadResult describing loaded sources and per-file failures
        """
        result = self.parser.load_sources(
            file_paths,
            labels=labels,
            start_index=len(self._sources),
            limit=self.remaining_capacity,
        )
        if result.sources:
            self._sources.extend(result.sources)
            self._invalidate()
        return result

    def add_source(self, source: Source) -> None:
        """Append an already-built source.

        Raises:
            ValueError: If the workspace already holds max_sources sources
        """
        if not self.remaining_capacity:
            raise ValueError(f"Workspace is full ({self.config.max_sources} sources)")
        self._sources.append(source)
        self._invalidate()

    def remove_source(self, source_id: str) -> Source:
        """Remove a source by id and return it."""
        source = self._find(source_id)
        self._sources.remove(source)
        self._invalidate()
        logger.info(f"Removed source '{source.label}'")
        return source

    def relabel_source(self, source_id: str, label: str) -> None:
        """Change a source's display label (the only mutable source attribute)."""
        source = self._find(source_id)
        source.label = label
        # Provenance records carry the label, so the view must be rebuilt
        self._invalidate()

    def label_for(self, source_id: str) -> Optional[str]:
        for source in self._sources:
            if source.id == source_id:
                return source.label
        return None

    @property
    def assets(self) -> List[NormalizedAsset]:
        """Resolved assets for the current sources (rebuilt after any change)."""
        if self._assets is None:
            self._assets = resolve_assets(
                self._sources,
                transitive=self.config.transitive_merge,
                debug=self.debug,
            )
        return self._assets

    def query(
        self,
        search: str = "",
        source_ids: Optional[Iterable[str]] = None,
        mode: Union[CardinalityMode, str] = CardinalityMode.ALL,
    ) -> List[NormalizedAsset]:
        return filter_assets(self.assets, search=search, source_ids=source_ids, mode=mode)

    def summary(self) -> AssetSummary:
        return summarize(self.assets, self._sources)
