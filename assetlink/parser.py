import logging
import secrets
import string
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from .models import LoadResult, Row, Source, SourceLoadError
from .schema import SOURCE_COLORS

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_source_id(length: int = 9) -> str:
    """Short random base-36 token used as a stable source identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def color_for_index(index: int) -> str:
    """Palette color for the source at the given import position (cycling)."""
    return SOURCE_COLORS[index % len(SOURCE_COLORS)]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def is_blank_row(row: Row) -> bool:
    """True when every value in the row is null or empty."""
    return all(_is_blank(value) for value in row.values())


class InventoryParser:
    """Parser that turns inventory files into Source objects."""

    def __init__(self):
        self.adapters = []

    def register_adapter(self, adapter):
        """Register a file adapter for parsing.

        Args:
            adapter: Adapter instance with can_handle() and read() methods
        """
        self.adapters.append(adapter)

    def _adapter_for(self, file_path: str):
        for adapter in self.adapters:
            if adapter.can_handle(file_path):
                return adapter
        raise ValueError(f"No adapter found for {file_path}")

    def parse(self, file_path: str) -> Tuple[List[str], List[Row]]:
        """Parse a file into headers and non-blank rows.

        Args:
            file_path: Path to the inventory file

        Returns:
            Tuple of (header names, rows); fully-empty rows are skipped

        Raises:
            ValueError: If no adapter is found or the file cannot be parsed
            FileNotFoundError: If the file does not exist
        """
        adapter = self._adapter_for(str(file_path))
        headers, raw_rows = adapter.read(str(file_path))
        rows = [row for row in raw_rows if not is_blank_row(row)]

        skipped = len(raw_rows) - len(rows)
        if skipped:
            logger.debug(f"{Path(file_path).name}: skipped {skipped} blank rows")
        return headers, rows

    def load_source(self, file_path: str, label: Optional[str] = None, index: int = 0) -> Source:
        """Parse one file into a Source.

        Args:
            file_path: Path to the inventory file
            label: Display label (default: file name without extension)
            index: Import position, used to pick the palette color

        Returns:
            Source with a freshly generated id
        """
        path = Path(file_path)
        headers, rows = self.parse(str(path))
        return Source(
            id=generate_source_id(),
            label=label or path.stem,
            file_name=path.name,
            rows=rows,
            headers=headers,
            color=color_for_index(index),
        )

    def load_sources(
        self,
        file_paths: Sequence[str],
        labels: Optional[Sequence[Optional[str]]] = None,
        start_index: int = 0,
        limit: Optional[int] = None,
    ) -> LoadResult:
        """Parse a batch of files, isolating per-file failures.

        Sources are returned in the order the files were given. A file that
        fails to parse is reported in LoadResult.errors and contributes no
        source; the rest of the batch still loads.

        Args:
            file_paths: Files to import, in import order
            labels: Optional labels matched positionally to file_paths
            start_index: Number of sources already loaded (palette offset)
            limit: Maximum number of sources to accept from this batch

        Returns:
            LoadResult with loaded sources and per-file errors
        """
        labels = list(labels or [])
        result = LoadResult()

        for position, file_path in enumerate(file_paths):
            path = Path(file_path)
            if limit is not None and len(result.sources) >= limit:
                logger.warning(f"Source limit reached, skipping {path.name}")
                result.errors.append(SourceLoadError(path.name, "source limit reached"))
                continue

            label = labels[position] if position < len(labels) else None
            try:
                source = self.load_source(
                    str(path),
                    label=label,
                    index=start_index + len(result.sources),
                )
            except (ValueError, OSError) as e:
                logger.warning(f"Failed to load {path.name}: {e}")
                result.errors.append(SourceLoadError(path.name, str(e)))
                continue

            logger.info(f"Loaded source '{source.label}' ({source.row_count} rows) from {path.name}")
            result.sources.append(source)

        return result
