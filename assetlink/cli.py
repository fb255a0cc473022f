"""Command-line entry point: load inventories, resolve assets, filter and export.

Example:
    assetlink cmdb.csv scanner.xlsx --label CMDB --label Scanner \\
        --mode multiple --output reports/
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import find_dotenv, load_dotenv

from .config import AssetLinkConfig
from .export import AssetExporter, build_export_records, default_export_filename
from .models import NormalizedAsset
from .query import CardinalityMode, paginate
from .workspace import InventoryWorkspace

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ["Status", "Primary Identifier", "Match Type", "Hostname", "IP", "Manufacturer", "Sources List"]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="assetlink",
        description="Merge device inventories from several sources into one deduplicated asset list.",
    )
    parser.add_argument("files", nargs="+", help="Inventory files (.csv, .tsv, .xlsx)")
    parser.add_argument("--label", action="append", default=[],
                        help="Label for the corresponding file (repeat per file)")
    parser.add_argument("--search", default="", help="Free-text filter (hostname, IP, MAC, manufacturer, id)")
    parser.add_argument("--source", action="append", default=[],
                        help="Only assets reported by this source label or id (repeatable)")
    parser.add_argument("--mode", choices=[mode.value for mode in CardinalityMode], default="all",
                        help="all, unique (one source) or multiple (more than one source)")
    parser.add_argument("--transitive", action="store_true",
                        help="Also merge clusters linked through shared keys")
    parser.add_argument("--page", type=int, default=1, help="Result page to print (1-based)")
    parser.add_argument("--output", type=Path, help="Export file, or directory for a dated CSV")
    parser.add_argument("--format", choices=["csv", "excel", "json"], help="Export format override")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def _resolve_source_ids(workspace: InventoryWorkspace, selectors: List[str]) -> List[str]:
    ids = []
    for selector in selectors:
        matched = [s.id for s in workspace.sources if selector in (s.id, s.label)]
        if not matched:
            logger.warning(f"No loaded source matches '{selector}'")
        ids.extend(matched)
    return ids


def _print_summary(workspace: InventoryWorkspace) -> None:
    summary = workspace.summary()
    print(f"{summary.total} assets identified ({summary.synced} synced, {summary.unique} unique)")
    for item in summary.coverage:
        print(f"  {item.label:30s} {item.asset_count:6d} assets  {item.percentage:5.1f}%")


def _print_table(records: List[dict]) -> None:
    widths = {column: len(column) for column in TABLE_COLUMNS}
    for record in records:
        for column in TABLE_COLUMNS:
            widths[column] = max(widths[column], len(str(record[column])))

    print("  ".join(column.ljust(widths[column]) for column in TABLE_COLUMNS))
    for record in records:
        print("  ".join(str(record[column]).ljust(widths[column]) for column in TABLE_COLUMNS))


def _export(workspace: InventoryWorkspace, assets: List[NormalizedAsset], args: argparse.Namespace) -> None:
    if not assets:
        print("Nothing to export: no assets match the filters", file=sys.stderr)
        return

    output = args.output
    if output.is_dir():
        output = output / default_export_filename()

    path = AssetExporter().export(
        build_export_records(assets, workspace.sources),
        str(output),
        format=args.format,
    )
    print(f"Wrote {len(assets)} assets to {path}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entrypoint for command-line execution."""
    load_dotenv(find_dotenv(usecwd=True))
    args = _parse_args(argv)
    config = AssetLinkConfig.from_env(transitive_merge=True if args.transitive else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    workspace = InventoryWorkspace(config=config, debug=args.verbose)
    result = workspace.import_files(args.files, labels=args.label)
    for error in result.errors:
        print(f"Could not load {error.file_name}: {error.message}", file=sys.stderr)
    if not workspace.sources:
        print("No sources loaded", file=sys.stderr)
        return 1

    _print_summary(workspace)

    assets = workspace.query(
        search=args.search,
        source_ids=_resolve_source_ids(workspace, args.source),
        mode=args.mode,
    )
    page = paginate(assets, page=max(args.page, 1), page_size=config.page_size)
    print()
    _print_table(build_export_records(page.items, workspace.sources))
    if page.has_more:
        print(f"\nShowing page {page.page} ({len(page.items)} of {page.total} matching results). "
              f"Use --search or --page to see more.")

    if args.output:
        _export(workspace, assets, args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
