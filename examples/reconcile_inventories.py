#!/usr/bin/env python3
"""Example: merge several device inventories into one deduplicated asset list.

This script demonstrates the library API end to end:
1. Loads each inventory file (CSV, TSV or Excel) as a labeled source
2. Resolves rows from all sources into assets by MAC, hostname, IP or asset id
3. Prints how many assets were seen by more than one tool
4. Exports the assets reported by only one source, for follow-up
"""

from assetlink import InventoryWorkspace, build_export_records, AssetExporter


def report_coverage_gaps(input_files, output_file):
    """Export assets that only one inventory knows about.

    Args:
        input_files: Inventory files, in import order
        output_file: Path to the exported report (.csv, .xlsx or .json)
    """
    workspace = InventoryWorkspace()
    result = workspace.import_files(input_files)

    for error in result.errors:
        print(f"✗ {error.file_name}: {error.message}")

    summary = workspace.summary()
    print(f"✓ {summary.total} assets identified from {len(workspace.sources)} sources")
    print(f"  Seen by several sources: {summary.synced}")
    print(f"  Seen by one source only: {summary.unique}")

    gaps = workspace.query(mode="unique")
    if not gaps:
        print("✓ Every asset is reported by more than one source")
        return []

    path = AssetExporter().export(build_export_records(gaps, workspace.sources), output_file)
    print(f"✓ Coverage gaps saved to: {path}")
    return gaps


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("Usage: python reconcile_inventories.py <inventory> [<inventory> ...] <output_file>")
        print("\nExample:")
        print("  python reconcile_inventories.py cmdb.csv edr.xlsx dhcp.csv gaps.xlsx")
        sys.exit(1)

    report_coverage_gaps(sys.argv[1:-1], sys.argv[-1])
