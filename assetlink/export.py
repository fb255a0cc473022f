from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import csv
import json
import openpyxl

from .models import NormalizedAsset, Source
from .normalizer import format_mac
from .schema import (
    EXPORT_HEADERS,
    MATCH_TYPE_LABELS,
    STATUS_SYNCED,
    STATUS_UNIQUE,
    UNKNOWN_MANUFACTURER,
)


def match_type(asset: NormalizedAsset) -> str:
    """Label of the highest-priority network key the asset has ("" if none)."""
    for field_name, label in MATCH_TYPE_LABELS:
        if getattr(asset, field_name):
            return label
    return ""


def build_export_record(asset: NormalizedAsset, sources: Sequence[Source]) -> Dict[str, Any]:
    """Flatten one asset into the export layout.

    Args:
        asset: Resolved asset
        sources: Loaded sources, used to render labels in import order

    Returns:
        Dictionary keyed by EXPORT_HEADERS, in header order
    """
    labels = [source.label for source in sources if source.id in asset.sources]
    return {
        "Status": STATUS_SYNCED if len(asset.sources) > 1 else STATUS_UNIQUE,
        "Primary Identifier": format_mac(asset.mac) if asset.mac else asset.id,
        "Match Type": match_type(asset),
        "Hostname": asset.hostname or "",
        "IP": asset.ip or "",
        "Manufacturer": asset.manufacturer or UNKNOWN_MANUFACTURER,
        "Sources Count": len(asset.sources),
        "Sources List": ", ".join(labels),
    }


def build_export_records(
    assets: Sequence[NormalizedAsset],
    sources: Sequence[Source],
) -> List[Dict[str, Any]]:
    return [build_export_record(asset, sources) for asset in assets]


def default_export_filename(today: Optional[date] = None) -> str:
    """e.g. AssetLink_Export_2024-05-01.csv"""
    today = today or date.today()
    return f"AssetLink_Export_{today.isoformat()}.csv"


class AssetExporter:
    """Writes flattened asset records to CSV, Excel or JSON."""

    def export(self, data: List[Dict[str, Any]], output_path: str, format: Optional[str] = None) -> str:
        """Export records to a file.

        Args:
            data: Records from build_export_records()
            output_path: Path where the file should be saved
            format: 'csv', 'excel', 'json', or None to detect from the extension

        Returns:
            Path to the exported file

        Raises:
            ValueError: If format is not supported or data is empty
        """
        if not data:
            raise ValueError("Cannot export empty data")

        output_path = Path(output_path)

        if format is None:
            suffix = output_path.suffix.lower()
            if suffix in ['.csv', '.tsv']:
                format = 'csv'
            elif suffix == '.xlsx':
                format = 'excel'
            elif suffix == '.xlsm':
                # openpyxl writes plain workbooks, never macro-enabled ones
                format = 'excel'
                output_path = output_path.with_suffix('.xlsx')
            elif suffix == '.json':
                format = 'json'
            else:
                format = 'csv'
                output_path = output_path.with_suffix('.csv')

        format = format.lower()

        # Export layout first, then any extra keys in first-seen order
        headers = [header for header in EXPORT_HEADERS if header in data[0]]
        for row in data:
            for key in row:
                if key not in headers:
                    headers.append(key)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        if format == 'csv':
            self._export_csv(data, output_path, headers)
        elif format == 'excel':
            self._export_excel(data, output_path, headers)
        elif format == 'json':
            self._export_json(data, output_path)
        else:
            raise ValueError(f"Unsupported export format: {format}. Supported formats: csv, excel, json")

        return str(output_path)

    def _export_csv(self, data: List[Dict[str, Any]], output_path: Path, headers: List[str]) -> None:
        delimiter = '\t' if output_path.suffix.lower() == '.tsv' else ','
        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=headers, extrasaction='ignore', delimiter=delimiter)
            writer.writeheader()
            for row in data:
                writer.writerow({header: row.get(header, '') for header in headers})

    def _export_excel(self, data: List[Dict[str, Any]], output_path: Path, headers: List[str]) -> None:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Assets"

        for col_idx, header in enumerate(headers, start=1):
            ws.cell(row=1, column=col_idx, value=header)

        for row_idx, row_data in enumerate(data, start=2):
            for col_idx, header in enumerate(headers, start=1):
                ws.cell(row=row_idx, column=col_idx, value=row_data.get(header, ''))

        wb.save(output_path)

    def _export_json(self, data: List[Dict[str, Any]], output_path: Path) -> None:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
