import csv
import logging
import chardet
from pathlib import Path
from typing import List, Tuple

from ..models import Row

logger = logging.getLogger(__name__)

FALLBACK_ENCODINGS = ['latin-1', 'cp1252']


class CsvAdapter:
    """CSV adapter for reading inventory exports reliably.

    Handles:
    - Multiple encodings (UTF-8, UTF-8-BOM, Windows-1252, ISO-8859-1, etc.)
    - Different delimiters (comma, semicolon, tab)
    - Header names padded with whitespace
    """

    def can_handle(self, file_path: str) -> bool:
        """Check if this adapter can handle the given file."""
        return Path(file_path).suffix.lower() in [".csv", ".tsv"]

    def _detect_encoding(self, file_path: str) -> str:
        """Detect file encoding using chardet with fallback to UTF-8."""
        with open(file_path, 'rb') as f:
            raw_data = f.read(10000)  # first 10KB is enough for detection

        if raw_data.startswith(b'\xef\xbb\xbf'):
            return 'utf-8-sig'

        encoding = chardet.detect(raw_data).get('encoding') or 'utf-8'

        # chardet reports plain ASCII for most exports; read those as UTF-8
        encoding_lower = encoding.lower()
        if 'utf-8' in encoding_lower or 'utf8' in encoding_lower or encoding_lower == 'ascii':
            return 'utf-8'

        return encoding

    def _detect_delimiter(self, file_path: str, encoding: str) -> str:
        """Detect CSV delimiter from the header line, refined by csv.Sniffer."""
        if Path(file_path).suffix.lower() == '.tsv':
            return '\t'

        with open(file_path, 'r', encoding=encoding, newline='') as f:
            sample = f.read(4096)

        first_line = sample.splitlines()[0] if sample else ''
        comma_count = first_line.count(',')
        semicolon_count = first_line.count(';')
        tab_count = first_line.count('\t')

        if tab_count > comma_count and tab_count > semicolon_count:
            delimiter = '\t'
        elif semicolon_count > comma_count:
            delimiter = ';'
        else:
            delimiter = ','

        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=',;\t').delimiter
        except csv.Error:
            # Sniffer gives up on single-column files; keep the count-based guess
            pass

        return delimiter

    def _read_with(self, file_path: str, encoding: str, delimiter: str) -> Tuple[List[str], List[Row]]:
        with open(file_path, 'r', encoding=encoding, newline='') as f:
            reader = csv.reader(f, delimiter=delimiter)
            raw_headers = next(reader, [])
            headers = [header.strip() for header in raw_headers]

            rows = []
            for record in reader:
                row: Row = {}
                for index, header in enumerate(headers):
                    # Unnamed columns cannot be matched to any field
                    if not header:
                        continue
                    row[header] = record[index] if index < len(record) else None
                rows.append(row)

        return [header for header in headers if header], rows

    def read(self, file_path: str) -> Tuple[List[str], List[Row]]:
        """Read a CSV/TSV file.

        Args:
            file_path: Path to the CSV/TSV file

        Returns:
            Tuple of (trimmed header names, rows). Each row maps header to raw
            string value; cells missing from short rows are None.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file cannot be decoded or parsed
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if path.stat().st_size == 0:
            return [], []

        encoding = self._detect_encoding(file_path)

        try:
            delimiter = self._detect_delimiter(file_path, encoding)
            return self._read_with(file_path, encoding, delimiter)
        except UnicodeDecodeError as e:
            logger.debug(f"Decoding {path.name} as {encoding} failed, trying fallbacks")
            for fallback_encoding in FALLBACK_ENCODINGS:
                try:
                    delimiter = self._detect_delimiter(file_path, fallback_encoding)
                    return self._read_with(file_path, fallback_encoding, delimiter)
                except UnicodeDecodeError:
                    continue
            raise ValueError(f"Could not decode file {file_path}: {e}")
        except csv.Error as e:
            raise ValueError(f"Error parsing CSV file {file_path}: {e}")
