import zipfile
import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from pathlib import Path

class ExcelAdapter:
    def can_handle(self, file_path):
        return Path(file_path).suffix.lower() in [".xlsx", ".xlsm"]

    def read(self, file_path):
        if not Path(file_path).exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            wb = openpyxl.load_workbook(file_path, data_only=True, read_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            raise ValueError(f"Error reading Excel file {file_path}: {e}")

        # read_only workbooks parse sheet XML lazily, so a damaged sheet only
        # fails here. ElementTree and lxml parse errors both subclass SyntaxError.
        try:
            ws = wb.active
            records = ws.iter_rows(values_only=True)
            header_cells = next(records, ())
            headers = [str(cell).strip() if cell is not None else "" for cell in header_cells]

            rows = []
            for record in records:
                row = {}
                for index, header in enumerate(headers):
                    if not header:
                        continue
                    row[header] = record[index] if index < len(record) else None
                rows.append(row)
        except (SyntaxError, zipfile.BadZipFile, KeyError) as e:
            raise ValueError(f"Error reading Excel file {file_path}: {e}")
        finally:
            wb.close()

        return [header for header in headers if header], rows
