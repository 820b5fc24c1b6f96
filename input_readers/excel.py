"""
TEMPLATE CODEC
--------------
Decodes a packing template (.xlsx/.xlsm/.xls/.csv) into a CellGrid and encodes
a filled grid back to .xlsx bytes.

Only the first worksheet is read and written. For .xlsx templates the original
workbook is reloaded at encode time and only the cells that changed are
written, so styles, formulas, column widths and every untouched cell pass
through as they were.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any, List

import pandas as pd
from openpyxl import Workbook, load_workbook

from config import FILLED_SUFFIX, MAX_FILE_SIZE_MB, OUTPUT_EXTENSION, SUPPORTED_TEMPLATE_EXTENSIONS
from domain.grid import Bounds, CellGrid
from fields.normalization import to_number

logger = logging.getLogger(__name__)


class DocumentDecodeError(ValueError):
    """Raised when template bytes cannot be read as a spreadsheet."""
    pass


@dataclass
class Document:
    filename: str
    file_format: str
    source: bytes
    sheet_name: str
    grid: CellGrid


def _file_format(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_TEMPLATE_EXTENSIONS:
        raise DocumentDecodeError(
            f"Unsupported template type '{suffix or filename}'. "
            f"Expected one of: {', '.join(SUPPORTED_TEMPLATE_EXTENSIONS)}"
        )
    return "xlsx" if suffix in (".xlsx", ".xlsm") else suffix.lstrip(".")


def _frame_to_rows(df: pd.DataFrame) -> List[List[Any]]:
    """DataFrame -> list of row lists, with pandas NA/NaN turned into None."""
    rows: List[List[Any]] = []
    for record in df.itertuples(index=False, name=None):
        rows.append([None if pd.isna(v) else v for v in record])
    return rows


def _decode_xlsx(data: bytes) -> tuple[str, CellGrid]:
    wb = load_workbook(BytesIO(data))
    try:
        ws = wb.worksheets[0]
        grid = CellGrid(
            Bounds(
                min_row=ws.min_row - 1,
                min_col=ws.min_column - 1,
                max_row=ws.max_row - 1,
                max_col=ws.max_column - 1,
            )
        )
        for row in ws.iter_rows():
            for cell in row:
                if cell.value is None or cell.value == "":
                    continue
                grid.set(cell.row - 1, cell.column - 1, cell.value)
        return ws.title, grid
    finally:
        wb.close()


def _decode_xls(data: bytes) -> tuple[str, CellGrid]:
    sheets = pd.read_excel(BytesIO(data), sheet_name=None, header=None, engine="xlrd", dtype=object)
    sheet_name = next(iter(sheets))
    return str(sheet_name), CellGrid.from_rows(_frame_to_rows(sheets[sheet_name]))


def _csv_cell(value: Any) -> Any:
    """Numeric text that reads back unchanged becomes a number; anything else stays text."""
    if not isinstance(value, str):
        return value
    number = to_number(value)
    if number is not None and str(number) == value.strip():
        return number
    return value


def _decode_csv(data: bytes) -> tuple[str, CellGrid]:
    text = data.decode("utf-8-sig")
    # Rows may be ragged (a title line above the header); read with the widest row's width.
    width = max((len(row) for row in csv.reader(StringIO(text))), default=1) or 1
    df = pd.read_csv(
        StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=False,
    )
    rows = [[_csv_cell(v) for v in row] for row in _frame_to_rows(df)]
    return "Sheet1", CellGrid.from_rows(rows)


def decode_document(data: bytes, filename: str) -> Document:
    """
    Read template bytes into a Document.

    Raises:
        DocumentDecodeError: If the type is unsupported, the file is empty or
            too large, or the bytes are not a readable spreadsheet.
    """
    file_format = _file_format(filename)

    if not data:
        raise DocumentDecodeError(f"Template file is empty: {filename}")
    size_mb = len(data) / (1024 * 1024)
    if size_mb > MAX_FILE_SIZE_MB:
        raise DocumentDecodeError(
            f"Template file is {size_mb:.1f} MB, larger than the {MAX_FILE_SIZE_MB} MB limit"
        )

    decoders = {"xlsx": _decode_xlsx, "xls": _decode_xls, "csv": _decode_csv}
    try:
        sheet_name, grid = decoders[file_format](data)
    except Exception as e:
        raise DocumentDecodeError(
            f"Cannot read template file (is it corrupted or wrong format?): {e}"
        ) from e

    logger.info("Decoded %s: sheet '%s', %d cell(s), range %s", filename, sheet_name, len(grid), grid.bounds.to_a1())
    return Document(filename=filename, file_format=file_format, source=data, sheet_name=sheet_name, grid=grid)


def read_document(path: Path) -> Document:
    """Read a template from disk."""
    path = path.expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Template file not found: {path}")
    return decode_document(path.read_bytes(), path.name)


def encode_document(document: Document, grid: CellGrid) -> bytes:
    """
    Encode a filled grid as .xlsx bytes.

    For .xlsx sources only cells that differ from the decoded grid are written
    into the original workbook. Other sources get a fresh single-sheet
    workbook holding every grid cell.
    """
    if document.file_format == "xlsx":
        wb = load_workbook(BytesIO(document.source))
        ws = wb.worksheets[0]
        for (row, col), value in document.grid.changed_cells(grid):
            ws.cell(row=row + 1, column=col + 1, value=value)
    else:
        wb = Workbook()
        ws = wb.active
        ws.title = document.sheet_name[:31] or "Sheet1"
        for (row, col), value in grid.items():
            ws.cell(row=row + 1, column=col + 1, value=value)

    out = BytesIO()
    wb.save(out)
    wb.close()
    return out.getvalue()


def filled_filename(filename: str) -> str:
    """'packing list.xlsx' -> 'packing list_filled.xlsx'."""
    base = Path(filename).stem or "template"
    return f"{base}{FILLED_SUFFIX}{OUTPUT_EXTENSION}"
