"""
Product header detection.

Finds the row holding both a "SKU" and an "ASIN" label near the top of the
sheet and records where the product columns live. Templates put the header
block in different places, so nothing here assumes fixed coordinates.

Box unit columns ("Box 1 units", "Box 2 quantity", ...) are collected from
every scanned row, not only the header row, and returned sorted by box number.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from config import HEADER_SCAN_ROW_LIMIT
from domain.grid import CellGrid
from domain.layout import BoxColumn, HeaderLayout

logger = logging.getLogger(__name__)

_BOX_NUMBER_RE = re.compile(r"box\s*(\d+)", re.IGNORECASE)

_EXACT_LABELS = ("sku", "asin", "fnsku", "quantity")


def box_number_from_label(label: str) -> Optional[int]:
    """Return N for labels like 'Box N units' / 'Box N quantity', else None."""
    text = label.lower().strip()
    if "box" not in text or not ("units" in text or "quantity" in text):
        return None
    match = _BOX_NUMBER_RE.search(text)
    return int(match.group(1)) if match else None


def locate_headers(grid: CellGrid, row_limit: int = HEADER_SCAN_ROW_LIMIT) -> HeaderLayout:
    """
    Scan the first `row_limit` rows for the product header row.

    Returns a HeaderLayout with header_row=None when no row has both an exact
    "sku" and an exact "asin" cell. That is not an error: callers skip product
    filling.
    """
    columns: Dict[str, Optional[int]] = {label: None for label in _EXACT_LABELS}
    box_columns: List[BoxColumn] = []
    header_row: Optional[int] = None

    last_row = min(grid.bounds.max_row, row_limit - 1)
    for row in range(0, last_row + 1):
        found_sku = False
        found_asin = False

        for col in range(0, grid.bounds.max_col + 1):
            value = grid.text(row, col).lower()
            if not value:
                continue

            if value in columns:
                columns[value] = col
                if value == "sku":
                    found_sku = True
                elif value == "asin":
                    found_asin = True
                continue

            box_number = box_number_from_label(value)
            if box_number is not None:
                box_columns.append(BoxColumn(box_number=box_number, column=col))

        if found_sku and found_asin:
            header_row = row
            break

    box_columns.sort(key=lambda b: b.box_number)

    if header_row is None:
        logger.info("No header row with both SKU and ASIN in the first %d rows", row_limit)
    else:
        logger.debug(
            "Header row %d: asin col=%s, %d box unit column(s)",
            header_row, columns["asin"], len(box_columns),
        )

    return HeaderLayout(
        header_row=header_row,
        sku=columns["sku"],
        asin=columns["asin"],
        fnsku=columns["fnsku"],
        quantity=columns["quantity"],
        box_columns=tuple(box_columns),
    )
