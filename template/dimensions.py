"""
Box dimension block detection.

The dimension block is a set of label rows ("Box name", "Box weight (kg)",
"Box length (cm)", ...) somewhere in the sheet, with one column per box to the
right of the labels. The whole grid is scanned; if a label appears more than
once the last occurrence wins.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from config import BOX_NAME_START_COLUMN
from domain.grid import CellGrid
from domain.layout import BoxNameColumn, DimensionLayout

logger = logging.getLogger(__name__)

# Matches B3 as well as P1-B3 / P1 - B3.
BOX_LABEL_RE = re.compile(r"[Bb]\d+")

_ROW_LABELS = (
    ("weight", "box weight"),
    ("length", "box length"),
    ("width", "box width"),
    ("height", "box height"),
)


def _row_key(text: str) -> Optional[str]:
    if "box name" in text or "name of box" in text:
        return "box_name"
    for key, needle in _ROW_LABELS:
        if needle in text:
            return key
    return None


def find_box_names(
    grid: CellGrid,
    box_name_row: Optional[int],
    start_column: int = BOX_NAME_START_COLUMN,
) -> Tuple[BoxNameColumn, ...]:
    """
    Read the contiguous run of box labels on the box-name row.

    "To be assigned" cells are skipped. The run starts at the first cell that
    looks like a box label and ends at the first empty or non-matching cell
    after it.
    """
    if box_name_row is None:
        return ()

    names: List[BoxNameColumn] = []
    started = False
    for col in range(start_column, grid.bounds.max_col + 1):
        value = grid.text(box_name_row, col)
        if not value:
            if started:
                break
            continue

        if "to be assigned" in value.lower():
            continue

        if BOX_LABEL_RE.search(value):
            started = True
            names.append(BoxNameColumn(label=value, column=col))
        elif started:
            break

    return tuple(names)


def locate_dimensions(grid: CellGrid) -> DimensionLayout:
    """Find the dimension label rows and the box-name columns next to them."""
    rows: Dict[str, Optional[int]] = {
        "box_name": None,
        "weight": None,
        "length": None,
        "width": None,
        "height": None,
    }

    for row in range(0, grid.bounds.max_row + 1):
        for col in range(0, grid.bounds.max_col + 1):
            value = grid.text(row, col).lower()
            if not value:
                continue
            key = _row_key(value)
            if key is not None:
                rows[key] = row

    box_names = find_box_names(grid, rows["box_name"])

    if rows["box_name"] is None:
        logger.info("No box name row found; dimension filling will be skipped")
    else:
        logger.debug("Box name row %d with %d box column(s)", rows["box_name"], len(box_names))

    return DimensionLayout(box_names=box_names, **rows)
