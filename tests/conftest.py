from __future__ import annotations

from io import BytesIO

import pytest
from openpyxl import Workbook

from domain.grid import CellGrid
from domain.manifest import BoxDimension, Manifest, ProductRecord


def make_grid(cells: dict) -> CellGrid:
    """Build a grid from {(row, col): value}."""
    grid = CellGrid()
    for (row, col), value in cells.items():
        grid.set(row, col, value)
    return grid


@pytest.fixture
def packing_template_grid() -> CellGrid:
    """
    Small template in the usual shape:

    row 2: SKU | ASIN | FNSKU | Quantity | Box 1 units | Box 2 units
    rows 3-5: products
    rows 8-12: dimension block, labels in col 9, box names from col 10
    """
    cells = {
        (0, 0): "Shipment plan",
        (2, 0): "SKU",
        (2, 1): "ASIN",
        (2, 2): "FNSKU",
        (2, 3): "Quantity",
        (2, 4): "Box 1 units",
        (2, 5): "Box 2 units",
        (3, 0): "SKU-RED",
        (3, 1): "B07ECS26RL",
        (3, 2): "X001ABCDEF",
        (3, 3): 18,
        (4, 0): "SKU-BLUE",
        (4, 1): "B07EDE27SA",
        (4, 3): 10,
        (5, 0): "SKU-GREEN",
        (5, 1): "B09NOMATCH",
        (5, 3): 4,
        (8, 9): "Name of box",
        (8, 10): "P1 - B1",
        (8, 11): "P1 - B2",
        (9, 9): "Box weight (lb):",
        (10, 9): "Box length (in):",
        (11, 9): "Box width (in):",
        (12, 9): "Box height (in):",
    }
    return make_grid(cells)


@pytest.fixture
def manifest() -> Manifest:
    return Manifest(
        products=[
            ProductRecord(asin="B07ECS26RL", quantity=18, boxes={1: 9, 2: 9}),
            ProductRecord(asin="B07EDE27SA", quantity=10, boxes={2: 10}),
        ],
        box_dimensions=[
            BoxDimension(box_number=2, weight=20.5, length=20, width=18, height=16),
            BoxDimension(box_number=1, weight=10, length=12, width=10, height=8),
        ],
    )


def workbook_bytes(cells: dict, title: str = "Pack list") -> bytes:
    """Serialize {(row, col): value} (0-based) into an in-memory .xlsx."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for (row, col), value in cells.items():
        ws.cell(row=row + 1, column=col + 1, value=value)
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()
