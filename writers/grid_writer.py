"""
Write reconciled manifest values into a template grid.

Two independent fills:
- Box units: per product row below the header, the units per box go into the
  matching "Box N units" columns.
- Box dimensions: weight/length/width/height go into the dimension rows, one
  column per box.

Only the target cells are written. `fill_template` works on a copy of the
input grid, so running it again on the same decoded grid gives the same
result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from domain.grid import NUMERIC, CellGrid
from domain.layout import DimensionLayout, HeaderLayout
from domain.manifest import BoxDimension, Manifest, ProductRecord
from fields.normalization import to_float
from reconcile.matching import find_match
from reconcile.merge import merge_box_dimensions, merge_products
from template.dimensions import locate_dimensions
from template.headers import locate_headers

logger = logging.getLogger(__name__)

_DIMENSION_FIELDS = ("weight", "length", "width", "height")


@dataclass
class FillReport:
    header_row: Optional[int] = None
    box_name_row: Optional[int] = None
    matched_rows: int = 0
    unmatched_rows: int = 0
    unit_cells_written: int = 0
    dimension_cells_written: int = 0
    unused_box_dimensions: int = 0

    @property
    def cells_written(self) -> int:
        return self.unit_cells_written + self.dimension_cells_written


@dataclass
class FillResult:
    grid: CellGrid
    headers: HeaderLayout
    dimensions: DimensionLayout
    report: FillReport = field(default_factory=FillReport)


def fill_box_units(
    grid: CellGrid,
    headers: HeaderLayout,
    products: Sequence[ProductRecord],
    report: Optional[FillReport] = None,
) -> int:
    """
    Write units per box for every data row whose ASIN matches a product.

    Products should already be merged. Returns the number of cells written.
    """
    report = report if report is not None else FillReport()
    if headers.header_row is None or headers.asin is None:
        return 0
    if not headers.box_columns or not products:
        return 0

    written = 0
    # Bounds can grow while writing; data rows are the ones present before.
    last_row = grid.bounds.max_row
    for row in range(headers.header_row + 1, last_row + 1):
        asin = grid.get(row, headers.asin)
        if asin is None or not str(asin).strip():
            continue

        product = find_match(asin, products)
        if product is None:
            report.unmatched_rows += 1
            logger.debug("Row %d: no extracted product for %r", row, asin)
            continue
        report.matched_rows += 1

        if not product.boxes:
            continue

        for box in headers.box_columns:
            units = product.boxes.get(box.box_number)
            if units is None:
                continue
            grid.set(row, box.column, units, kind=NUMERIC)
            written += 1

    report.unit_cells_written += written
    return written


def fill_box_dimensions(
    grid: CellGrid,
    dimensions: DimensionLayout,
    box_dimensions: Sequence[BoxDimension],
    report: Optional[FillReport] = None,
) -> int:
    """
    Write box weight/length/width/height into the dimension rows.

    Records are paired with box-name columns by position after sorting by box
    number: the first record goes to the first box column, and so on. Records
    beyond the last box column are ignored. Returns the number of cells written.
    """
    report = report if report is not None else FillReport()
    if dimensions.box_name is None or not box_dimensions:
        return 0

    records = merge_box_dimensions(box_dimensions)
    columns = dimensions.box_names

    written = 0
    for record, box_column in zip(records, columns):
        for name in _DIMENSION_FIELDS:
            row = getattr(dimensions, name)
            raw = getattr(record, name)
            if row is None or not raw:
                continue
            value = to_float(raw)
            if value is None:
                continue
            grid.set(row, box_column.column, value, kind=NUMERIC)
            written += 1

    if len(records) > len(columns):
        report.unused_box_dimensions += len(records) - len(columns)
        logger.warning(
            "%d box dimension record(s) but only %d box column(s); extra records ignored",
            len(records), len(columns),
        )

    report.dimension_cells_written += written
    return written


def fill_template(grid: CellGrid, manifest: Manifest) -> FillResult:
    """Locate the template layout and fill a copy of `grid` from `manifest`."""
    headers = locate_headers(grid)
    dimensions = locate_dimensions(grid)

    filled = grid.copy()
    report = FillReport(header_row=headers.header_row, box_name_row=dimensions.box_name)

    products = merge_products(manifest.products)
    fill_box_units(filled, headers, products, report)
    fill_box_dimensions(filled, dimensions, manifest.box_dimensions, report)

    logger.info(
        "Filled template: %d matched row(s), %d unmatched, %d unit cell(s), %d dimension cell(s)",
        report.matched_rows,
        report.unmatched_rows,
        report.unit_cells_written,
        report.dimension_cells_written,
    )
    return FillResult(grid=filled, headers=headers, dimensions=dimensions, report=report)
