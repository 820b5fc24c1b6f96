"""
CellGrid: sparse 2-D grid of worksheet values.

Coordinates are 0-based (row, col). The grid carries an inclusive bounding
rectangle that every populated cell lies inside; scanners iterate over the
bounds, never over the cell dict, so the bounds are what tells downstream code
the grid grew.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from fields.normalization import to_number

CellValue = Union[str, int, float]
Coord = Tuple[int, int]

NUMERIC = "n"
STRING = "s"


@dataclass(frozen=True)
class Bounds:
    min_row: int = 0
    min_col: int = 0
    max_row: int = 0
    max_col: int = 0

    def contains(self, row: int, col: int) -> bool:
        return self.min_row <= row <= self.max_row and self.min_col <= col <= self.max_col

    def include(self, row: int, col: int) -> "Bounds":
        """Return the union of these bounds and a single coordinate."""
        if self.contains(row, col):
            return self
        return Bounds(
            min_row=min(self.min_row, row),
            min_col=min(self.min_col, col),
            max_row=max(self.max_row, row),
            max_col=max(self.max_col, col),
        )

    def to_a1(self) -> str:
        """Render as an A1 range like 'A1:Q40'."""
        from openpyxl.utils import get_column_letter

        return (
            f"{get_column_letter(self.min_col + 1)}{self.min_row + 1}:"
            f"{get_column_letter(self.max_col + 1)}{self.max_row + 1}"
        )


class CellGrid:
    """Sparse (row, col) -> value mapping with an authoritative bounding rectangle."""

    def __init__(self, bounds: Optional[Bounds] = None) -> None:
        self._cells: Dict[Coord, CellValue] = {}
        self.bounds: Bounds = bounds or Bounds()

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Any]]) -> "CellGrid":
        """Build a grid from a list of row lists. None and "" cells are left empty."""
        max_cols = max((len(r) for r in rows), default=1)
        grid = cls(Bounds(0, 0, max(len(rows) - 1, 0), max(max_cols - 1, 0)))
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                if value is None or value == "":
                    continue
                grid.set(r, c, value)
        return grid

    def get(self, row: int, col: int) -> Optional[CellValue]:
        return self._cells.get((row, col))

    def text(self, row: int, col: int) -> str:
        """Cell value stringified and trimmed ("" for empty cells)."""
        value = self._cells.get((row, col))
        if value is None:
            return ""
        return str(value).strip()

    def set(self, row: int, col: int, value: CellValue, kind: Optional[str] = None) -> None:
        """
        Create or overwrite a cell and grow the bounds to cover it.

        kind="n" stores the value as a number, kind="s" as a string; with no
        kind the value is stored as given.
        """
        if row < 0 or col < 0:
            raise ValueError(f"Negative cell coordinate: ({row}, {col})")

        if kind == NUMERIC:
            number = to_number(value)
            if number is None:
                raise ValueError(f"Not a numeric value for cell ({row}, {col}): {value!r}")
            value = number
        elif kind == STRING:
            value = str(value)
        elif kind is not None:
            raise ValueError(f"Unknown cell kind: {kind!r}")

        self._cells[(row, col)] = value
        self.bounds = self.bounds.include(row, col)

    def rows(self) -> range:
        return range(self.bounds.min_row, self.bounds.max_row + 1)

    def cols(self) -> range:
        return range(self.bounds.min_col, self.bounds.max_col + 1)

    def items(self) -> Iterator[Tuple[Coord, CellValue]]:
        return iter(sorted(self._cells.items()))

    def to_rows(self) -> List[List[Optional[CellValue]]]:
        """Dense list-of-lists from row 0/col 0 to the bounds' max corner."""
        return [
            [self._cells.get((r, c)) for c in range(self.bounds.max_col + 1)]
            for r in range(self.bounds.max_row + 1)
        ]

    def changed_cells(self, other: "CellGrid") -> List[Tuple[Coord, Optional[CellValue]]]:
        """Cells of `other` whose value differs from this grid, as ((row, col), new_value)."""
        coords = set(self._cells) | set(other._cells)
        return [
            (coord, other._cells.get(coord))
            for coord in sorted(coords)
            if self._cells.get(coord) != other._cells.get(coord)
        ]

    def copy(self) -> "CellGrid":
        clone = CellGrid(self.bounds)
        clone._cells = dict(self._cells)
        return clone

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellGrid):
            return NotImplemented
        return self.bounds == other.bounds and self._cells == other._cells

    def __repr__(self) -> str:
        return f"CellGrid(cells={len(self._cells)}, bounds={self.bounds.to_a1()})"
