"""
Layout descriptors.

Produced once per document by the scanners in `template`, read-only after.
All indices are 0-based grid coordinates; None means "not found".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BoxColumn:
    box_number: int
    column: int


@dataclass(frozen=True)
class BoxNameColumn:
    label: str
    column: int


@dataclass(frozen=True)
class HeaderLayout:
    header_row: Optional[int] = None
    sku: Optional[int] = None
    asin: Optional[int] = None
    fnsku: Optional[int] = None
    quantity: Optional[int] = None
    box_columns: Tuple[BoxColumn, ...] = ()

    @property
    def found(self) -> bool:
        return self.header_row is not None


@dataclass(frozen=True)
class DimensionLayout:
    box_name: Optional[int] = None
    weight: Optional[int] = None
    length: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    box_names: Tuple[BoxNameColumn, ...] = ()

    @property
    def found(self) -> bool:
        return self.box_name is not None
