"""
Manifest schema definition.

These records are the normalized form of whatever the vision model returned.
All loosely-typed oracle JSON is converted into them in
`extraction.to_manifest`; nothing downstream looks at the raw JSON.

Box maps are keyed by canonical integer box numbers. Fields are optional
because handwriting is often partly illegible.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

Number = Union[int, float]


@dataclass
class ProductRecord:
    asin: Optional[str] = None
    fnsku: Optional[str] = None
    handwritten_note: Optional[str] = None
    quantity: Optional[Number] = None
    boxes: Dict[int, Number] = field(default_factory=dict)

    @property
    def identifier(self) -> str:
        """Trimmed ASIN, falling back to trimmed FNSKU ("" if neither is present)."""
        asin = (self.asin or "").strip()
        if asin:
            return asin
        return (self.fnsku or "").strip()


@dataclass
class BoxDimension:
    box_number: int
    weight: Optional[float] = None
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass
class Manifest:
    products: List[ProductRecord] = field(default_factory=list)
    box_dimensions: List[BoxDimension] = field(default_factory=list)
    raw_text: str = ""
    parsed: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.products and not self.box_dimensions
