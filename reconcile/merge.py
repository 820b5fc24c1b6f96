"""
Duplicate merging for extracted manifests.

The vision model sees several photos and often reports the same product on
more than one of them (one line per page, or the same line twice). Products
are merged by identifier, box dimensions by box number.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from domain.manifest import BoxDimension, Number, ProductRecord

logger = logging.getLogger(__name__)


def _add(a: Optional[Number], b: Optional[Number]) -> Optional[Number]:
    if a is None:
        return b
    if b is None:
        return a
    return a + b


def _join_notes(a: Optional[str], b: Optional[str]) -> Optional[str]:
    if not b or b == a:
        return a
    if not a:
        return b
    if b in a.split("; "):
        return a
    return f"{a}; {b}"


def merge_products(records: Iterable[ProductRecord]) -> List[ProductRecord]:
    """
    Merge product records sharing an identifier (ASIN, else FNSKU).

    - Records with neither ASIN nor FNSKU are dropped.
    - Box unit maps are summed per box number.
    - Total quantities are summed; missing quantities contribute nothing.
    - Output order follows the first occurrence of each identifier.

    Input records are not modified.
    """
    merged: "OrderedDict[str, ProductRecord]" = OrderedDict()
    dropped = 0

    for record in records:
        key = record.identifier
        if not key:
            dropped += 1
            continue

        existing = merged.get(key)
        if existing is None:
            merged[key] = ProductRecord(
                asin=record.asin,
                fnsku=record.fnsku,
                handwritten_note=record.handwritten_note,
                quantity=record.quantity,
                boxes=dict(record.boxes),
            )
            continue

        boxes: Dict[int, Number] = dict(existing.boxes)
        for box_number, units in record.boxes.items():
            boxes[box_number] = _add(boxes.get(box_number), units)

        existing.boxes = boxes
        existing.quantity = _add(existing.quantity, record.quantity)
        existing.asin = existing.asin or record.asin
        existing.fnsku = existing.fnsku or record.fnsku
        existing.handwritten_note = _join_notes(existing.handwritten_note, record.handwritten_note)

    if dropped:
        logger.warning("Dropped %d product record(s) without ASIN or FNSKU", dropped)

    return list(merged.values())


def merge_box_dimensions(records: Iterable[BoxDimension]) -> List[BoxDimension]:
    """
    Deduplicate box dimensions by box number.

    A later record replaces an earlier one entirely (no field-level merge).
    Result is sorted ascending by box number.
    """
    by_box: Dict[int, BoxDimension] = {}
    for record in records:
        by_box[record.box_number] = record
    return [by_box[n] for n in sorted(by_box)]
