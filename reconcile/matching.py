"""
Spreadsheet row to extracted product matching.

Handwriting OCR is noisy: stray dashes, a dropped or extra trailing character.
A row matches a product when the identifiers are equal ignoring case, or when
one contains the other after removing everything except A-Z and 0-9.

The containment rule can produce false positives for very short identifiers.
That is accepted; ASINs and FNSKUs are 10 characters in practice.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from domain.manifest import ProductRecord

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")


def normalize_identifier(value: Any) -> str:
    """Trimmed, upper-cased text of an identifier cell ("" for None)."""
    if value is None:
        return ""
    return str(value).strip().upper()


def strip_identifier(value: str) -> str:
    """Keep only A-Z and 0-9 of an already normalized identifier."""
    return _NON_ALNUM_RE.sub("", value)


def identifiers_match(row_identifier: str, product_identifier: str) -> bool:
    a = normalize_identifier(row_identifier)
    b = normalize_identifier(product_identifier)
    if not a or not b:
        return False
    if a == b:
        return True

    a_stripped = strip_identifier(a)
    b_stripped = strip_identifier(b)
    if not a_stripped or not b_stripped:
        return False
    return a_stripped in b_stripped or b_stripped in a_stripped


def find_match(row_identifier: Any, products: Sequence[ProductRecord]) -> Optional[ProductRecord]:
    """Return the first product (in list order) whose identifier matches the row, or None."""
    needle = normalize_identifier(row_identifier)
    if not needle:
        return None

    for product in products:
        if identifiers_match(needle, product.identifier):
            return product
    return None
