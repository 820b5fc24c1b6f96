from .matching import find_match, identifiers_match, normalize_identifier
from .merge import merge_box_dimensions, merge_products

__all__ = [
    "find_match",
    "identifiers_match",
    "normalize_identifier",
    "merge_box_dimensions",
    "merge_products",
]
