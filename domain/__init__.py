from .grid import Bounds, CellGrid
from .layout import BoxColumn, BoxNameColumn, DimensionLayout, HeaderLayout
from .manifest import BoxDimension, Manifest, ProductRecord

__all__ = [
    "Bounds",
    "CellGrid",
    "BoxColumn",
    "BoxNameColumn",
    "DimensionLayout",
    "HeaderLayout",
    "BoxDimension",
    "Manifest",
    "ProductRecord",
]
