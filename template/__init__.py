from .dimensions import find_box_names, locate_dimensions
from .headers import locate_headers

__all__ = ["find_box_names", "locate_dimensions", "locate_headers"]
