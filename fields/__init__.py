from .normalization import to_box_number, to_float, to_int, to_number, to_text

__all__ = ["to_box_number", "to_float", "to_int", "to_number", "to_text"]
