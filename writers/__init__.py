from .grid_writer import FillReport, FillResult, fill_box_dimensions, fill_box_units, fill_template

__all__ = ["FillReport", "FillResult", "fill_box_dimensions", "fill_box_units", "fill_template"]
