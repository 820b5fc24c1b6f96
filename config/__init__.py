from .settings import (
    BOX_NAME_START_COLUMN,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    FILLED_SUFFIX,
    HEADER_SCAN_ROW_LIMIT,
    LOG_LEVEL,
    MAX_FILE_SIZE_MB,
    MAX_NOTE_IMAGES,
    OUTPUT_EXTENSION,
    SUPPORTED_IMAGE_EXTENSIONS,
    SUPPORTED_TEMPLATE_EXTENSIONS,
)
from .log_setup import setup_logging

__all__ = [
    "BOX_NAME_START_COLUMN",
    "DEFAULT_MODEL",
    "DEFAULT_TEMPERATURE",
    "FILLED_SUFFIX",
    "HEADER_SCAN_ROW_LIMIT",
    "LOG_LEVEL",
    "MAX_FILE_SIZE_MB",
    "MAX_NOTE_IMAGES",
    "OUTPUT_EXTENSION",
    "SUPPORTED_IMAGE_EXTENSIONS",
    "SUPPORTED_TEMPLATE_EXTENSIONS",
    "setup_logging",
]
