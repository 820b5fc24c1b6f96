"""
Central configuration for template scanning, upload limits and the vision model.

This module defines:
- Template conventions the layout scanners rely on (header search depth,
  first column of the box-name block).
- Upload limits to keep oversized templates and photo batches out of memory.
- Default vision model settings.
- The suffix used for the filled output file.

All values are constants and should be imported where needed (no runtime logic
here). LOG_LEVEL is the only value read from the environment.
"""

from __future__ import annotations

import os

# Template conventions
HEADER_SCAN_ROW_LIMIT = 20
BOX_NAME_START_COLUMN = 10  # column K

# Upload limits
MAX_FILE_SIZE_MB = 50
MAX_NOTE_IMAGES = 10
SUPPORTED_TEMPLATE_EXTENSIONS = (".xlsx", ".xlsm", ".xls", ".csv")
SUPPORTED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")

# Output
FILLED_SUFFIX = "_filled"
OUTPUT_EXTENSION = ".xlsx"

# Vision model
DEFAULT_MODEL = "gpt-4o"
DEFAULT_TEMPERATURE = 0

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
