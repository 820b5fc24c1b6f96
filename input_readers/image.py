"""
IMAGE READER
------------
Convert packing-note photos to base64 data URLs for Vision API usage.
"""

from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from config import MAX_FILE_SIZE_MB, SUPPORTED_IMAGE_EXTENSIONS


@dataclass(frozen=True)
class NoteImage:
    filename: str
    data: bytes


def image_mime_type(filename: str) -> str:
    """
    Guess the MIME type of a note photo from its filename.

    Raises:
        ValueError: If the extension is not a supported image type
    """
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_IMAGE_EXTENSIONS:
        raise ValueError(
            f"Unsupported image type '{suffix or filename}'. "
            f"Expected one of: {', '.join(SUPPORTED_IMAGE_EXTENSIONS)}"
        )
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or "image/jpeg"


def image_to_data_url(image: NoteImage) -> str:
    """
    Convert an in-memory image to data URL format for API calls.

    Args:
        image: Uploaded note photo

    Returns:
        Data URL string (data:image/jpeg;base64,...)
    """
    if not image.data:
        raise ValueError(f"Image file is empty: {image.filename}")
    if len(image.data) > MAX_FILE_SIZE_MB * 1024 * 1024:
        raise ValueError(f"Image file is larger than {MAX_FILE_SIZE_MB} MB: {image.filename}")

    mime_type = image_mime_type(image.filename)
    encoded = base64.b64encode(image.data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def read_note_image(image_path: Path) -> NoteImage:
    """
    Load a note photo from disk.

    Args:
        image_path: Path to image file

    Returns:
        NoteImage holding the file name and raw bytes
    """
    image_path = image_path.expanduser().resolve()
    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    return NoteImage(filename=image_path.name, data=image_path.read_bytes())
