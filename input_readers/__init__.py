from .excel import (
    Document,
    DocumentDecodeError,
    decode_document,
    encode_document,
    filled_filename,
    read_document,
)
from .image import NoteImage, image_to_data_url, read_note_image

__all__ = [
    "Document",
    "DocumentDecodeError",
    "decode_document",
    "encode_document",
    "filled_filename",
    "read_document",
    "NoteImage",
    "image_to_data_url",
    "read_note_image",
]
