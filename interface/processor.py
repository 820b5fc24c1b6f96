"""
End-to-end processing for one template + one batch of note photos.

decode template -> extract manifest -> fill grid -> encode .xlsx

Any failure is reported as a single error string for the whole run; there is
no per-row success/failure status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from config import DEFAULT_MODEL
from domain.manifest import Manifest
from extraction.to_manifest import extract_manifest
from input_readers.excel import decode_document, encode_document, filled_filename
from input_readers.image import NoteImage
from writers.grid_writer import FillReport, fill_template

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    success: bool
    output_bytes: Optional[bytes] = None
    output_filename: Optional[str] = None
    manifest: Optional[Manifest] = None
    report: Optional[FillReport] = None
    error: Optional[str] = None


def process_uploads(
    template_data: bytes,
    template_name: str,
    images: Sequence[NoteImage],
    model: str = DEFAULT_MODEL,
) -> ProcessResult:
    """
    Fill a packing template from photos of handwritten packing notes.

    Returns:
        ProcessResult with success=False and an error message if the template
        cannot be read, the model call fails, or its output cannot be parsed.
    """
    manifest: Optional[Manifest] = None
    try:
        document = decode_document(template_data, template_name)

        manifest = extract_manifest(images, model=model)
        if not manifest.parsed:
            return ProcessResult(
                success=False,
                manifest=manifest,
                error="Could not parse the vision model's answer. See the raw output below.",
            )

        result = fill_template(document.grid, manifest)
        output = encode_document(document, result.grid)
    except Exception as e:
        logger.exception("Processing failed for %s", template_name)
        return ProcessResult(success=False, manifest=manifest, error=str(e))

    return ProcessResult(
        success=True,
        output_bytes=output,
        output_filename=filled_filename(template_name),
        manifest=manifest,
        report=result.report,
    )
