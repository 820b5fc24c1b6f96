"""
Vision-model extraction into the Manifest format.

Packing-note photos go to the vision model in a single request; the text it
returns is decoded into ProductRecord / BoxDimension lists.

Core responsibilities:
- Build the multi-image request and call the OpenAI client.
- Parse model output into JSON (handles markdown code fences and trailing commas).
- Normalize the loosely-typed JSON at this boundary: case-insensitive keys,
  canonical integer box numbers, numeric coercion. Nothing downstream sees raw
  oracle JSON.

Malformed output is not an error here: `parse_oracle_text` returns an empty
Manifest with parsed=False and the raw text, and the caller decides.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from openai import BadRequestError, OpenAIError

from config import DEFAULT_MODEL, DEFAULT_TEMPERATURE, MAX_NOTE_IMAGES
from domain.manifest import BoxDimension, Manifest, Number, ProductRecord
from fields.normalization import to_box_number, to_float, to_number, to_text
from input_readers.image import NoteImage, image_to_data_url

from .llm_client import get_client
from .prompts import PACKING_NOTE_SYSTEM_PROMPT, build_packing_note_prompt

logger = logging.getLogger(__name__)


class ExtractionError(RuntimeError):
    """Raised when the vision model cannot be called or returns nothing."""
    pass


def strip_code_fences(text: str) -> str:
    """Remove surrounding ```json ... ``` markers, if any."""
    text = (text or "").strip()
    if "```" not in text:
        return text

    match = re.search(r"```(?:json)?\s*(\{.*\})\s*```", text, flags=re.DOTALL)
    if match:
        return match.group(1)
    return re.sub(r"```(?:json)?", "", text).strip()


def _load_json(text: str) -> Optional[Any]:
    """Parse JSON with minimal repair; None when it cannot be parsed."""
    candidates = [text]
    match = re.search(r"\{.*\}", text, flags=re.DOTALL)
    if match and match.group(0) != text:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            pass
        try:
            return json.loads(re.sub(r",\s*([}\]])", r"\1", candidate))
        except json.JSONDecodeError:
            pass
    return None


def _key(name: str) -> str:
    return re.sub(r"[\s_\-]", "", str(name)).lower()


def _field(data: Dict[str, Any], *names: str) -> Any:
    """Look up the first of `names` in `data`, ignoring case, spaces, dashes and underscores."""
    lowered = {_key(k): v for k, v in data.items()}
    for name in names:
        if _key(name) in lowered:
            return lowered[_key(name)]
    return None


def _normalize_boxes(raw: Any, identifier: str) -> Dict[int, Number]:
    """Boxes object -> {box_number: units}. Unparseable keys and null units are dropped."""
    if not raw:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring non-object Boxes for %s: %r", identifier or "?", raw)
        return {}

    boxes: Dict[int, Number] = {}
    for key, value in raw.items():
        box_number = to_box_number(key)
        if box_number is None:
            logger.warning("Ignoring box key %r for %s", key, identifier or "?")
            continue
        units = to_number(value)
        if units is None:
            continue
        if box_number in boxes:
            logger.debug("Duplicate box %d for %s; keeping first value", box_number, identifier)
            continue
        boxes[box_number] = units
    return boxes


def _to_product(item: Dict[str, Any]) -> ProductRecord:
    asin = to_text(_field(item, "ASIN"))
    fnsku = to_text(_field(item, "FNSKU"))
    return ProductRecord(
        asin=asin,
        fnsku=fnsku,
        handwritten_note=to_text(_field(item, "Handwritten Note", "Note")),
        quantity=to_number(_field(item, "QTY", "Quantity")),
        boxes=_normalize_boxes(_field(item, "Boxes"), asin or fnsku or ""),
    )


def _to_box_dimension(item: Dict[str, Any]) -> Optional[BoxDimension]:
    box_number = to_box_number(_field(item, "Box Number", "Box"))
    if box_number is None:
        logger.warning("Ignoring box dimension without a box number: %r", item)
        return None
    return BoxDimension(
        box_number=box_number,
        weight=to_float(_field(item, "Weight")),
        length=to_float(_field(item, "Length")),
        width=to_float(_field(item, "Width")),
        height=to_float(_field(item, "Height")),
    )


def _dict_items(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def parse_oracle_text(raw_text: str) -> Manifest:
    """
    Decode the vision model's text into a Manifest.

    Never raises for bad model output: unparseable text yields empty lists
    with parsed=False so callers can tell "nothing extracted" from
    "extraction failed".
    """
    raw_text = raw_text or ""
    data = _load_json(strip_code_fences(raw_text))

    if not isinstance(data, dict):
        logger.warning("Vision model output is not a JSON object; first 200 chars: %r", raw_text[:200])
        return Manifest(raw_text=raw_text, parsed=False)

    products = [_to_product(item) for item in _dict_items(_field(data, "ProductList", "Products"))]
    dimensions = [
        dim
        for dim in (_to_box_dimension(item) for item in _dict_items(_field(data, "Box Dimensions")))
        if dim is not None
    ]

    logger.info("Decoded %d product row(s) and %d box dimension(s)", len(products), len(dimensions))
    return Manifest(products=products, box_dimensions=dimensions, raw_text=raw_text, parsed=True)


def call_vision_oracle(
    images: Sequence[NoteImage],
    model: str = DEFAULT_MODEL,
) -> str:
    """Send all note photos in one request and return the model's raw text."""
    if not images:
        raise ExtractionError("At least one packing-note image is required")
    if len(images) > MAX_NOTE_IMAGES:
        raise ExtractionError(f"Too many images ({len(images)}); the limit is {MAX_NOTE_IMAGES}")

    content: List[Dict[str, Any]] = [{"type": "text", "text": build_packing_note_prompt(len(images))}]
    for image in images:
        content.append({"type": "image_url", "image_url": {"url": image_to_data_url(image)}})

    messages = [
        {"role": "system", "content": PACKING_NOTE_SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]

    client = get_client()
    logger.info("Sending %d image(s) to %s", len(images), model)
    try:
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=DEFAULT_TEMPERATURE,
            response_format={"type": "json_object"},
        )
    except BadRequestError as e:
        logger.warning("JSON response format rejected (%s); retrying without it", e)
        try:
            response = client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=DEFAULT_TEMPERATURE,
            )
        except OpenAIError as e2:
            raise ExtractionError(f"Vision model request failed: {e2}") from e2
    except OpenAIError as e:
        raise ExtractionError(f"Vision model request failed: {e}") from e

    raw_output = response.choices[0].message.content
    if not raw_output:
        raise ExtractionError("Vision model returned empty response")
    return raw_output


def extract_manifest(
    images: Sequence[NoteImage],
    model: str = DEFAULT_MODEL,
) -> Manifest:
    """Run the vision model over the note photos and decode its answer."""
    return parse_oracle_text(call_vision_oracle(images, model))
