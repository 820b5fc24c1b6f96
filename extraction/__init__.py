from .to_manifest import (
    ExtractionError,
    call_vision_oracle,
    extract_manifest,
    parse_oracle_text,
    strip_code_fences,
)

__all__ = [
    "ExtractionError",
    "call_vision_oracle",
    "extract_manifest",
    "parse_oracle_text",
    "strip_code_fences",
]
