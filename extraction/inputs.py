import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from extraction.errors import InputError
from extraction.models import InputDescriptor

logger = logging.getLogger(__name__)


def _describe_validation(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        field = ".".join(str(p) for p in err["loc"]) or "descriptor"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


def parse_descriptor(raw: Any, index: int = 0) -> InputDescriptor:
    """Validate one JSON object into a descriptor; errors name its position."""
    if not isinstance(raw, dict):
        raise InputError(f"Descriptor #{index} must be a JSON object, got {type(raw).__name__}")
    try:
        return InputDescriptor.model_validate(raw)
    except ValidationError as e:
        raise InputError(f"Descriptor #{index}: {_describe_validation(e)}") from e


def parse_descriptors(raw_json: str) -> list[InputDescriptor]:
    try:
        records = json.loads(raw_json)
    except json.JSONDecodeError as e:
        raise InputError(f"Failed to parse the input file: {e}") from e
    if not isinstance(records, list):
        raise InputError("Failed to parse the input file: top level must be a JSON array")

    descriptors = [parse_descriptor(r, i) for i, r in enumerate(records)]

    dupes = [k for k, n in Counter(d.http_friendly_short_name for d in descriptors).items() if n > 1]
    if dupes:
        logger.warning(f"Duplicate HttpFriendlyShortName values in input: {', '.join(dupes)}")
    return descriptors


def load_descriptors(path: Path) -> list[InputDescriptor]:
    """Read and validate the descriptor list from a JSON file."""
    path = Path(path)
    if not path.is_file():
        raise InputError(f"File not found: {path}")
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputError(f"Error reading file: {e}") from e
    return parse_descriptors(raw)
