"""
Turns Vosk recognition result blobs into WordEntry values.

Vosk hands back one JSON document per finalized utterance, for example::

    {"result": [{"conf": 1.0, "end": 0.3, "start": 0.0, "word": "hello"}, ...],
     "text": "hello ..."}

Partial results only carry a "partial" key, and an utterance with no speech
comes back as {"text": ""}. Neither is an error: they simply hold no words.
"""

import json
import logging
import math
from typing import Any, List

from jsonschema import Draft7Validator

from .models import WordEntry

logger = logging.getLogger(__name__)

WORD_SCHEMA = {
    "type": "object",
    "required": ["start", "end", "word"],
    "properties": {
        "start": {"type": "number", "minimum": 0},
        "end": {"type": "number", "minimum": 0},
        "word": {"type": "string", "minLength": 1},
    },
}

_word_validator = Draft7Validator(WORD_SCHEMA)


def _load(blob: str) -> Any:
    if not blob:
        return None
    try:
        return json.loads(blob)
    except (TypeError, ValueError) as e:
        logger.debug(f"Ignoring recognition result that is not valid JSON: {e}")
        return None


def decode_result(blob: str) -> List[WordEntry]:
    """
    Extracts the ordered word entries from one recognition result.

    Items that fail WORD_SCHEMA, whose word is blank, whose times are NaN or
    infinite, or whose end precedes their start are dropped; the remaining
    items keep their order.

    Args:
        blob: The JSON text returned by the recognizer.

    Returns:
        A list of WordEntry objects, empty when the blob carries no word detail.
    """
    document = _load(blob)
    if not isinstance(document, dict):
        return []

    items = document.get("result")
    if not isinstance(items, list):
        return []

    entries = []
    for item in items:
        if not _word_validator.is_valid(item):
            logger.debug(f"Skipping incomplete word item: {item!r}")
            continue
        word = item["word"].strip()
        try:
            start = float(item["start"])
            end = float(item["end"])
        except OverflowError:
            logger.debug(f"Skipping word item with out-of-range times: {item!r}")
            continue
        if not word or not math.isfinite(start) or not math.isfinite(end) or end < start:
            logger.debug(f"Skipping unusable word item: {item!r}")
            continue
        entries.append(WordEntry(start=start, end=end, text=word))
    return entries


def extract_text(blob: str) -> str:
    """Returns the running transcript text of a result, or an empty string."""
    document = _load(blob)
    if not isinstance(document, dict):
        return ""
    text = document.get("text")
    return text.strip() if isinstance(text, str) else ""
