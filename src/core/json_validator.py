#!/usr/bin/env python3
"""
JSON parsing for LLM output.

Models often wrap JSON in markdown fences. Parsing tries the raw text first,
then exactly one cleanup pass (strip fences and whitespace), then gives up.
"""

import json
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class JSONValidationError(Exception):
    """LLM output could not be parsed as the expected JSON object."""
    pass


def strip_code_fences(raw_output: str) -> str:
    """Remove a leading ```json / ``` fence, a trailing ``` fence and surrounding whitespace."""
    cleaned = raw_output.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[len("```"):]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-len("```")]
    return cleaned.strip()


def parse_json_object(raw_output: str) -> Dict[str, Any]:
    """
    Parse LLM output as a JSON object with a single cleanup retry.

    Args:
        raw_output: Raw text from the model

    Returns:
        Parsed object

    Raises:
        JSONValidationError: If neither attempt yields a JSON object
    """
    if raw_output is None or not raw_output.strip():
        raise JSONValidationError("Empty output")

    try:
        data = json.loads(raw_output.strip())
    except json.JSONDecodeError:
        cleaned = strip_code_fences(raw_output)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.debug(f"JSON parsing failed after cleanup: {e}; first 200 chars: {cleaned[:200]!r}")
            raise JSONValidationError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise JSONValidationError(f"Expected a JSON object, got {type(data).__name__}")

    return data
