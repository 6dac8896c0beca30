"""
Shared prompts, response parsing and base class for generative providers.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

# ── Prompts ───────────────────────────────────────────────────────────────────
# Each prompt fixes the JSON shape the caller parses. Change both together.

IDENTIFY_PROMPT = """Analyze this product image and provide ONLY the product name and brand in JSON format:
{
  "name": "full product name",
  "brand": "brand name"
}"""

ATTRIBUTES_PROMPT = """Analyze this product image and list its likely ingredients and packaging materials in JSON format:
{
  "ingredients": ["ingredient1", "ingredient2"],
  "packaging": {
    "materials": ["material1", "material2"],
    "recyclable": true/false
  }
}"""

FOOTPRINT_PROMPT = """Calculate the carbon footprint score (0-100) for a product with the following details:
Ingredients: {ingredients}
Packaging: {materials}
Recyclable: {recyclable}

Provide the response in JSON format with the following structure, no other text:
{{
  "score": number,
  "details": {{
    "manufacturing": number,
    "transportation": number,
    "packaging": number,
    "lifecycle": number
  }}
}}"""


# ── Errors ────────────────────────────────────────────────────────────────────

class GenerativeResponseError(ValueError):
    """Model output could not be used. .raw keeps the full text for diagnostics."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(message)
        self.raw = raw


class InvalidResponseFormat(GenerativeResponseError):
    """No {...} object anywhere in the response."""


class MalformedJson(GenerativeResponseError):
    """A {...} span was found but is not valid JSON of the expected shape."""


# ── Parsing ───────────────────────────────────────────────────────────────────

def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} span in text, or None.

    Braces inside JSON string literals are ignored so values like "a}b"
    don't end the span early. A "{" that never closes (stray prose) is
    skipped and the scan restarts at the next one.
    """
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find("{", start + 1)
    return None


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the "}" closing the "{" at start, or None if it never closes."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def parse_json_response(raw: str, provider_name: str) -> dict:
    """
    Parse the first JSON object out of a model response.

    Raises InvalidResponseFormat if there is no object, MalformedJson if it
    doesn't parse or isn't a JSON object.
    """
    span = find_json_object(raw or "")
    if span is None:
        logger.error("[%s] No JSON object in response: %s", provider_name, (raw or "")[:300])
        raise InvalidResponseFormat(f"[{provider_name}] Invalid response format", raw or "")
    try:
        data = json.loads(span)
    except json.JSONDecodeError as exc:
        logger.error("[%s] Non-JSON response: %s", provider_name, raw[:300])
        raise MalformedJson(f"[{provider_name}] JSON parse error: {exc}", raw) from exc
    if not isinstance(data, dict):
        raise MalformedJson(f"[{provider_name}] Expected a JSON object", raw)
    return data


def detect_mime(image_bytes: bytes) -> str:
    if image_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if image_bytes[:4] == b"GIF8":
        return "image/gif"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


# ── Abstract base ─────────────────────────────────────────────────────────────

class GenerativeProvider(ABC):
    """Base class for text/vision generation backends."""

    name: str           # e.g. "google"
    model_id: str       # e.g. "gemini-1.5-flash"

    @abstractmethod
    async def generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        """Send prompt (plus the image, if given) and return the raw response text."""
        ...

    @property
    def full_name(self) -> str:
        return f"{self.name}/{self.model_id}"
