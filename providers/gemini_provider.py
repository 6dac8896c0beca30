"""
Google Gemini provider - uses the google-genai SDK.

The image (when there is one) goes first as an inline part, followed by the
text prompt, matching how the prompts are worded.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

from google import genai
from google.genai import types as genai_types

from providers.base import GenerativeProvider, detect_mime

logger = logging.getLogger(__name__)


class GeminiProvider(GenerativeProvider):

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash"):
        self.name     = "google"
        self.model_id = model
        self._client  = genai.Client(api_key=api_key)

    async def generate(self, prompt: str, image_bytes: Optional[bytes] = None) -> str:
        contents: list = []
        if image_bytes is not None:
            contents.append(
                genai_types.Part.from_bytes(data=image_bytes, mime_type=detect_mime(image_bytes))
            )
        contents.append(prompt)

        gen_config = genai_types.GenerateContentConfig(
            temperature=0,
            max_output_tokens=1024,
        )

        t0 = time.monotonic()
        response = await self._client.aio.models.generate_content(
            model=self.model_id,
            contents=contents,
            config=gen_config,
        )
        latency_ms = int((time.monotonic() - t0) * 1000)

        usage = response.usage_metadata
        logger.info(
            "[%s] %s - %dms, %s in / %s out tokens",
            self.full_name,
            "vision" if image_bytes is not None else "text",
            latency_ms,
            getattr(usage, "prompt_token_count", "?"),
            getattr(usage, "candidates_token_count", "?"),
        )
        return (response.text or "").strip()
