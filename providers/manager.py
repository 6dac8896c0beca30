"""
Provider Manager - builds the configured generative provider once and caches it.

The key is read from config (GOOGLE_API_KEY / GEMINI_API_KEY); set
GEMINI_MODEL to switch models. Nothing is built until the first analysis,
so the process starts fine without a key and fails per-request instead.
"""
from __future__ import annotations

import logging
from typing import Optional

import config
from providers.base import GenerativeProvider

logger = logging.getLogger(__name__)

# Module-level cache - tests reset it to None
_provider: Optional[GenerativeProvider] = None


def _build_provider() -> GenerativeProvider:
    if not config.GOOGLE_API_KEY:
        raise RuntimeError(
            "No generative provider available.\n"
            "Set GOOGLE_API_KEY (or GEMINI_API_KEY) in the environment or .env file."
        )
    from providers.gemini_provider import GeminiProvider
    provider = GeminiProvider(config.GOOGLE_API_KEY, config.GEMINI_MODEL)
    logger.info("Loaded provider: %s", provider.full_name)
    return provider


def get_provider() -> GenerativeProvider:
    global _provider
    if _provider is None:
        _provider = _build_provider()
    return _provider
