"""
Shared pytest fixtures.

Nothing here touches the network: aiohttp sessions and the generative
provider are mocked per test.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# ── Make the project root importable without installing the package ────────────
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from providers.base import GenerativeProvider  # noqa: E402
from sources import LocatorRules, SourceSpec  # noqa: E402


def make_source(source_id: str, **rules: str) -> SourceSpec:
    defaults = dict(ingredients=".ingredients", product_info=".info", packaging=".packaging")
    defaults.update(rules)
    return SourceSpec(
        id=source_id,
        url_template=f"https://{source_id}.example/search?q={{query}}",
        rules=LocatorRules(**defaults),
    )


def make_provider(*responses: str, name: str = "fake", model: str = "model") -> GenerativeProvider:
    """Provider whose generate() returns the given texts in order."""
    p = MagicMock(spec=GenerativeProvider)
    p.name = name
    p.model_id = model
    p.full_name = f"{name}/{model}"
    p.generate = AsyncMock(side_effect=list(responses))
    return p


def page(*, ingredients: Optional[list[str]] = None, info: Optional[list[str]] = None,
         packaging: Optional[list[str]] = None) -> str:
    """Minimal product page with one element per fragment."""
    parts = ["<html><body>"]
    for cls, texts in (("ingredients", ingredients), ("info", info), ("packaging", packaging)):
        for text in texts or []:
            parts.append(f'<div class="{cls}">{text}</div>')
    parts.append("</body></html>")
    return "".join(parts)


@pytest.fixture
def two_sources():
    return [make_source("alpha"), make_source("beta")]
