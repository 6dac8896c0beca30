"""
Fallback resolver - asks the generative model for ingredients and packaging
when scraping came back with no ingredients.

There is no fallback after this one: InvalidResponseFormat / MalformedJson
propagate to the caller and fail the analysis.
"""
from __future__ import annotations

import logging
from typing import Optional

from models import AttributeAccumulator, PackagingInfo, ProductAttributes
from packaging_classifier import find_materials
from providers.base import ATTRIBUTES_PROMPT, GenerativeProvider, MalformedJson, parse_json_response

logger = logging.getLogger(__name__)


def needs_fallback(scraped: Optional[AttributeAccumulator]) -> bool:
    return scraped is None or not scraped.ingredients


async def resolve_attributes(provider: GenerativeProvider, image_bytes: bytes) -> ProductAttributes:
    """Infer attributes from the product photo. additional_info is left as None."""
    raw = await provider.generate(ATTRIBUTES_PROMPT, image_bytes)
    data = parse_json_response(raw, provider.full_name)
    return attributes_from_json(data, raw)


def attributes_from_json(data: dict, raw: str = "") -> ProductAttributes:
    """
    Validate the model's {"ingredients", "packaging"} object.

    Ingredients are trimmed and deduplicated; materials are reduced to the
    known material keywords.
    """
    ingredients_raw = data.get("ingredients", [])
    if not isinstance(ingredients_raw, list):
        raise MalformedJson("'ingredients' must be a list", raw)

    ingredients: list[str] = []
    for item in ingredients_raw:
        if not isinstance(item, str):
            continue
        text = item.strip()
        if text and text not in ingredients:
            ingredients.append(text)

    packaging_raw = data.get("packaging") or {}
    if not isinstance(packaging_raw, dict):
        raise MalformedJson("'packaging' must be an object", raw)

    materials: list[str] = []
    materials_raw = packaging_raw.get("materials") or []
    if not isinstance(materials_raw, list):
        raise MalformedJson("'packaging.materials' must be a list", raw)
    for item in materials_raw:
        if isinstance(item, str):
            materials.extend(find_materials(item))

    recyclable = packaging_raw.get("recyclable", False)
    if isinstance(recyclable, str):
        recyclable = recyclable.strip().lower() == "true"

    logger.info("Fallback inferred %d ingredients, materials=%s", len(ingredients), materials)
    return ProductAttributes(
        ingredients=ingredients,
        packaging=PackagingInfo(materials=materials, recyclable=bool(recyclable)),
    )
