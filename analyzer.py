"""
analyzer.py - end-to-end product analysis.

  photo ──► identify_product()          (generative: name + brand)
        ──► analyze_attributes(name)    (scrape the source registry)
        ──► resolve_attributes(photo)   (generative fallback, only when no ingredients)
        ──► calculate_carbon_footprint  (generative score from the attributes)
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Optional

import aiohttp

import config
from fallback import needs_fallback, resolve_attributes
from models import AttributeAccumulator, CarbonFootprint, ProductAnalysis, ProductAttributes, ProductInfo
from product_scraper import analyze_attributes
from providers.base import (
    FOOTPRINT_PROMPT, IDENTIFY_PROMPT, GenerativeProvider, MalformedJson, parse_json_response,
)
from providers.manager import get_provider

logger = logging.getLogger(__name__)


class ImageError(ValueError):
    """The submitted image reference could not be turned into bytes."""


# ── Image loading ─────────────────────────────────────────────────────────────

async def load_image(image_ref: str) -> bytes:
    """
    Accept a data: URL (what the web form posts) or an http(s) URL.
    Raises ImageError on anything else, on bad base64 and on oversized images.
    """
    image_ref = (image_ref or "").strip()
    if image_ref.startswith("data:"):
        header, sep, payload = image_ref.partition(",")
        if not sep or ";base64" not in header:
            raise ImageError("Only base64 data URLs are supported")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ImageError(f"Invalid base64 image data: {exc}") from exc
    elif image_ref.startswith(("http://", "https://")):
        data = await _download(image_ref)
    else:
        raise ImageError("imageUrl must be a data: URL or an http(s) URL")

    if not data:
        raise ImageError("Image is empty")
    if len(data) > config.MAX_IMAGE_BYTES:
        raise ImageError(f"Image larger than {config.MAX_IMAGE_BYTES} bytes")
    return data


async def _download(url: str) -> bytes:
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=30)) as resp:
                if resp.status != 200:
                    raise ImageError(f"Image download failed: HTTP {resp.status}")
                return await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise ImageError(f"Image download failed: {exc}") from exc


# ── Generative steps ──────────────────────────────────────────────────────────

async def identify_product(provider: GenerativeProvider, image_bytes: bytes) -> ProductInfo:
    raw = await provider.generate(IDENTIFY_PROMPT, image_bytes)
    data = parse_json_response(raw, provider.full_name)
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise MalformedJson("Product name missing from identification response", raw)
    brand = data.get("brand")
    return ProductInfo(
        name=name.strip(),
        brand=brand.strip() if isinstance(brand, str) and brand.strip() else None,
    )


async def calculate_carbon_footprint(
    attributes: ProductAttributes,
    provider: Optional[GenerativeProvider] = None,
) -> CarbonFootprint:
    provider = provider or get_provider()
    prompt = FOOTPRINT_PROMPT.format(
        ingredients=", ".join(attributes.ingredients),
        materials=", ".join(attributes.packaging.materials),
        recyclable=str(attributes.packaging.recyclable).lower(),
    )
    raw = await provider.generate(prompt)
    data = parse_json_response(raw, provider.full_name)

    details = data.get("details") or {}
    if not isinstance(details, dict):
        raise MalformedJson("'details' must be an object", raw)
    try:
        return CarbonFootprint(
            score=float(data["score"]),
            manufacturing=float(details.get("manufacturing", 0)),
            transportation=float(details.get("transportation", 0)),
            packaging=float(details.get("packaging", 0)),
            lifecycle=float(details.get("lifecycle", 0)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedJson(f"Bad carbon footprint response: {exc}", raw) from exc


# ── Similar products ──────────────────────────────────────────────────────────

async def find_similar_products(product_name: str, price: Optional[float]) -> list[dict]:
    """
    Alternatives to show next to the analysis.

    No comparison source is wired up, so this always returns an empty list;
    the web form still expects the key.
    """
    logger.debug("No similar-product source configured for '%s' (price=%s)", product_name, price)
    return []


# ── Orchestration ─────────────────────────────────────────────────────────────

async def _scrape_with_deadline(product_name: str) -> Optional[AttributeAccumulator]:
    deadline = config.SCRAPE_DEADLINE_SECONDS
    if deadline <= 0:
        return await analyze_attributes(product_name)
    try:
        return await asyncio.wait_for(analyze_attributes(product_name), timeout=deadline)
    except asyncio.TimeoutError:
        logger.warning("Scraping '%s' exceeded %.0fs - abandoning", product_name, deadline)
        return None


async def analyze_product(
    image_bytes: bytes,
    provider: Optional[GenerativeProvider] = None,
) -> ProductAnalysis:
    """
    Identify the product, then gather its attributes.

    Scraped data wins whenever it has ingredients; otherwise the photo is
    sent back to the model. Fallback parse errors are not caught here.
    """
    provider = provider or get_provider()

    product = await identify_product(provider, image_bytes)
    logger.info("Identified product: %s (brand: %s)", product.name, product.brand)

    scraped = await _scrape_with_deadline(product.name)
    if needs_fallback(scraped):
        logger.info("Web scraping failed or no ingredients found, using generative fallback")
        attributes = await resolve_attributes(provider, image_bytes)
        return ProductAnalysis(product=product, attributes=attributes, used_fallback=True)

    return ProductAnalysis(product=product, attributes=scraped.to_attributes())
