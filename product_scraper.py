"""
product_scraper.py - public interface for scraped product attributes.

The analyzer imports only from here:
  from product_scraper import analyze_attributes

Sources are walked strictly in registry order, one at a time:

  1. Fetch the source page (failures are logged and the source skipped).
  2. Extract ingredient / product-info / packaging fragments.
  3. Merge into one accumulator (exact-text dedup for ingredients and info).
  4. Stop as soon as any ingredient text has been collected.

An empty accumulator is a normal result - it means "nothing scraped" and the
caller falls back to generative inference. None means the walk itself blew up.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import aiohttp

from extractor import extract
from fetcher import fetch_page
from models import AttributeAccumulator
from packaging_classifier import classify
from sources import SOURCES, SourceSpec

logger = logging.getLogger(__name__)

__all__ = ["analyze_attributes", "scrape_product_details"]


async def scrape_product_details(
    product_name: str,
    sources: Optional[Sequence[SourceSpec]] = None,
) -> Optional[AttributeAccumulator]:
    """
    Collect attributes for product_name from the registered sources.

    Returns:
        The merged accumulator (possibly empty), or None on an unexpected fault.
    """
    if sources is None:
        sources = SOURCES

    try:
        scraped = AttributeAccumulator()
        async with aiohttp.ClientSession() as session:
            for source in sources:
                url = source.build_url(product_name)
                page = await fetch_page(session, url)
                if not page.ok:
                    logger.warning(
                        "[%s] Fetch failed (%s): %s - trying next source",
                        source.id, page.error_kind, page.detail,
                    )
                    continue

                fragments = extract(page.markup or "", source.rules)
                new_ingredients = scraped.add_ingredients(fragments.ingredients)
                new_info        = scraped.add_additional_info(fragments.product_info)
                scraped.add_packaging(classify(fragments.packaging))

                logger.info(
                    "[%s] +%d ingredients, +%d info, %d packaging fragments",
                    source.id, new_ingredients, new_info, len(fragments.packaging),
                )

                if scraped.ingredients:
                    logger.info("[%s] Ingredients found - skipping remaining sources", source.id)
                    break
        return scraped
    except Exception as exc:
        logger.error("Scraping '%s' failed: %s", product_name, exc, exc_info=True)
        return None


async def analyze_attributes(product_name: str) -> Optional[AttributeAccumulator]:
    """Entry point for the analysis layer. Same contract as scrape_product_details."""
    return await scrape_product_details(product_name)
