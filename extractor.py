"""
Attribute extractor - pulls text fragments out of a page using a source's locators.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bs4 import BeautifulSoup

from sources import INGREDIENTS, PACKAGING, PRODUCT_INFO, LocatorRules

logger = logging.getLogger(__name__)


@dataclass
class ExtractedFragments:
    ingredients: list[str] = field(default_factory=list)
    product_info: list[str] = field(default_factory=list)
    packaging: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.ingredients or self.product_info or self.packaging)


def select_text(soup: BeautifulSoup, selector: str) -> list[str]:
    """Trimmed, non-empty text of every node matching selector, in document order."""
    fragments: list[str] = []
    for element in soup.select(selector):
        text = element.get_text().strip()
        if text:
            fragments.append(text)
    return fragments


def extract(markup: str, rules: LocatorRules) -> ExtractedFragments:
    """
    Evaluate each attribute class's locator against markup.

    Never raises: unparsable markup or a bad locator just yields nothing for
    that class. No deduplication here - that is global across sources and
    belongs to the orchestrator.
    """
    result = ExtractedFragments()
    if not markup:
        return result

    try:
        soup = BeautifulSoup(markup, "lxml")
    except Exception as exc:
        logger.warning("Could not parse markup: %s", exc)
        return result

    for attribute_class, target in (
        (INGREDIENTS,  result.ingredients),
        (PRODUCT_INFO, result.product_info),
        (PACKAGING,    result.packaging),
    ):
        selector = rules.get(attribute_class)
        if not selector:
            continue
        try:
            target.extend(select_text(soup, selector))
        except Exception as exc:
            logger.warning("Locator %r for %s failed: %s", selector, attribute_class, exc)
    return result
