"""
Source registry - the retail and cosmetics sites scraped for product details.

Order matters: sources are tried top to bottom and the walk stops at the
first one that yields any ingredient text.

Each source's locators are CSS selectors (comma-separated alternatives are
fine). Site markup changes without notice, so expect to revisit these.
"""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

# Attribute classes every source must provide a locator for
INGREDIENTS  = "ingredients"
PRODUCT_INFO = "product_info"
PACKAGING    = "packaging"

ATTRIBUTE_CLASSES = (INGREDIENTS, PRODUCT_INFO, PACKAGING)


@dataclass(frozen=True)
class LocatorRules:
    ingredients: str
    product_info: str
    packaging: str

    def get(self, attribute_class: str) -> str:
        return getattr(self, attribute_class)


@dataclass(frozen=True)
class SourceSpec:
    id: str
    url_template: str       # "{query}" is replaced with the encoded product name
    rules: LocatorRules

    def build_url(self, product_name: str) -> str:
        # Same escaping as JavaScript's encodeURIComponent
        return self.url_template.format(query=quote(product_name, safe="-_.!~*'()"))


SOURCES: tuple[SourceSpec, ...] = (
    SourceSpec(
        id="amazon.in",
        url_template="https://www.amazon.in/s?k={query}",
        rules=LocatorRules(
            ingredients=(
                "#feature-bullets .a-list-item, "
                "#productDetails_techSpec_section_1 .prodDetAttrValue, "
                "#productDetails_db_sections .content"
            ),
            product_info="#productDescription p, #feature-bullets .a-list-item",
            packaging="#important-information .a-section, #sustainability-section",
        ),
    ),
    SourceSpec(
        id="flipkart",
        url_template="https://www.flipkart.com/search?q={query}",
        rules=LocatorRules(
            ingredients="._2418kt, ._3nUwn8, .RmoJUa",
            product_info="._1mXcCf, ._2-riNZ",
            packaging="._2-N8zT, ._1UhVsV",
        ),
    ),
    SourceSpec(
        id="nykaa",
        url_template="https://www.nykaa.com/search/result/?q={query}",
        rules=LocatorRules(
            ingredients=".product-ingredients-content, .product-description p",
            product_info=".product-description, .product-overview",
            packaging=".product-overview p",
        ),
    ),
    SourceSpec(
        id="bigbasket",
        url_template="https://www.bigbasket.com/ps/?q={query}",
        rules=LocatorRules(
            ingredients=".pd-ingredient-content, .mt-20 p",
            product_info=".pd-description-content, .pd-about-content",
            packaging=".pd-about-content",
        ),
    ),
    SourceSpec(
        id="1mg",
        url_template="https://www.1mg.com/search/all?name={query}",
        rules=LocatorRules(
            ingredients=(
                ".DrugOverview__description___1Jwqq, "
                ".ProductDescription__description-content___A_qCZ"
            ),
            product_info=(
                ".DrugOverview__content___22ZBX, "
                ".ProductDescription__description-content___A_qCZ"
            ),
            packaging=".PackSizeLabel__pack-size___3jScl",
        ),
    ),
    SourceSpec(
        id="incidecoder",
        url_template="https://incidecoder.com/search?query={query}",
        rules=LocatorRules(
            ingredients=".ingredients-list, .ingred-list",
            product_info=".product-description",
            packaging=".product-details",
        ),
    ),
)
