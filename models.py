"""
Shared data types for product analysis.

AttributeAccumulator is the per-request scratch state of the source walk;
ProductAttributes is the final attribute set, whichever path produced it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PackagingInfo:
    materials: list[str] = field(default_factory=list)
    recyclable: bool = False

    def to_dict(self) -> dict:
        return {"materials": list(self.materials), "recyclable": self.recyclable}


@dataclass
class AttributeAccumulator:
    """
    Additive merge target for the source walk.

    ingredients and additional_info behave as ordered sets (exact-text dedup);
    packaging.materials is a plain list and may hold repeats.
    """
    ingredients: list[str] = field(default_factory=list)
    additional_info: list[str] = field(default_factory=list)
    packaging: PackagingInfo = field(default_factory=PackagingInfo)

    def add_ingredients(self, fragments: list[str]) -> int:
        return _merge_unique(self.ingredients, fragments)

    def add_additional_info(self, fragments: list[str]) -> int:
        return _merge_unique(self.additional_info, fragments)

    def add_packaging(self, found: PackagingInfo) -> None:
        self.packaging.materials.extend(found.materials)
        # OR only - once recyclable, always recyclable
        self.packaging.recyclable = self.packaging.recyclable or found.recyclable

    def to_attributes(self) -> ProductAttributes:
        return ProductAttributes(
            ingredients=list(self.ingredients),
            packaging=PackagingInfo(
                materials=list(self.packaging.materials),
                recyclable=self.packaging.recyclable,
            ),
            additional_info=list(self.additional_info),
        )


def _merge_unique(target: list[str], fragments: list[str]) -> int:
    """Append fragments not already present. Returns how many were added."""
    added = 0
    for text in fragments:
        if text and text.strip() and text not in target:
            target.append(text)
            added += 1
    return added


@dataclass
class ProductAttributes:
    """Final attribute set. additional_info is None when produced by the fallback."""
    ingredients: list[str]
    packaging: PackagingInfo
    additional_info: Optional[list[str]] = None

    def to_dict(self) -> dict:
        data: dict = {
            "ingredients": list(self.ingredients),
            "packaging": self.packaging.to_dict(),
        }
        if self.additional_info is not None:
            data["additionalInfo"] = list(self.additional_info)
        return data


@dataclass
class ProductInfo:
    """Visual identification result."""
    name: str
    brand: Optional[str]


@dataclass
class CarbonFootprint:
    score: float                # 0–100
    manufacturing: float
    transportation: float
    packaging: float
    lifecycle: float

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "details": {
                "manufacturing":  self.manufacturing,
                "transportation": self.transportation,
                "packaging":      self.packaging,
                "lifecycle":      self.lifecycle,
            },
        }


@dataclass
class ProductAnalysis:
    product: ProductInfo
    attributes: ProductAttributes
    used_fallback: bool = False
    carbon_footprint: Optional[CarbonFootprint] = None
    price: Optional[float] = None          # echoed from the request
    similar_products: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {"name": self.product.name, "brand": self.product.brand, "price": self.price}
        data.update(self.attributes.to_dict())
        if self.carbon_footprint is not None:
            data["carbonFootprint"] = self.carbon_footprint.to_dict()
        data["similarProducts"] = list(self.similar_products)
        return data
