"""
Packaging classifier - keyword heuristics over packaging text.

Plain substring matching, no negation handling: "not recyclable" still counts
as recyclable because it contains "recycl". Callers rely on that.
"""
from __future__ import annotations

import re

from models import PackagingInfo

MATERIALS = ("plastic", "cardboard", "glass", "metal", "paper")

RECYCLABLE_KEYWORD = "recycl"

_MATERIAL_RE = re.compile("|".join(MATERIALS))


def find_materials(text: str) -> list[str]:
    """Every material keyword in text, in order of appearance, repeats included."""
    return _MATERIAL_RE.findall(text.lower())


def classify(fragments: list[str]) -> PackagingInfo:
    info = PackagingInfo()
    for fragment in fragments:
        text = fragment.lower()
        if RECYCLABLE_KEYWORD in text:
            info.recyclable = True
        info.materials.extend(find_materials(text))
    return info
