from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class ColorCategory(str, Enum):
    DARK_WATER = "dark_water"
    MEDIUM_WATER = "medium_water"
    LIGHT_WATER = "light_water"
    BRIGHT_WATER_ANOMALY = "bright_water_anomaly"
    WHITE = "white"
    GRAY = "gray"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    BROWN = "brown"


@dataclass(frozen=True)
class ColorHistogram:
    """Pixel counts per color bucket.

    Primary buckets are mutually exclusive. ``green_tinted_water`` is a
    secondary flag on blue-dominant pixels and overlaps the water buckets.
    """

    total: int
    dark_water: int = 0
    medium_water: int = 0
    light_water: int = 0
    green_tinted_water: int = 0
    bright_water_anomaly: int = 0
    white: int = 0
    gray: int = 0
    red: int = 0
    yellow: int = 0
    green: int = 0
    brown: int = 0

    @property
    def primary_total(self) -> int:
        return sum(self.count(category) for category in ColorCategory)

    def count(self, category: ColorCategory) -> int:
        return getattr(self, category.value)

    def ratio(self, count: float) -> float:
        if self.total <= 0:
            return 0.0
        return count / self.total


def classify_pixel(r: int, g: int, b: int) -> tuple[ColorCategory | None, bool]:
    """Return the pixel's primary bucket (or None) and its green-tint flag.

    Rules are checked in priority order and the first match wins.
    """
    high = max(r, g, b)
    diff = high - min(r, g, b)

    if b > r and b > g:
        category: ColorCategory | None = None
        if b < 100 and diff < 50:
            category = ColorCategory.DARK_WATER
        elif b < 160 and diff < 70:
            category = ColorCategory.MEDIUM_WATER
        elif b < 200 and diff < 90:
            category = ColorCategory.LIGHT_WATER
        elif diff > 100:
            # saturated blue, typical of bottle plastic rather than water
            category = ColorCategory.BRIGHT_WATER_ANOMALY
        return category, g > r * 1.2

    if r > 200 and g > 200 and b > 200:
        return ColorCategory.WHITE, False
    if diff < 30:
        return ColorCategory.GRAY, False
    if r > high * 0.8:
        return ColorCategory.RED, False
    if g > high * 0.8 and r > b:
        return ColorCategory.YELLOW, False
    if g > high * 0.8:
        return ColorCategory.GREEN, False
    if r > 100 and g > 70 and b < 100:
        return ColorCategory.BROWN, False
    return None, False


def build_histogram(pixels: Iterable[tuple[int, int, int]]) -> ColorHistogram:
    counts: Counter[ColorCategory] = Counter()
    green_tinted = 0
    total = 0
    for r, g, b in pixels:
        total += 1
        category, tinted = classify_pixel(r, g, b)
        if category is not None:
            counts[category] += 1
        if tinted:
            green_tinted += 1
    return ColorHistogram(
        total=total,
        green_tinted_water=green_tinted,
        **{category.value: counts[category] for category in ColorCategory},
    )


__all__ = [
    "ColorCategory",
    "ColorHistogram",
    "build_histogram",
    "classify_pixel",
]
