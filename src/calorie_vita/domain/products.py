"""Packaged product lookup models."""

from dataclasses import dataclass

from calorie_vita.domain.nutrition import NutritionSample


@dataclass(frozen=True)
class ProductLookupResult:
    """Nutrition for a packaged product found by barcode."""

    barcode: str
    sample: NutritionSample
    brand: str | None
    category: str | None
    source: str = "Open Food Facts"
