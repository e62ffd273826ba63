"""Barcode product lookup backed by Open Food Facts."""

import asyncio
import logging
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from calorie_vita.adapters.openfoodfacts_client import ProductClient
from calorie_vita.domain.nutrition import NutritionSample
from calorie_vita.domain.preferences import KJ_PER_KCAL
from calorie_vita.domain.products import ProductLookupResult
from calorie_vita.services.cache import ProductCache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_BARCODE_PATTERN = re.compile(r"^\d{8,14}$")
_NON_NUMERIC = re.compile(r"[^\d.]")
_FOUND_STATUS = 1
_DEFAULT_WEIGHT_GRAMS = 100.0

_logger = logging.getLogger(__name__)


@dataclass
class ProductLookupService:
    """Service for barcode lookups with caching and a short retry."""

    client: ProductClient
    cache: ProductCache
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup(self, barcode: str) -> ProductLookupResult | None:
        """Return nutrition for a barcode, or None when the product is unknown."""
        barcode = barcode.strip()
        if not _BARCODE_PATTERN.match(barcode):
            raise ValueError(f"Invalid barcode: {barcode!r}")

        cached = self.cache.get(barcode)
        if cached is not None:
            return cached

        payload = await self._call_with_retry(
            lambda: self.client.get_product(barcode), action=f"product:{barcode}"
        )
        product = payload.get("product")
        if payload.get("status") != _FOUND_STATUS or not isinstance(product, dict):
            _logger.info("Product not found: barcode=%s", barcode)
            return None

        result = parse_product(barcode, product)
        self.cache.put(barcode, result)
        return result

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Product lookup %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def parse_product(barcode: str, product: dict[str, object]) -> ProductLookupResult:
    """Convert an Open Food Facts product into a nutrition sample.

    Per-100 g values are scaled to the serving weight. When no per-100 g
    macros are present the per-serving values are used unscaled.
    """
    name = (
        _text(product.get("product_name"))
        or _text(product.get("product_name_en"))
        or "Unknown Product"
    )
    brand = _text(product.get("brands")) or _text(product.get("brand_owner"))
    category = _text(product.get("categories")) or _text(product.get("categories_en"))
    weight = _serving_weight(product)
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}

    calories = _energy_kcal_100g(nutriments)
    protein = _number(nutriments.get("proteins_100g"))
    carbs = _number(nutriments.get("carbohydrates_100g"))
    fat = _number(nutriments.get("fat_100g"))
    fiber = _number(nutriments.get("fiber_100g"))
    sugar = _number(nutriments.get("sugars_100g"))

    if calories == 0 and protein == 0 and carbs == 0 and fat == 0:
        sample = NutritionSample(
            food_name=name,
            weight_grams=weight,
            calories=_number(
                nutriments.get("energy-kcal_serving", nutriments.get("energy_serving"))
            ),
            protein=_number(nutriments.get("proteins_serving")),
            carbs=_number(nutriments.get("carbohydrates_serving")),
            fat=_number(nutriments.get("fat_serving")),
            fiber=_number(nutriments.get("fiber_serving")),
            sugar=_number(nutriments.get("sugars_serving")),
        )
    else:
        per_100g = NutritionSample(
            food_name=name,
            weight_grams=_DEFAULT_WEIGHT_GRAMS,
            calories=calories,
            protein=protein,
            carbs=carbs,
            fat=fat,
            fiber=fiber,
            sugar=sugar,
        )
        sample = per_100g.scaled(weight / _DEFAULT_WEIGHT_GRAMS)
    return ProductLookupResult(
        barcode=barcode, sample=sample, brand=brand, category=category
    )


def _energy_kcal_100g(nutriments: dict[str, object]) -> float:
    if nutriments.get("energy-kcal_100g") is not None:
        return _number(nutriments["energy-kcal_100g"])
    for key in ("energy_100g", "energy-kj_100g"):
        if nutriments.get(key) is not None:
            return _number(nutriments[key]) / KJ_PER_KCAL
    return 0.0


def _serving_weight(product: dict[str, object]) -> float:
    for key in ("serving_size", "quantity", "net_weight"):
        raw = _text(product.get(key))
        if raw is None:
            continue
        digits = _NON_NUMERIC.sub("", raw)
        try:
            weight = float(digits)
        except ValueError:
            return _DEFAULT_WEIGHT_GRAMS
        return weight if weight > 0 else _DEFAULT_WEIGHT_GRAMS
    return _DEFAULT_WEIGHT_GRAMS


def _number(value: object) -> float:
    """Read a nutrient value; missing, malformed or negative values count as 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
