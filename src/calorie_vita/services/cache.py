"""Expiring store of barcode lookup results."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from calorie_vita.domain.products import ProductLookupResult


class ProductCache(Protocol):
    """Lookup results keyed by barcode."""

    def get(self, barcode: str) -> ProductLookupResult | None:
        """Return the stored result unless it has expired."""

    def put(self, barcode: str, result: ProductLookupResult) -> None:
        """Store a lookup result."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryProductCache(ProductCache):
    """Process-local cache; a result lives for ``ttl`` after it is stored."""

    ttl: timedelta = timedelta(days=1)
    clock: Callable[[], datetime] = _utc_now
    _results: dict[str, tuple[ProductLookupResult, datetime]] = field(
        default_factory=dict, init=False, repr=False
    )

    def get(self, barcode: str) -> ProductLookupResult | None:
        stored = self._results.get(barcode)
        if stored is None:
            return None
        result, stored_at = stored
        if self.clock() - stored_at >= self.ttl:
            del self._results[barcode]
            return None
        return result

    def put(self, barcode: str, result: ProductLookupResult) -> None:
        self._results[barcode] = (result, self.clock())
