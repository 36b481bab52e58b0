"""Catalog item.

Items are owned by the catalog and shared read-only with every sale that
references them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos.domain.model.value_objects import Money


@dataclass(frozen=True)
class CatalogItem:
    """A sellable item as described by the catalog."""

    id: str
    name: str
    description: str
    price: Money  # excluding VAT
    vat_rate: Decimal  # fraction, e.g. Decimal("0.25")

    @property
    def vat_amount(self) -> Money:
        return self.price * self.vat_rate

    @property
    def price_with_vat(self) -> Money:
        return self.price + self.vat_amount

    @property
    def vat_percent(self) -> int:
        return int(self.vat_rate * 100)
