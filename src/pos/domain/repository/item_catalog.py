"""Abstract item catalog.

Defined in the domain layer so the domain never depends on
infrastructure. The catalog resolves item identifiers and owns the
stock levels that completed sales deduct from.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pos.domain.model.item import CatalogItem

if TYPE_CHECKING:
    from pos.domain.model.sale import SaleLineItem


class ItemCatalog(ABC):

    @abstractmethod
    def find_item(self, item_id: str) -> CatalogItem | None:
        """Return the item with this identifier, or None."""

    @abstractmethod
    def list_all(self) -> list[CatalogItem]:
        """Return every item in the catalog."""

    @abstractmethod
    def stock_of(self, item_id: str) -> int | None:
        """Return the units in stock, or None for an unknown item."""

    def is_available(self, item_id: str, quantity: int) -> bool:
        stock = self.stock_of(item_id)
        return stock is not None and stock >= quantity

    @abstractmethod
    def update_inventory_for_completed_sale(self, line_items: list[SaleLineItem]) -> bool:
        """Deduct sold quantities.

        Returns True only if every line could be deducted. Lines that fail
        are reported by the implementation and do not stop the others.
        """
