"""Abstract repository for discount rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ComboDiscount:
    """A rate granted when every one of ``required_item_ids`` is in the sale."""

    combo_id: str
    required_item_ids: frozenset[str]
    rate: Decimal


class DiscountRepository(ABC):

    @abstractmethod
    def customer_rate(self, customer_id: str) -> Decimal | None:
        """Return the customer's discount rate, or None if they have none."""

    @abstractmethod
    def item_rate(self, item_id: str) -> Decimal | None:
        """Return the item's promotional discount rate, or None."""

    @abstractmethod
    def combos(self) -> list[ComboDiscount]:
        """Return every configured item-combination discount."""
