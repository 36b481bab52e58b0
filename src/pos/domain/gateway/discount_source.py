"""Abstract source of discounts for a sale."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.sale import SaleLineItem
from pos.domain.model.value_objects import Money


class DiscountSource(ABC):

    @abstractmethod
    def get_discount(
        self,
        line_items: list[SaleLineItem],
        total_with_vat: Money,
        customer_id: str,
    ) -> Money:
        """Return the single combined discount the customer is entitled to."""
