"""Abstract external accounting system."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.sale import Sale
from pos.domain.model.value_objects import Money


class AccountingSystem(ABC):

    @abstractmethod
    def record_sale(self, sale: Sale) -> None:
        """Book a completed sale (total and VAT)."""

    @abstractmethod
    def update_sales_statistics(self, amount: Money) -> None:
        """Add a paid amount to the running sales statistics."""
