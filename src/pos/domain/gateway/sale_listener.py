"""Listener contract for systems that want to hear about completed sales."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.sale import Sale


class SaleCompletionListener(ABC):

    @abstractmethod
    def sale_completed(self, sale: Sale) -> None:
        """Called once the sale has been paid and all bookkeeping is done."""
