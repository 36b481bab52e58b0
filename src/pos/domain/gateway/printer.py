"""Abstract receipt printer."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.receipt import Receipt


class ReceiptPrinter(ABC):

    @abstractmethod
    def print_receipt(self, receipt: Receipt) -> None:
        """Output the formatted receipt."""
