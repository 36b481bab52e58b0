"""Cash payment value object."""

from __future__ import annotations

from dataclasses import dataclass

from pos.domain.model.value_objects import Money


@dataclass(frozen=True)
class CashPayment:
    """The amount of cash the customer handed over."""

    amount: Money

    def change_for(self, total: Money) -> Money:
        """Change owed for *total*; negative when the payment falls short."""
        return self.amount - total
