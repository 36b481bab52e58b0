"""Cash register holding the cash taken in by this point of sale."""

from __future__ import annotations

from pos.domain.model.payment import CashPayment
from pos.domain.model.value_objects import Money


class CashRegister:

    def __init__(self, initial_balance: Money | None = None) -> None:
        self._balance = initial_balance if initial_balance is not None else Money.zero()

    @property
    def balance(self) -> Money:
        return self._balance

    def add_payment(self, payment: CashPayment) -> None:
        """Record a payment; the tendered amount goes into the drawer."""
        self._balance = self._balance + payment.amount
