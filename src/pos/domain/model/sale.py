"""Sale aggregate — the core of the domain.

The Sale is an aggregate root that owns its line items, the discount
granted to the customer and, once paid, the receipt proving the payment.
All VAT, discount and change arithmetic lives here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from pos.domain.exceptions import ValidationError
from pos.domain.model.item import CatalogItem
from pos.domain.model.payment import CashPayment
from pos.domain.model.receipt import Receipt
from pos.domain.model.value_objects import Customer, Money

if TYPE_CHECKING:
    from pos.domain.gateway.printer import ReceiptPrinter
    from pos.domain.repository.item_catalog import ItemCatalog


def _require_positive_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(
            f"Quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity <= 0:
        raise ValidationError("Quantity must be positive")


@dataclass
class SaleLineItem:
    """One catalog item and the quantity of it bought in this sale.

    Mutable only via ``increment_quantity()``; the item itself is a shared
    read-only catalog reference.
    """

    item: CatalogItem
    quantity: int

    def __post_init__(self) -> None:
        _require_positive_quantity(self.quantity)

    @property
    def item_id(self) -> str:
        return self.item.id

    @property
    def subtotal(self) -> Money:
        """Price of the line excluding VAT."""
        return self.item.price * self.quantity

    @property
    def vat_amount(self) -> Money:
        return self.item.vat_amount * self.quantity

    @property
    def total_with_vat(self) -> Money:
        return self.item.price_with_vat * self.quantity

    def increment_quantity(self, delta: int) -> None:
        """Add *delta* units. Stock sufficiency is the catalog's concern."""
        _require_positive_quantity(delta)
        self.quantity += delta


class Sale:
    """Aggregate root for a single sale transaction.

    Line items are kept in entry order, at most one per item identifier.
    Total with VAT is ``total + VAT - discount``; the discount is a flat
    amount taken once off the grand total.
    """

    def __init__(self) -> None:
        self._line_items: dict[str, SaleLineItem] = {}
        self._discount_amount = Money.zero()
        self._customer: Customer | None = None
        self._receipt: Receipt | None = None

    # --- Item entry -----------------------------------------------------------

    def add_item(self, item: CatalogItem, quantity: int) -> SaleLineItem:
        """Add *quantity* of *item*, merging with an existing line if present."""
        existing = self._line_items.get(item.id)
        if existing is not None:
            existing.increment_quantity(quantity)
            return existing

        line = SaleLineItem(item=item, quantity=quantity)
        self._line_items[item.id] = line
        return line

    @property
    def items(self) -> list[SaleLineItem]:
        """A copy of the line items, in entry order."""
        return list(self._line_items.values())

    def find_line_item(self, item_id: str) -> SaleLineItem | None:
        return self._line_items.get(item_id)

    def contains_item(self, item_id: str) -> bool:
        return item_id in self._line_items

    # --- Totals ---------------------------------------------------------------

    def calculate_total(self) -> Money:
        """Sum of line subtotals, excluding VAT."""
        total = Money.zero()
        for line in self._line_items.values():
            total = total + line.subtotal
        return total

    def calculate_total_vat(self) -> Money:
        total_vat = Money.zero()
        for line in self._line_items.values():
            total_vat = total_vat + line.vat_amount
        return total_vat

    def calculate_total_with_vat(self) -> Money:
        """Amount to pay: total plus VAT, minus the current discount."""
        return self.calculate_total() + self.calculate_total_vat() - self._discount_amount

    # --- Discount -------------------------------------------------------------

    def apply_discount(self, customer: Customer, discount_amount: Money) -> Money:
        """Replace the current discount and return the new total with VAT.

        The last call wins; discounts are never accumulated. No check is
        made against the pre-discount total.
        """
        self._customer = customer
        self._discount_amount = discount_amount
        return self.calculate_total_with_vat()

    @property
    def discount_amount(self) -> Money:
        return self._discount_amount

    @property
    def customer(self) -> Customer | None:
        return self._customer

    def has_discount(self) -> bool:
        return self._discount_amount.is_positive

    # --- Payment --------------------------------------------------------------

    def pay(self, payment: CashPayment, paid_at: datetime | None = None) -> Money:
        """Pay for the sale and generate its receipt.

        Returns the change, which is negative when *payment* does not cover
        the total. Paying again replaces the previous receipt.
        """
        total_to_pay = self.calculate_total_with_vat()
        change = payment.change_for(total_to_pay)
        self._receipt = Receipt.from_sale(self, payment.amount, change, paid_at)
        return change

    @property
    def receipt(self) -> Receipt | None:
        return self._receipt

    @property
    def is_paid(self) -> bool:
        return self._receipt is not None

    # --- Collaborators --------------------------------------------------------

    def print_receipt(self, printer: ReceiptPrinter) -> None:
        """Print the receipt; does nothing before the sale has been paid."""
        if self._receipt is not None:
            printer.print_receipt(self._receipt)

    def update_inventory(self, catalog: ItemCatalog) -> bool:
        """Ask the catalog to deduct every line; True only if all succeeded."""
        return catalog.update_inventory_for_completed_sale(self.items)
