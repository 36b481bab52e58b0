"""Application service: the sale Controller.

Every call from the view into the model and the integration layer passes
through here. The Controller sequences one sale at a time: start, item
entry, discount, end, payment, and then the post-payment bookkeeping.

Failed preconditions (no sale started, unknown item, bad quantity) are
reported as ``None``; nothing raised by the domain crosses this boundary.
Once a payment has been taken the bookkeeping steps are best-effort: each
runs even when an earlier one failed.
"""

from __future__ import annotations

from typing import Callable

import structlog

from pos.application.dto import ItemWithRunningTotal
from pos.domain.gateway.accounting import AccountingSystem
from pos.domain.gateway.discount_source import DiscountSource
from pos.domain.gateway.printer import ReceiptPrinter
from pos.domain.gateway.sale_listener import SaleCompletionListener
from pos.domain.model.cash_register import CashRegister
from pos.domain.model.payment import CashPayment
from pos.domain.model.sale import Sale
from pos.domain.model.value_objects import Customer, Money
from pos.domain.repository.item_catalog import ItemCatalog

logger = structlog.get_logger(__name__)


class Controller:

    def __init__(
        self,
        catalog: ItemCatalog,
        discount_source: DiscountSource,
        printer: ReceiptPrinter,
        accounting: AccountingSystem,
        cash_register: CashRegister | None = None,
    ) -> None:
        self._catalog = catalog
        self._discount_source = discount_source
        self._printer = printer
        self._accounting = accounting
        self._cash_register = cash_register if cash_register is not None else CashRegister()
        self._listeners: list[SaleCompletionListener] = []
        self._current_sale: Sale | None = None

    def add_sale_listener(self, listener: SaleCompletionListener) -> None:
        """Register a listener; listeners are notified in registration order."""
        self._listeners.append(listener)

    # --- Sale lifecycle -------------------------------------------------------

    def start_new_sale(self) -> Sale:
        """Begin a new, empty sale, discarding any previous one."""
        self._current_sale = Sale()
        logger.info("sale_started")
        return self._current_sale

    def enter_item(self, item_id: str, quantity: int = 1) -> ItemWithRunningTotal | None:
        """Add an item to the current sale.

        Returns None when no sale is in progress, the quantity is not a
        positive integer or the catalog does not know *item_id*.
        """
        sale = self._require_sale("enter_item")
        if sale is None:
            return None

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            logger.warning("invalid_quantity", item_id=item_id, quantity=quantity)
            return None

        item = self._catalog.find_item(item_id)
        if item is None:
            logger.warning("item_not_found", item_id=item_id)
            return None

        is_duplicate = sale.contains_item(item_id)
        sale.add_item(item, quantity)
        running_total = sale.calculate_total_with_vat()

        logger.info(
            "item_entered",
            item_id=item_id,
            quantity=quantity,
            duplicate=is_duplicate,
            running_total=str(running_total),
        )
        return ItemWithRunningTotal(
            item=item,
            running_total=running_total,
            is_duplicate=is_duplicate,
        )

    def end_sale(self) -> Money | None:
        """Return the total to pay, including VAT and any discount.

        The sale is not sealed; items can still be entered afterwards.
        """
        sale = self._require_sale("end_sale")
        if sale is None:
            return None
        total = sale.calculate_total_with_vat()
        logger.info("sale_ended", total=str(total))
        return total

    def request_discount(self, customer_id: str) -> Money | None:
        """Apply every discount *customer_id* is entitled to.

        Returns the new total with VAT. The discount is computed on the
        current total with VAT and replaces any earlier discount, so a
        second request is based on the already discounted total.
        """
        sale = self._require_sale("request_discount")
        if sale is None:
            return None

        discount = self._discount_source.get_discount(
            sale.items, sale.calculate_total_with_vat(), customer_id
        )
        new_total = sale.apply_discount(Customer(customer_id), discount)

        logger.info(
            "discount_applied",
            customer_id=customer_id,
            discount=str(discount),
            total=str(new_total),
        )
        return new_total

    def process_payment(self, paid_amount: Money) -> Money | None:
        """Take the payment and complete the sale.

        Returns the change, which is negative if *paid_amount* does not
        cover the total. After the receipt has been generated the cash
        register, accounting, inventory, printer and listeners are
        updated in that order.
        """
        sale = self._require_sale("process_payment")
        if sale is None:
            return None

        if sale.is_paid:
            logger.warning("sale_paid_again")

        payment = CashPayment(paid_amount)
        change = sale.pay(payment)
        logger.info(
            "payment_processed",
            paid=str(paid_amount),
            total=str(sale.calculate_total_with_vat()),
            change=str(change),
        )

        self._complete_transaction(sale, payment)
        return change

    # --- Accessors ------------------------------------------------------------

    def get_current_sale(self) -> Sale | None:
        return self._current_sale

    def get_current_total_vat(self) -> Money | None:
        sale = self._require_sale("get_current_total_vat")
        if sale is None:
            return None
        return sale.calculate_total_vat()

    @property
    def cash_register(self) -> CashRegister:
        return self._cash_register

    # --- Post-payment ---------------------------------------------------------

    def _complete_transaction(self, sale: Sale, payment: CashPayment) -> None:
        self._best_effort("cash_register", lambda: self._cash_register.add_payment(payment))
        self._best_effort("accounting", lambda: self._update_accounting(sale))
        self._best_effort("inventory", lambda: self._update_inventory(sale))
        self._best_effort("receipt", lambda: sale.print_receipt(self._printer))
        for listener in list(self._listeners):
            self._best_effort(
                "listener",
                lambda listener=listener: listener.sale_completed(sale),
                listener=type(listener).__name__,
            )

    def _update_accounting(self, sale: Sale) -> None:
        self._accounting.record_sale(sale)
        self._accounting.update_sales_statistics(sale.calculate_total_with_vat())

    def _update_inventory(self, sale: Sale) -> None:
        if not sale.update_inventory(self._catalog):
            logger.warning("inventory_update_incomplete", items=len(sale.items))

    @staticmethod
    def _best_effort(step: str, action: Callable[[], None], **context: object) -> None:
        # The payment has already been taken: a failing step is logged and
        # the remaining steps still run.
        try:
            action()
        except Exception:
            logger.exception("post_payment_step_failed", step=step, **context)

    # --- Internal helpers -----------------------------------------------------

    def _require_sale(self, operation: str) -> Sale | None:
        if self._current_sale is None:
            logger.warning("no_sale_in_progress", operation=operation)
        return self._current_sale
