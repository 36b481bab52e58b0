"""Domain service: Discount calculation.

Four independent discounts are computed and added together:

  1. customer: the customer's rate applied to the total with VAT
  2. volume:   3 % above 1000, else 2 % above 500, of the total with VAT
  3. item:     each promoted line's pre-tax subtotal times its item rate
  4. combo:    for every combination whose items are all in the sale,
              its rate applied to the pre-tax subtotal of just those items

Each discount is computed against its own base, never against a running
discounted total, and several combos can fire at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import structlog

from pos.domain.gateway.discount_source import DiscountSource
from pos.domain.model.sale import SaleLineItem
from pos.domain.model.value_objects import Money
from pos.domain.repository.discount_repository import ComboDiscount, DiscountRepository

logger = structlog.get_logger(__name__)

LARGE_PURCHASE_THRESHOLD = Money(Decimal("1000"))
MEDIUM_PURCHASE_THRESHOLD = Money(Decimal("500"))
LARGE_PURCHASE_RATE = Decimal("0.03")
MEDIUM_PURCHASE_RATE = Decimal("0.02")


@dataclass(frozen=True)
class DiscountBreakdown:
    customer: Money
    volume: Money
    item: Money
    combination: Money

    @property
    def total(self) -> Money:
        return self.customer + self.volume + self.item + self.combination


class DiscountCalculator(DiscountSource):

    def __init__(self, discount_repo: DiscountRepository) -> None:
        self._discount_repo = discount_repo

    def get_discount(
        self,
        line_items: list[SaleLineItem],
        total_with_vat: Money,
        customer_id: str,
    ) -> Money:
        """Return the combined discount for a sale."""
        return self.breakdown(line_items, total_with_vat, customer_id).total

    def breakdown(
        self,
        line_items: list[SaleLineItem],
        total_with_vat: Money,
        customer_id: str,
    ) -> DiscountBreakdown:
        result = DiscountBreakdown(
            customer=self._customer_discount(total_with_vat, customer_id),
            volume=self._volume_discount(total_with_vat),
            item=self._item_discounts(line_items),
            combination=self._combination_discounts(line_items),
        )
        logger.info(
            "discount_calculated",
            customer_id=customer_id,
            customer=str(result.customer),
            volume=str(result.volume),
            item=str(result.item),
            combination=str(result.combination),
            total=str(result.total),
        )
        return result

    # --- Individual rules -----------------------------------------------------

    def _customer_discount(self, total_with_vat: Money, customer_id: str) -> Money:
        rate = self._discount_repo.customer_rate(customer_id)
        if rate is None:
            return Money.zero()
        return total_with_vat * rate

    @staticmethod
    def _volume_discount(total_with_vat: Money) -> Money:
        if total_with_vat > LARGE_PURCHASE_THRESHOLD:
            return total_with_vat * LARGE_PURCHASE_RATE
        if total_with_vat > MEDIUM_PURCHASE_THRESHOLD:
            return total_with_vat * MEDIUM_PURCHASE_RATE
        return Money.zero()

    def _item_discounts(self, line_items: list[SaleLineItem]) -> Money:
        total = Money.zero()
        for line in line_items:
            rate = self._discount_repo.item_rate(line.item_id)
            if rate is None:
                continue
            discount = line.subtotal * rate
            logger.debug(
                "item_discount_applied",
                item_id=line.item_id,
                rate=str(rate),
                discount=str(discount),
            )
            total = total + discount
        return total

    def _combination_discounts(self, line_items: list[SaleLineItem]) -> Money:
        sale_item_ids = {line.item_id for line in line_items}
        total = Money.zero()
        for combo in self._discount_repo.combos():
            if not combo.required_item_ids <= sale_item_ids:
                continue
            discount = self._combo_base(combo, line_items) * combo.rate
            logger.debug(
                "combination_discount_applied",
                combo_id=combo.combo_id,
                rate=str(combo.rate),
                discount=str(discount),
            )
            total = total + discount
        return total

    @staticmethod
    def _combo_base(combo: ComboDiscount, line_items: list[SaleLineItem]) -> Money:
        base = Money.zero()
        for line in line_items:
            if line.item_id in combo.required_item_ids:
                base = base + line.subtotal
        return base
