"""Accounting system stand-in that books sales to the log.

Keeps running statistics in memory so the totals for the session can be
inspected.
"""

from __future__ import annotations

import structlog

from pos.domain.gateway.accounting import AccountingSystem
from pos.domain.model.sale import Sale
from pos.domain.model.value_objects import Money

logger = structlog.get_logger(__name__)


class LoggingAccountingSystem(AccountingSystem):

    def __init__(self) -> None:
        self.sales_recorded = 0
        self.total_excluding_vat = Money.zero()
        self.total_vat = Money.zero()
        self.sales_statistics = Money.zero()

    def record_sale(self, sale: Sale) -> None:
        total = sale.calculate_total()
        vat = sale.calculate_total_vat()
        self.sales_recorded += 1
        self.total_excluding_vat = self.total_excluding_vat + total
        self.total_vat = self.total_vat + vat
        logger.info("sale_recorded", total=str(total), vat=str(vat))

    def update_sales_statistics(self, amount: Money) -> None:
        self.sales_statistics = self.sales_statistics + amount
        logger.info(
            "sales_statistics_updated",
            amount=str(amount),
            accumulated=str(self.sales_statistics),
        )
