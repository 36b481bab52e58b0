"""Sale completion listener that keeps the session's total revenue."""

from __future__ import annotations

import structlog

from pos.domain.gateway.sale_listener import SaleCompletionListener
from pos.domain.model.sale import Sale
from pos.domain.model.value_objects import Money

logger = structlog.get_logger(__name__)


class RevenueLogListener(SaleCompletionListener):

    def __init__(self) -> None:
        self.total_revenue = Money.zero()

    def sale_completed(self, sale: Sale) -> None:
        self.total_revenue = self.total_revenue + sale.calculate_total_with_vat()
        logger.info("total_revenue", revenue=str(self.total_revenue))
