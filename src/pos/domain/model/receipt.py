"""Receipt — proof that a sale has been paid.

A receipt is a frozen snapshot taken at payment time: later changes to the
sale it came from never show up on it. The printed text is derived on
demand by ``format()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from pos.domain.model.value_objects import Money

if TYPE_CHECKING:
    from pos.domain.model.sale import Sale

HEADER = "------------------ Begin receipt -------------------"
FOOTER = "------------------ End receipt ---------------------"

# Amounts are right-aligned so that they end at this character offset.
AMOUNT_COLUMN = 40


@dataclass(frozen=True)
class ReceiptLine:
    """One distinct item as it appears on the receipt."""

    name: str
    quantity: int
    unit_price: Money
    subtotal: Money  # excluding VAT


@dataclass(frozen=True)
class Receipt:

    lines: tuple[ReceiptLine, ...]
    total_with_vat: Money
    total_vat: Money
    paid_amount: Money
    change_amount: Money
    time_of_sale: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @staticmethod
    def from_sale(
        sale: Sale,
        paid_amount: Money,
        change_amount: Money,
        time_of_sale: datetime | None = None,
    ) -> Receipt:
        lines = tuple(
            ReceiptLine(
                name=line.item.name,
                quantity=line.quantity,
                unit_price=line.item.price,
                subtotal=line.subtotal,
            )
            for line in sale.items
        )
        extra = {"time_of_sale": time_of_sale} if time_of_sale is not None else {}
        return Receipt(
            lines=lines,
            total_with_vat=sale.calculate_total_with_vat(),
            total_vat=sale.calculate_total_vat(),
            paid_amount=paid_amount,
            change_amount=change_amount,
            **extra,
        )

    # --- Rendering ------------------------------------------------------------

    def format(self) -> str:
        """Render the receipt exactly as the printer outputs it."""
        out = [HEADER, f"Time of Sale : {self.time_of_sale:%Y-%m-%d %H:%M}", ""]

        for line in self.lines:
            left = f"{line.name} {line.quantity} x {line.unit_price.format_receipt()}"
            out.append(_amount_line(left, line.subtotal))
        out.append("")

        out.append(_amount_line("Total :", self.total_with_vat))
        out.append(_amount_line("VAT :", self.total_vat, with_currency=False))
        out.append("")

        out.append(_amount_line("Cash :", self.paid_amount))
        out.append(_amount_line("Change :", self.change_amount))
        out.append(FOOTER)
        return "\n".join(out)


def _amount_line(left: str, amount: Money, with_currency: bool = True) -> str:
    text = amount.format_receipt()
    padding = max(AMOUNT_COLUMN - len(left) - len(text), 1)
    line = f"{left}{' ' * padding}{text}"
    if with_currency:
        line += f" {amount.currency}"
    return line
