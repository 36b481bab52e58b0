"""Receipt printer that writes to the terminal."""

from __future__ import annotations

import click

from pos.domain.gateway.printer import ReceiptPrinter
from pos.domain.model.receipt import Receipt


class ConsolePrinter(ReceiptPrinter):

    def print_receipt(self, receipt: Receipt) -> None:
        click.echo(receipt.format())
