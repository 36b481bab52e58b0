"""CLI commands for the item catalog."""

from __future__ import annotations

import click

from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import item_catalog


@click.command("catalog")
def catalog_list() -> None:
    """List catalog items with price, VAT and stock."""
    try:
        catalog = item_catalog()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    items = catalog.list_all()
    if not items:
        click.echo("No items in the catalog.")
        return

    click.echo(f"{'ID':<4} {'Name':<24} {'Price':>10} {'VAT':>5} {'Stock':>6}")
    click.echo("-" * 53)
    for item in items:
        click.echo(
            f"{item.id:<4} {item.name:<24} {str(item.price):>10} "
            f"{item.vat_percent:>4}% {catalog.stock_of(item.id):>6}"
        )
