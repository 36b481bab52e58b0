"""CLI commands that run sales through the Controller."""

from __future__ import annotations

import click

from pos.application.controller import Controller
from pos.application.dto import ItemEntrySpec
from pos.domain.exceptions import DomainException
from pos.domain.model.value_objects import Money
from pos.domain.service.discount_calculator import DiscountCalculator
from pos.infrastructure.bootstrap import build_controller, discount_calculator

DEMO_ITEMS = [
    ItemEntrySpec("1", 1),
    ItemEntrySpec("1", 1),
    ItemEntrySpec("3", 1),
    ItemEntrySpec("2", 1),
]
DEMO_CUSTOMER = "1001"
DEMO_PAYMENT = "100"


def _parse_items(raw: tuple[str, ...]) -> list[ItemEntrySpec]:
    """Parse ('1:2', '3') into ItemEntrySpec list; quantity defaults to 1."""
    specs: list[ItemEntrySpec] = []
    for entry in raw:
        entry = entry.strip()
        item_id, _, qty_str = entry.partition(":")
        if not item_id:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ItemID' or 'ItemID:Quantity'."
            )
        try:
            qty = int(qty_str) if qty_str else 1
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{item_id}'."
            )
        if qty <= 0:
            raise click.BadParameter(
                f"Quantity must be positive for item '{item_id}', got {qty}."
            )
        specs.append(ItemEntrySpec(item_id=item_id.strip(), quantity=qty))
    return specs


def _scan(controller: Controller, spec: ItemEntrySpec) -> None:
    click.echo(f"Add {spec.quantity} item with item id {spec.item_id}:")
    result = controller.enter_item(spec.item_id, spec.quantity)
    if result is None:
        click.echo(f"Item with ID {spec.item_id} not found in inventory!")
        click.echo()
        return

    item = result.item
    click.echo(f"Item ID : {item.id}")
    click.echo(f"Item name : {item.name}")
    click.echo(f"Item cost : {item.price.format_receipt()} SEK")
    click.echo(f"VAT : {item.vat_percent}%")
    click.echo(f"Item description : {item.description}")
    click.echo()
    if result.is_duplicate:
        click.echo("This item was already in the sale. Quantity has been updated.")
    click.echo(f"Total cost (incl VAT): {result.running_total.format_receipt()} SEK")
    click.echo(f"Total VAT : {controller.get_current_total_vat().format_receipt()} SEK")
    click.echo()


def _request_discount(
    controller: Controller, calculator: DiscountCalculator, customer_id: str
) -> None:
    click.echo(f"Cashier enters customer ID: {customer_id}")
    sale = controller.get_current_sale()
    before = controller.end_sale()
    details = calculator.breakdown(sale.items, before, customer_id)
    after = controller.request_discount(customer_id)
    click.echo(f"Total before discount: {before.format_receipt()} SEK")
    click.echo(f"  Customer discount: {details.customer.format_receipt()} SEK")
    click.echo(f"  Volume discount: {details.volume.format_receipt()} SEK")
    click.echo(f"  Item discounts: {details.item.format_receipt()} SEK")
    click.echo(f"  Combination discounts: {details.combination.format_receipt()} SEK")
    click.echo(f"Discount amount: {(before - after).format_receipt()} SEK")
    click.echo(f"Total after discount: {after.format_receipt()} SEK")
    click.echo()


def _run_sale(
    controller: Controller,
    calculator: DiscountCalculator,
    specs: list[ItemEntrySpec],
    customer_id: str | None,
    paid: Money,
) -> None:
    controller.start_new_sale()
    for spec in specs:
        _scan(controller, spec)

    if customer_id:
        _request_discount(controller, calculator, customer_id)

    total = controller.end_sale()
    click.echo(f"Total cost (incl VAT): {total.format_receipt()} SEK")
    click.echo(f"Customer pays {paid}:")
    change = controller.process_payment(paid)
    click.echo()
    click.echo(f"Change to give the customer: {change.format_receipt()} SEK")


@click.command("sale")
@click.option(
    "--item", "items", required=True, multiple=True,
    help="Item as 'ItemID' or 'ItemID:Quantity'. Repeat for more items.",
)
@click.option("--customer", default=None, help="Customer ID asking for a discount.")
@click.option("--paid", required=True, help="Cash handed over by the customer.")
def sale_run(items: tuple[str, ...], customer: str | None, paid: str) -> None:
    """Run one sale: enter items, apply discounts, pay and print the receipt."""
    specs = _parse_items(items)

    try:
        paid_amount = Money.of(paid)
        calculator = discount_calculator()
        controller = build_controller(calculator=calculator)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _run_sale(controller, calculator, specs, customer, paid_amount)


@click.command("demo")
def sale_demo() -> None:
    """Run the scripted demo sale."""
    try:
        calculator = discount_calculator()
        controller = build_controller(calculator=calculator)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _run_sale(controller, calculator, DEMO_ITEMS, DEMO_CUSTOMER, Money.of(DEMO_PAYMENT))
