"""Integration tests for the sale Controller.

Uses in-memory fakes for every collaborator; no file I/O, no output.
"""

import pytest
from structlog.testing import capture_logs

from pos.application.controller import Controller
from pos.domain.model.value_objects import Money
from pos.domain.service.discount_calculator import DiscountCalculator
from tests.fakes import (
    FailingListener,
    FakeDiscountRepository,
    FakeItemCatalog,
    RecordingAccountingSystem,
    RecordingListener,
    RecordingPrinter,
    standard_items,
)


class _Setup:

    def __init__(self, discount_repo: FakeDiscountRepository | None = None) -> None:
        self.catalog = FakeItemCatalog(standard_items())
        self.printer = RecordingPrinter()
        self.accounting = RecordingAccountingSystem()
        self.controller = Controller(
            catalog=self.catalog,
            discount_source=DiscountCalculator(
                discount_repo or FakeDiscountRepository(customers={"1001": "0.10"})
            ),
            printer=self.printer,
            accounting=self.accounting,
        )


@pytest.fixture
def setup() -> _Setup:
    return _Setup()


class TestNoSaleInProgress:

    def test_every_operation_returns_none(self, setup):
        c = setup.controller
        assert c.enter_item("1", 1) is None
        assert c.end_sale() is None
        assert c.request_discount("1001") is None
        assert c.process_payment(Money.of("100")) is None
        assert c.get_current_total_vat() is None
        assert c.get_current_sale() is None

    def test_nothing_reaches_collaborators(self, setup):
        setup.controller.process_payment(Money.of("100"))
        assert setup.printer.printed == []
        assert setup.accounting.recorded == []
        assert setup.controller.cash_register.balance == Money.zero()

    def test_warning_logged(self, setup):
        with capture_logs() as logs:
            setup.controller.end_sale()
        assert logs[0]["event"] == "no_sale_in_progress"
        assert logs[0]["operation"] == "end_sale"
        assert logs[0]["log_level"] == "warning"


class TestStartNewSale:

    def test_creates_empty_sale(self, setup):
        sale = setup.controller.start_new_sale()
        assert setup.controller.get_current_sale() is sale
        assert sale.items == []

    def test_replaces_previous_sale(self, setup):
        first = setup.controller.start_new_sale()
        setup.controller.enter_item("1", 1)
        second = setup.controller.start_new_sale()
        assert second is not first
        assert setup.controller.end_sale() == Money.zero()


class TestEnterItem:

    def test_valid_item(self, setup):
        setup.controller.start_new_sale()
        result = setup.controller.enter_item("1", 1)
        assert result.item.id == "1"
        assert result.running_total == Money.of("11.20")
        assert not result.is_duplicate

    def test_unknown_item(self, setup):
        setup.controller.start_new_sale()
        with capture_logs() as logs:
            assert setup.controller.enter_item("999", 1) is None
        assert logs[0]["event"] == "item_not_found"
        assert setup.controller.get_current_sale().items == []

    def test_duplicate_flag_and_merged_quantity(self, setup):
        setup.controller.start_new_sale()
        setup.controller.enter_item("1", 1)
        result = setup.controller.enter_item("1", 2)
        assert result.is_duplicate
        lines = setup.controller.get_current_sale().items
        assert len(lines) == 1
        assert lines[0].quantity == 3

    def test_running_total(self, setup):
        setup.controller.start_new_sale()
        setup.controller.enter_item("1", 1)  # 10.00 + 1.20
        result = setup.controller.enter_item("2", 1)  # 15.00 + 1.80
        assert result.running_total == Money.of("28.00")

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_fails_softly(self, setup, quantity):
        setup.controller.start_new_sale()
        assert setup.controller.enter_item("1", quantity) is None
        assert setup.controller.get_current_sale().items == []

    def test_items_can_still_be_entered_after_end_sale(self, setup):
        setup.controller.start_new_sale()
        setup.controller.enter_item("1", 1)
        setup.controller.end_sale()
        assert setup.controller.enter_item("2", 1) is not None


class TestDiscount:

    def test_discount_lowers_total(self, setup):
        setup.controller.start_new_sale()
        setup.controller.enter_item("1", 1)
        before = setup.controller.end_sale()
        after = setup.controller.request_discount("1001")
        assert after < before
        assert setup.controller.get_current_sale().has_discount()

    def test_unknown_customer_keeps_total(self, setup):
        setup.controller.start_new_sale()
        setup.controller.enter_item("1", 1)
        assert setup.controller.request_discount("4242") == Money.of("11.20")

    def test_second_request_uses_discounted_total(self, setup):
        setup.controller.start_new_sale()
        setup.controller.enter_item("1", 2)
        setup.controller.enter_item("3", 1)
        first = setup.controller.request_discount("1001")
        second = setup.controller.request_discount("1001")
        assert first == Money.of("42.34")
        # 10 % of 42.34 replaces the earlier 4.70 discount
        assert second == Money.of("42.81")
        assert setup.controller.get_current_sale().discount_amount == Money.of("4.23")

    def test_combo_discount_only_covers_combo_items(self):
        s = _Setup(FakeDiscountRepository(combos=[("SNACK", {"4", "5"}, "0.15")]))
        s.controller.start_new_sale()
        s.controller.enter_item("4", 1)
        s.controller.enter_item("5", 1)
        s.controller.enter_item("1", 1)
        s.controller.request_discount("9999")
        assert s.controller.get_current_sale().discount_amount == Money.of("15.75")


class TestProcessPayment:

    def _paid(self, setup, amount: str = "100"):
        setup.controller.start_new_sale()
        setup.controller.enter_item("1", 1)
        return setup.controller.process_payment(Money.of(amount))

    def test_change(self, setup):
        assert self._paid(setup, "20") == Money.of("8.80")

    def test_underpayment_returns_negative_change(self, setup):
        assert self._paid(setup, "10") == Money.of("-1.20")

    def test_collaborators_updated(self, setup):
        self._paid(setup, "20")
        sale = setup.controller.get_current_sale()
        assert setup.controller.cash_register.balance == Money.of("20.00")
        assert setup.accounting.recorded == [sale]
        assert setup.accounting.statistics == [Money.of("11.20")]
        assert setup.catalog.stock_of("1") == 49
        assert setup.printer.printed == [sale.receipt]

    def test_listeners_notified_in_registration_order(self, setup):
        calls: list[str] = []
        first = RecordingListener("first", calls)
        second = RecordingListener("second", calls)
        setup.controller.add_sale_listener(first)
        setup.controller.add_sale_listener(second)
        self._paid(setup)
        assert calls == ["first", "second"]
        assert first.sales == [setup.controller.get_current_sale()]

    def test_failing_listener_does_not_stop_the_others(self, setup):
        later = RecordingListener()
        setup.controller.add_sale_listener(FailingListener())
        setup.controller.add_sale_listener(later)
        with capture_logs() as logs:
            change = self._paid(setup)
        assert change == Money.of("88.80")
        assert len(later.sales) == 1
        failures = [e for e in logs if e["event"] == "post_payment_step_failed"]
        assert failures[0]["step"] == "listener"
        assert failures[0]["listener"] == "FailingListener"

    def test_failed_inventory_update_does_not_block_receipt(self, setup):
        setup.catalog.set_stock("1", 0)
        listener = RecordingListener()
        setup.controller.add_sale_listener(listener)
        with capture_logs() as logs:
            self._paid(setup)
        assert len(setup.printer.printed) == 1
        assert len(setup.accounting.recorded) == 1
        assert len(listener.sales) == 1
        assert "inventory_update_incomplete" in [e["event"] for e in logs]

    def test_crashing_printer_does_not_block_listeners(self, setup):
        def _broken(receipt):
            raise OSError("out of paper")

        setup.printer.print_receipt = _broken
        listener = RecordingListener()
        setup.controller.add_sale_listener(listener)
        with capture_logs() as logs:
            self._paid(setup)
        assert len(listener.sales) == 1
        assert [e["step"] for e in logs if e["event"] == "post_payment_step_failed"] == [
            "receipt"
        ]

    def test_paying_twice_replaces_receipt(self, setup):
        self._paid(setup, "20")
        with capture_logs() as logs:
            setup.controller.process_payment(Money.of("50"))
        assert "sale_paid_again" in [e["event"] for e in logs]
        assert setup.controller.get_current_sale().receipt.paid_amount == Money.of("50.00")


class TestFullSale:

    def test_end_to_end(self, setup):
        c = setup.controller
        c.start_new_sale()
        c.enter_item("1", 1)
        assert c.enter_item("1", 1).is_duplicate
        c.enter_item("3", 1)

        assert c.end_sale() == Money.of("47.04")
        assert c.get_current_total_vat() == Money.of("5.04")
        assert c.request_discount("1001") == Money.of("42.34")
        assert c.process_payment(Money.of("100.00")) == Money.of("57.66")

        receipt = setup.printer.printed[0]
        assert [(line.name, line.quantity) for line in receipt.lines] == [
            ("Kellogg's Cornflakes", 2),
            ("Arla Milk", 1),
        ]
        assert receipt.change_amount == Money.of("57.66")

    def test_receipt_not_changed_by_items_entered_after_payment(self, setup):
        c = setup.controller
        c.start_new_sale()
        c.enter_item("1", 1)
        c.process_payment(Money.of("20"))
        receipt = c.get_current_sale().receipt

        c.enter_item("1", 4)

        assert receipt.lines[0].quantity == 1
        assert receipt.total_with_vat == Money.of("11.20")
