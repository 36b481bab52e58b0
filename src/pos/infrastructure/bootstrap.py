"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Environment:
    POS_DATA_DIR    directory holding items.json and discounts.json
    POS_LOG_LEVEL   structlog level (default INFO)
    POS_LOG_FORMAT  "console" (default) or "json"
"""

from __future__ import annotations

import os
from pathlib import Path

from pos.application.controller import Controller
from pos.domain.service.discount_calculator import DiscountCalculator
from pos.infrastructure.integration.console_printer import ConsolePrinter
from pos.infrastructure.integration.logging_accounting import LoggingAccountingSystem
from pos.infrastructure.integration.revenue_listener import RevenueLogListener
from pos.infrastructure.logging_config import configure_logging
from pos.infrastructure.persistence.json_discount_repository import (
    JsonDiscountRepository,
)
from pos.infrastructure.persistence.json_item_catalog import JsonItemCatalog

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    override = os.environ.get("POS_DATA_DIR")
    return Path(override) if override else _DEFAULT_DATA_DIR


def setup_logging() -> None:
    configure_logging(
        level=os.environ.get("POS_LOG_LEVEL", "INFO"),
        fmt=os.environ.get("POS_LOG_FORMAT", "console"),
    )


def item_catalog() -> JsonItemCatalog:
    return JsonItemCatalog(data_dir() / "items.json")


def discount_repository() -> JsonDiscountRepository:
    return JsonDiscountRepository(data_dir() / "discounts.json")


def discount_calculator() -> DiscountCalculator:
    return DiscountCalculator(discount_repository())


def build_controller(
    catalog: JsonItemCatalog | None = None,
    calculator: DiscountCalculator | None = None,
) -> Controller:
    """Assemble a Controller backed by the seed data and console output."""
    controller = Controller(
        catalog=catalog if catalog is not None else item_catalog(),
        discount_source=calculator if calculator is not None else discount_calculator(),
        printer=ConsolePrinter(),
        accounting=LoggingAccountingSystem(),
    )
    controller.add_sale_listener(RevenueLogListener())
    return controller
