"""JSON-seeded, in-memory implementation of ItemCatalog.

The seed file is read once; stock deducted by completed sales lives only
in memory and is gone when the process exits.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from pos.domain.exceptions import EntityNotFoundError, ValidationError
from pos.domain.model.item import CatalogItem
from pos.domain.model.sale import SaleLineItem
from pos.domain.model.value_objects import Money, to_rate
from pos.domain.repository.item_catalog import ItemCatalog

logger = structlog.get_logger(__name__)


class JsonItemCatalog(ItemCatalog):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._items: dict[str, CatalogItem] = {}
        self._stock: dict[str, int] = {}
        self._load()

    # --- ItemCatalog interface ------------------------------------------------

    def find_item(self, item_id: str) -> CatalogItem | None:
        return self._items.get(item_id)

    def list_all(self) -> list[CatalogItem]:
        return list(self._items.values())

    def stock_of(self, item_id: str) -> int | None:
        return self._stock.get(item_id)

    def update_inventory_for_completed_sale(self, line_items: list[SaleLineItem]) -> bool:
        all_successful = True
        for line in line_items:
            if not self._deduct(line.item_id, line.quantity):
                all_successful = False
                logger.warning(
                    "inventory_update_failed",
                    item_id=line.item_id,
                    requested=line.quantity,
                    in_stock=self._stock.get(line.item_id),
                )

        if all_successful:
            logger.info("inventory_updated", lines=len(line_items))
        else:
            logger.warning("inventory_partially_updated", lines=len(line_items))
        return all_successful

    # --- Internal helpers -----------------------------------------------------

    def _deduct(self, item_id: str, quantity: int) -> bool:
        if not self.is_available(item_id, quantity):
            return False
        self._stock[item_id] -= quantity
        logger.debug("inventory_decreased", item_id=item_id, quantity=quantity)
        return True

    def _load(self) -> None:
        if not self._file_path.exists():
            raise EntityNotFoundError(f"Item catalog not found: {self._file_path}")

        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            for entry in raw:
                item = CatalogItem(
                    id=str(entry["id"]),
                    name=entry["name"],
                    description=entry.get("description", ""),
                    price=Money.of(entry["price"]),
                    vat_rate=to_rate(entry["vat_rate"]),
                )
                self._items[item.id] = item
                self._stock[item.id] = int(entry.get("stock", 0))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise ValidationError(
                f"Malformed item catalog {self._file_path}: {exc}"
            ) from exc

        logger.debug("catalog_loaded", path=str(self._file_path), items=len(self._items))
