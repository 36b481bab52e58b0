"""JSON-file-backed implementation of DiscountRepository."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from pos.domain.exceptions import EntityNotFoundError, ValidationError
from pos.domain.model.value_objects import to_rate
from pos.domain.repository.discount_repository import ComboDiscount, DiscountRepository


class JsonDiscountRepository(DiscountRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._customer_rates: dict[str, Decimal] = {}
        self._item_rates: dict[str, Decimal] = {}
        self._combos: list[ComboDiscount] = []
        self._load()

    # --- DiscountRepository interface -----------------------------------------

    def customer_rate(self, customer_id: str) -> Decimal | None:
        return self._customer_rates.get(customer_id)

    def item_rate(self, item_id: str) -> Decimal | None:
        return self._item_rates.get(item_id)

    def combos(self) -> list[ComboDiscount]:
        return list(self._combos)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> None:
        if not self._file_path.exists():
            raise EntityNotFoundError(f"Discount rules not found: {self._file_path}")

        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            self._customer_rates = {
                str(cid): to_rate(rate) for cid, rate in raw.get("customers", {}).items()
            }
            self._item_rates = {
                str(iid): to_rate(rate) for iid, rate in raw.get("items", {}).items()
            }
            self._combos = [
                ComboDiscount(
                    combo_id=combo["id"],
                    required_item_ids=frozenset(str(i) for i in combo["items"]),
                    rate=to_rate(combo["rate"]),
                )
                for combo in raw.get("combos", [])
            ]
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as exc:
            raise ValidationError(
                f"Malformed discount rules in {self._file_path}: {exc}"
            ) from exc
