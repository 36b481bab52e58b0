"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the view (CLI) and the Controller without
exposing the Sale aggregate's mutating operations.
"""

from __future__ import annotations

from dataclasses import dataclass

from pos.domain.model.item import CatalogItem
from pos.domain.model.value_objects import Money


@dataclass(frozen=True)
class ItemWithRunningTotal:
    """Output of item entry: the item just entered and the new sale total."""

    item: CatalogItem
    running_total: Money  # including VAT, after any discount
    is_duplicate: bool  # True when the item was already in the sale


@dataclass(frozen=True)
class ItemEntrySpec:
    """Input: an item identifier and how many units were scanned."""

    item_id: str
    quantity: int = 1
