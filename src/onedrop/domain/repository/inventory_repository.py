"""Abstract repository for the InventoryItem aggregate.

Implementations behave like a key/value store: reads may be stale, a
save is durable once it returns, and there is no compare-and-set.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from onedrop.domain.model.inventory import InventoryItem, SaleStatus


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_item_id(self, item_id: str) -> InventoryItem | None:
        """Return the sale record for an item, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every stored sale record."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated sale record."""

    def status_of(self, item_id: str) -> SaleStatus:
        """Sale status of an item; absent records are available."""
        record = self.get_by_item_id(item_id)
        return record.status if record is not None else SaleStatus.AVAILABLE
