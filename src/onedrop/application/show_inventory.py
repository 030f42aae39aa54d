"""Application service: Show Inventory use case (query).

Diagnostic only; the checkout and confirmation paths never rely on it.
"""

from __future__ import annotations

from onedrop.domain.model.inventory import SaleStatus
from onedrop.domain.repository.catalog_repository import CatalogRepository
from onedrop.domain.repository.inventory_repository import InventoryRepository


class ShowInventoryHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._inventory_repo = inventory_repo

    def handle(self) -> dict[str, str]:
        """Map every known item id to ``available`` or ``sold``.

        Covers catalog items without a record as well as records for items
        that have since left the catalog.
        """
        statuses = {
            item.id: SaleStatus.AVAILABLE.value for item in self._catalog_repo.list_all()
        }
        for record in self._inventory_repo.list_all():
            statuses[record.item_id] = record.status.value
        return statuses
