"""Application service: List Products use case (query)."""

from __future__ import annotations

from onedrop.application.dto import ProductDTO
from onedrop.domain.repository.catalog_repository import CatalogRepository
from onedrop.domain.repository.inventory_repository import InventoryRepository


class ListProductsHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._inventory_repo = inventory_repo

    def handle(self) -> list[ProductDTO]:
        return [
            ProductDTO(
                id=item.id,
                title=item.title,
                price=str(item.price),
                price_cents=item.price.amount,
                currency=item.price.currency,
                sizes=list(item.sizes),
                image=item.image,
                status=self._inventory_repo.status_of(item.id).value,
            )
            for item in self._catalog_repo.list_all()
        ]
