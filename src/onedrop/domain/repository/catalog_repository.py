"""Abstract repository for catalog Items.

Defined in the domain layer so the domain never depends on
infrastructure.  The catalog is read-only from the core's point of view;
it is refreshed out of band by import tooling.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from onedrop.domain.model.item import Item


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> Item | None:
        """Return an item by its id, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Item]:
        """Return every item in the catalog."""
