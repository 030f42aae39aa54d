"""JSON-file-backed implementation of CatalogRepository.

Reads the ``products.json`` written by the catalog-import tooling.  Size
maps appear in two shapes and both are accepted::

    "sizeMap": {"S": 4012, "M": 4013}
    "sizeMap": {"S": {"variantId": 4012}, "M": {"variantId": 4013}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from onedrop.domain.exceptions import ValidationError
from onedrop.domain.model.item import Item
from onedrop.domain.model.value_objects import Money
from onedrop.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- CatalogRepository interface ------------------------------------------

    def get_by_id(self, item_id: str) -> Item | None:
        return self._load().get(item_id)

    def list_all(self) -> list[Item]:
        return list(self._load().values())

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Item]:
        if not self._file_path.exists():
            return {}
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            raw = list(raw.values())
        items: dict[str, Item] = {}
        for entry in raw:
            try:
                item = self._to_domain(entry)
            except (ValidationError, AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed catalog entry %r: %s", _entry_id(entry), exc)
                continue
            items[item.id] = item
        return items

    @staticmethod
    def _to_domain(raw: dict) -> Item:
        price = raw.get("price", raw.get("priceCents"))
        if price is None:
            raise ValidationError(f"Catalog entry '{raw.get('id')}' has no price")
        return Item(
            id=raw["id"],
            title=raw.get("title") or raw.get("name") or raw["id"],
            price=Money.of(price, raw.get("currency", "usd")),
            size_map={
                size: int(value["variantId"] if isinstance(value, dict) else value)
                for size, value in (raw.get("sizeMap") or {}).items()
            },
            artwork_url=raw.get("printUrl") or raw.get("printFileUrl") or "",
            description=raw.get("description", ""),
            image=raw.get("image", ""),
        )


def _entry_id(entry) -> str | None:
    return entry.get("id") if isinstance(entry, dict) else None
