"""JSON-file-backed implementation of InventoryRepository.

The file is a single object keyed by item id, mirroring a key/value
store.  A bare ``"sold"`` string value (the format older tooling wrote)
is read as a sold record with no session id.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime
from pathlib import Path

from onedrop.domain.model.inventory import InventoryItem, SaleStatus
from onedrop.domain.repository.inventory_repository import InventoryRepository


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        # Serializes read-modify-write of the shared file so saves of
        # different keys cannot overwrite each other.
        self._lock = threading.Lock()
        self._ensure_file()

    # --- InventoryRepository interface ----------------------------------------

    def get_by_item_id(self, item_id: str) -> InventoryItem | None:
        raw = self._load_raw().get(item_id)
        return self._to_domain(item_id, raw) if raw is not None else None

    def list_all(self) -> list[InventoryItem]:
        return [self._to_domain(key, raw) for key, raw in self._load_raw().items()]

    def save(self, item: InventoryItem) -> None:
        with self._lock:
            records = self._load_raw()
            records[item.item_id] = self._to_raw(item)
            self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: InventoryItem) -> dict:
        return {
            "status": item.status.value,
            "session_id": item.session_id,
            "sold_at": item.sold_at.isoformat() if item.sold_at else None,
        }

    @staticmethod
    def _to_domain(item_id: str, raw: dict | str) -> InventoryItem:
        if isinstance(raw, str):
            return InventoryItem(item_id=item_id, status=SaleStatus(raw))
        sold_at = raw.get("sold_at")
        return InventoryItem(
            item_id=item_id,
            status=SaleStatus(raw["status"]),
            session_id=raw.get("session_id"),
            sold_at=datetime.fromisoformat(sold_at) if sold_at else None,
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: dict) -> None:
        tmp_path = self._file_path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        tmp_path.replace(self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
