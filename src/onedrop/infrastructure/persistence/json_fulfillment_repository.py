"""JSON-file-backed implementation of FulfillmentRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from pathlib import Path

from onedrop.domain.model.fulfillment import (
    FulfillmentOrder,
    FulfillmentRecord,
    FulfillmentStatus,
    ShippingAddress,
)
from onedrop.domain.repository.fulfillment_repository import FulfillmentRepository


class JsonFulfillmentRepository(FulfillmentRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- FulfillmentRepository interface --------------------------------------

    def get_by_session_id(self, session_id: str) -> FulfillmentRecord | None:
        for raw in self._load_raw():
            if raw["session_id"] == session_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[FulfillmentRecord]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, record: FulfillmentRecord) -> None:
        with self._lock:
            records = self._load_raw()

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(records):
                if raw["session_id"] == record.session_id:
                    records[i] = self._to_raw(record)
                    replaced = True
                    break
            if not replaced:
                records.append(self._to_raw(record))

            self._persist_raw(records)

    def add_if_absent(self, record: FulfillmentRecord) -> bool:
        with self._lock:
            records = self._load_raw()
            if any(raw["session_id"] == record.session_id for raw in records):
                return False
            records.append(self._to_raw(record))
            self._persist_raw(records)
            return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: FulfillmentRecord) -> dict:
        order = record.order
        return {
            "session_id": record.session_id,
            "item_id": record.item_id,
            "status": record.status.value,
            "provider_order_id": record.provider_order_id,
            "last_error": record.last_error,
            "attempts": record.attempts,
            "created_at": record.created_at.isoformat(),
            "updated_at": record.updated_at.isoformat(),
            "order": None if order is None else {
                "external_id": order.external_id,
                "variant_id": order.variant_id,
                "artwork_url": order.artwork_url,
                "placement": order.placement,
                "quantity": order.quantity,
                "recipient": {
                    "name": order.recipient.name,
                    "line1": order.recipient.line1,
                    "line2": order.recipient.line2,
                    "city": order.recipient.city,
                    "state_code": order.recipient.state_code,
                    "country_code": order.recipient.country_code,
                    "postal_code": order.recipient.postal_code,
                    "email": order.recipient.email,
                },
            },
        }

    @staticmethod
    def _to_domain(raw: dict) -> FulfillmentRecord:
        order = None
        if raw.get("order"):
            o = raw["order"]
            order = FulfillmentOrder(
                external_id=o["external_id"],
                recipient=ShippingAddress(**o["recipient"]),
                variant_id=o["variant_id"],
                artwork_url=o["artwork_url"],
                placement=o.get("placement", "front"),
                quantity=o.get("quantity", 1),
            )
        return FulfillmentRecord(
            session_id=raw["session_id"],
            item_id=raw["item_id"],
            order=order,
            status=FulfillmentStatus(raw["status"]),
            provider_order_id=raw.get("provider_order_id"),
            last_error=raw.get("last_error"),
            attempts=raw.get("attempts", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        tmp_path.replace(self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
