"""Application service: Show Fulfillments use case (query)."""

from __future__ import annotations

from onedrop.application.dto import FulfillmentDTO
from onedrop.domain.model.fulfillment import FulfillmentRecord, FulfillmentStatus
from onedrop.domain.repository.fulfillment_repository import FulfillmentRepository


def to_dto(record: FulfillmentRecord) -> FulfillmentDTO:
    return FulfillmentDTO(
        session_id=record.session_id,
        item_id=record.item_id,
        status=record.status.value,
        provider_order_id=record.provider_order_id,
        external_id=record.order.external_id if record.order else None,
        attempts=record.attempts,
        last_error=record.last_error,
        updated_at=record.updated_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


class ShowFulfillmentsHandler:

    def __init__(self, fulfillment_repo: FulfillmentRepository) -> None:
        self._fulfillment_repo = fulfillment_repo

    def handle(self, status: str | None = None) -> list[FulfillmentDTO]:
        if status is None:
            records = self._fulfillment_repo.list_all()
        else:
            records = self._fulfillment_repo.list_by_status(FulfillmentStatus(status))
        return [to_dto(r) for r in sorted(records, key=lambda r: r.created_at)]
