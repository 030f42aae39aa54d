"""Domain service: Fulfillment Dispatch.

Coordinates the FulfillmentRecord aggregate with the external provider.
Every outcome is written back to the record before returning or raising,
so a failure is always visible to the out-of-band retry.

Dispatch is two-phase:
  Phase 1: submit the order, unless the record already holds a provider
           order id (a previous attempt got that far).
  Phase 2: confirm the draft, when auto-confirm is enabled.
A sale is never undone here; failures only mark the record FAILED.
"""

from __future__ import annotations

import logging

from onedrop.domain.exceptions import FulfillmentError
from onedrop.domain.gateway.fulfillment_provider import FulfillmentProvider
from onedrop.domain.model.fulfillment import FulfillmentRecord, FulfillmentStatus
from onedrop.domain.repository.fulfillment_repository import FulfillmentRepository

logger = logging.getLogger(__name__)


class FulfillmentDispatcher:

    def __init__(
        self,
        provider: FulfillmentProvider,
        fulfillment_repo: FulfillmentRepository,
        auto_confirm: bool = False,
    ) -> None:
        self._provider = provider
        self._fulfillment_repo = fulfillment_repo
        self._auto_confirm = auto_confirm

    def dispatch(self, record: FulfillmentRecord) -> FulfillmentRecord:
        """Submit (and optionally confirm) the record's order.

        Raises FulfillmentError after the failure has been persisted.
        """
        record.begin_attempt()

        # Phase 1: submit
        if record.provider_order_id is None:
            try:
                provider_order_id = self._provider.submit(record.order)
            except FulfillmentError as exc:
                self._fail(record, exc)
                raise
            record.mark_submitted(provider_order_id)
            self._fulfillment_repo.save(record)
            logger.info(
                "Fulfillment order %s created for session %s (item %s)",
                provider_order_id, record.session_id, record.item_id,
            )

        # Phase 2: confirm
        if self._auto_confirm:
            try:
                self._provider.confirm(record.provider_order_id)
            except FulfillmentError as exc:
                self._fail(record, exc)
                raise
            record.mark_confirmed()
            self._fulfillment_repo.save(record)
            logger.info("Fulfillment order %s confirmed", record.provider_order_id)
        elif record.status == FulfillmentStatus.FAILED:
            # Submitted on an earlier attempt; nothing further to do.
            record.clear_failure()
            self._fulfillment_repo.save(record)

        return record

    def _fail(self, record: FulfillmentRecord, exc: FulfillmentError) -> None:
        record.mark_failed(f"{exc.code}: {exc}")
        self._fulfillment_repo.save(record)
        logger.error(
            "Fulfillment attempt %d failed for session %s (item %s): %s",
            record.attempts, record.session_id, record.item_id, exc,
        )
