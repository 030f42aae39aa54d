"""Application service: Handle Payment Event use case.

This is the only place an item becomes SOLD.  Events arrive at least
once, possibly concurrently, so every step is safe to repeat:

1. Authenticate the delivery (InvalidSignatureError propagates; the web
   layer answers 400 and nothing has been touched).
2. Ignore anything that is not a paid, completed checkout session.
3. Rebuild the CheckoutIntent and shipping address; incomplete events are
   acknowledged without side effects.
4. Mark the item sold.  Same session again is a no-op; a different session
   is an oversell, recorded for manual refund and never fulfilled.
5. Claim the per-session fulfillment record with an atomic add; if the
   session already has one, stop: this is a redelivery.  Otherwise
   dispatch.  Dispatch failures are logged and left on the record for retry.
"""

from __future__ import annotations

import logging

from onedrop.application.dto import WebhookAckDTO, WebhookOutcome
from onedrop.domain.exceptions import AlreadySoldError, FulfillmentError, IncompleteEventError
from onedrop.domain.gateway.payment_gateway import PaymentEvent, PaymentGateway
from onedrop.domain.model.checkout import CheckoutIntent
from onedrop.domain.model.fulfillment import FulfillmentOrder, FulfillmentRecord, ShippingAddress
from onedrop.domain.model.inventory import InventoryItem
from onedrop.domain.repository.fulfillment_repository import FulfillmentRepository
from onedrop.domain.repository.inventory_repository import InventoryRepository
from onedrop.domain.service.fulfillment_dispatcher import FulfillmentDispatcher

logger = logging.getLogger(__name__)


class HandlePaymentEventHandler:

    def __init__(
        self,
        payment_gateway: PaymentGateway,
        inventory_repo: InventoryRepository,
        fulfillment_repo: FulfillmentRepository,
        dispatcher: FulfillmentDispatcher,
        placement: str = "front",
    ) -> None:
        self._payment_gateway = payment_gateway
        self._inventory_repo = inventory_repo
        self._fulfillment_repo = fulfillment_repo
        self._dispatcher = dispatcher
        self._placement = placement

    def handle(self, payload: bytes, signature_header: str | None) -> WebhookAckDTO:
        event = self._payment_gateway.verify_event(payload, signature_header)

        if not event.is_completion:
            logger.debug("Ignoring %s event %s", event.type, event.id)
            return WebhookAckDTO(WebhookOutcome.IGNORED, event.id)

        if not event.is_paid:
            logger.info(
                "Session %s completed but payment is still pending", event.session_id
            )
            return WebhookAckDTO(
                WebhookOutcome.AWAITING_PAYMENT, event.id, session_id=event.session_id
            )

        try:
            intent, recipient = self._extract(event)
        except IncompleteEventError as exc:
            logger.warning("Incomplete %s event %s: %s", event.type, event.id, exc)
            return WebhookAckDTO(
                WebhookOutcome.INCOMPLETE,
                event.id,
                session_id=event.session_id or None,
                detail=str(exc),
            )

        # Authoritative write, before any fulfillment work.
        try:
            self._mark_sold(intent.item_id, event.session_id)
        except AlreadySoldError as exc:
            return self._record_oversell(event, intent, exc)

        order = FulfillmentOrder.for_sale(
            intent, event.session_id, recipient, placement=self._placement
        )
        record = FulfillmentRecord.open(event.session_id, intent.item_id, order)
        # Atomic claim of the per-session marker; a concurrent redelivery loses here.
        if not self._fulfillment_repo.add_if_absent(record):
            logger.info(
                "Session %s already handled; skipping fulfillment", event.session_id
            )
            return WebhookAckDTO(
                WebhookOutcome.DUPLICATE,
                event.id,
                session_id=event.session_id,
                item_id=intent.item_id,
            )

        try:
            self._dispatcher.dispatch(record)
        except FulfillmentError as exc:
            # The payment is captured and the item stays sold; retry out of band.
            return WebhookAckDTO(
                WebhookOutcome.FULFILLMENT_FAILED,
                event.id,
                session_id=event.session_id,
                item_id=intent.item_id,
                detail=str(exc),
            )

        return WebhookAckDTO(
            WebhookOutcome.PROCESSED,
            event.id,
            session_id=event.session_id,
            item_id=intent.item_id,
        )

    # --- Steps ----------------------------------------------------------------

    @staticmethod
    def _extract(event: PaymentEvent) -> tuple[CheckoutIntent, ShippingAddress]:
        if not event.session_id:
            raise IncompleteEventError("Event carries no session id")
        intent = CheckoutIntent.from_metadata(event.metadata)
        recipient = ShippingAddress.from_mapping(event.shipping)
        return intent, recipient

    def _mark_sold(self, item_id: str, session_id: str) -> None:
        inventory = self._inventory_repo.get_by_item_id(item_id)
        if inventory is None:
            inventory = InventoryItem(item_id=item_id)
        if inventory.mark_sold(session_id):
            self._inventory_repo.save(inventory)
            logger.info("Item %s marked sold by session %s", item_id, session_id)

    def _record_oversell(
        self, event: PaymentEvent, intent: CheckoutIntent, exc: AlreadySoldError
    ) -> WebhookAckDTO:
        oversold = FulfillmentRecord.oversold(event.session_id, intent.item_id, str(exc))
        if self._fulfillment_repo.add_if_absent(oversold):
            logger.error(
                "Oversold: session %s paid for item %s which was already sold; "
                "refund required",
                event.session_id, intent.item_id,
            )
        return WebhookAckDTO(
            WebhookOutcome.OVERSOLD,
            event.id,
            session_id=event.session_id,
            item_id=intent.item_id,
            detail=str(exc),
        )
