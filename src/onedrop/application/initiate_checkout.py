"""Application service: Initiate Checkout use case.

Validates a purchase request against the catalog, performs the advisory
availability check and opens a hosted payment session.  Nothing durable
is written here; the sale is only recorded when payment is confirmed.
"""

from __future__ import annotations

import logging

from onedrop.application.dto import CheckoutDTO
from onedrop.domain.exceptions import AlreadySoldError, UnknownItemError, ValidationError
from onedrop.domain.gateway.payment_gateway import PaymentGateway
from onedrop.domain.model.checkout import (
    CheckoutIntent,
    CheckoutSessionRequest,
    LineItem,
    ShippingPolicy,
)
from onedrop.domain.model.item import Item, normalize_size
from onedrop.domain.model.inventory import SaleStatus
from onedrop.domain.repository.catalog_repository import CatalogRepository
from onedrop.domain.repository.inventory_repository import InventoryRepository

logger = logging.getLogger(__name__)


class InitiateCheckoutHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        inventory_repo: InventoryRepository,
        payment_gateway: PaymentGateway,
        shipping_policy: ShippingPolicy,
        allowed_countries: tuple[str, ...] = ("US", "CA"),
    ) -> None:
        self._catalog_repo = catalog_repo
        self._inventory_repo = inventory_repo
        self._payment_gateway = payment_gateway
        self._shipping_policy = shipping_policy
        self._allowed_countries = tuple(allowed_countries)

    def handle(self, item_id: str, size: str, origin: str) -> CheckoutDTO:
        """Open a checkout session for one item in one size.

        Steps:
        1. Resolve the item (UnknownItemError) and size (SizeUnavailableError).
        2. Advisory sold check (AlreadySoldError).  Two buyers can both pass
           this; the confirmation handler decides who actually bought it.
        3. Price the line items, including the shipping line if it applies.
        4. Open the session with the CheckoutIntent as metadata.
        """
        if not item_id or not item_id.strip():
            raise ValidationError("Item id is required")
        if not size or not size.strip():
            raise ValidationError("Size is required")

        item = self._catalog_repo.get_by_id(item_id.strip())
        if item is None:
            raise UnknownItemError(f"Unknown item: '{item_id}'")

        size = normalize_size(size)
        variant_id = item.variant_for(size)

        if self._inventory_repo.status_of(item.id) == SaleStatus.SOLD:
            raise AlreadySoldError(
                f"Sorry, {item.title} has already sold. It was truly one of one."
            )

        intent = CheckoutIntent(
            item_id=item.id,
            size=size,
            variant_id=variant_id,
            price=item.price,
            artwork_url=item.artwork_url,
        )
        origin = origin.rstrip("/")
        request = CheckoutSessionRequest(
            line_items=self._line_items(item, size),
            metadata=intent.to_metadata(),
            success_url=f"{origin}/success?session_id={{CHECKOUT_SESSION_ID}}&item={item.id}",
            cancel_url=f"{origin}/cancel?item={item.id}",
            allowed_countries=self._allowed_countries,
        )

        session = self._payment_gateway.create_checkout_session(request)
        logger.info(
            "Opened checkout session %s for item %s (size %s)",
            session.id, item.id, size,
        )
        return CheckoutDTO(checkout_url=session.url, session_id=session.id)

    # --- Pricing --------------------------------------------------------------

    def _line_items(self, item: Item, size: str) -> tuple[LineItem, ...]:
        lines = [LineItem(name=f"{item.title} (size {size})", unit_price=item.price)]
        fee = self._shipping_policy.fee_for(item.price)
        if fee is not None:
            lines.append(LineItem(name="Shipping", unit_price=fee))
        return tuple(lines)
