"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions, which is what lets the
tests substitute in-memory fakes for the stores and providers.
"""

from __future__ import annotations

from dataclasses import dataclass

import stripe

from onedrop.application.handle_payment_event import HandlePaymentEventHandler
from onedrop.application.initiate_checkout import InitiateCheckoutHandler
from onedrop.application.list_products import ListProductsHandler
from onedrop.application.retry_fulfillment import RetryFulfillmentHandler
from onedrop.application.show_fulfillments import ShowFulfillmentsHandler
from onedrop.application.show_inventory import ShowInventoryHandler
from onedrop.domain.gateway.fulfillment_provider import FulfillmentProvider
from onedrop.domain.gateway.payment_gateway import PaymentGateway
from onedrop.domain.model.checkout import ShippingPolicy
from onedrop.domain.model.value_objects import Money
from onedrop.domain.repository.catalog_repository import CatalogRepository
from onedrop.domain.repository.fulfillment_repository import FulfillmentRepository
from onedrop.domain.repository.inventory_repository import InventoryRepository
from onedrop.domain.service.fulfillment_dispatcher import FulfillmentDispatcher
from onedrop.infrastructure.config import Settings
from onedrop.infrastructure.fulfillment.printful_client import PrintfulClient
from onedrop.infrastructure.payments.stripe_gateway import StripePaymentGateway
from onedrop.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from onedrop.infrastructure.persistence.json_fulfillment_repository import (
    JsonFulfillmentRepository,
)
from onedrop.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)


@dataclass
class Services:
    """Every collaborator the use cases need, built once per process."""

    catalog_repo: CatalogRepository
    inventory_repo: InventoryRepository
    fulfillment_repo: FulfillmentRepository
    payment_gateway: PaymentGateway
    fulfillment_provider: FulfillmentProvider
    shipping_policy: ShippingPolicy
    allowed_countries: tuple[str, ...] = ("US", "CA")
    auto_confirm: bool = False
    placement: str = "front"

    # --- Use cases ------------------------------------------------------------

    def dispatcher(self) -> FulfillmentDispatcher:
        return FulfillmentDispatcher(
            self.fulfillment_provider, self.fulfillment_repo, auto_confirm=self.auto_confirm
        )

    def initiate_checkout(self) -> InitiateCheckoutHandler:
        return InitiateCheckoutHandler(
            catalog_repo=self.catalog_repo,
            inventory_repo=self.inventory_repo,
            payment_gateway=self.payment_gateway,
            shipping_policy=self.shipping_policy,
            allowed_countries=self.allowed_countries,
        )

    def handle_payment_event(self) -> HandlePaymentEventHandler:
        return HandlePaymentEventHandler(
            payment_gateway=self.payment_gateway,
            inventory_repo=self.inventory_repo,
            fulfillment_repo=self.fulfillment_repo,
            dispatcher=self.dispatcher(),
            placement=self.placement,
        )

    def retry_fulfillment(self) -> RetryFulfillmentHandler:
        return RetryFulfillmentHandler(self.fulfillment_repo, self.dispatcher())

    def show_fulfillments(self) -> ShowFulfillmentsHandler:
        return ShowFulfillmentsHandler(self.fulfillment_repo)

    def show_inventory(self) -> ShowInventoryHandler:
        return ShowInventoryHandler(self.catalog_repo, self.inventory_repo)

    def list_products(self) -> ListProductsHandler:
        return ListProductsHandler(self.catalog_repo, self.inventory_repo)


def build_services(settings: Settings | None = None) -> Services:
    settings = settings or Settings()

    stripe.max_network_retries = 2
    stripe.default_http_client = stripe.RequestsClient(timeout=settings.payment_timeout_seconds)

    return Services(
        catalog_repo=JsonCatalogRepository(settings.resolved_catalog_path),
        inventory_repo=JsonInventoryRepository(settings.data_dir / "inventory.json"),
        fulfillment_repo=JsonFulfillmentRepository(settings.data_dir / "fulfillments.json"),
        payment_gateway=StripePaymentGateway(
            secret_key=settings.stripe_secret_key,
            webhook_secret=settings.stripe_webhook_secret,
            tolerance_seconds=settings.webhook_tolerance_seconds,
        ),
        fulfillment_provider=PrintfulClient(
            api_key=settings.printful_api_key,
            store_id=settings.printful_store_id,
            base_url=settings.printful_base_url,
            timeout=settings.fulfillment_timeout_seconds,
        ),
        shipping_policy=ShippingPolicy(
            fee=Money(settings.shipping_fee, settings.currency),
            free_threshold=Money(settings.free_shipping_threshold, settings.currency),
        ),
        allowed_countries=tuple(settings.allowed_countries),
        auto_confirm=settings.printful_auto_confirm,
        placement=settings.print_placement,
    )
