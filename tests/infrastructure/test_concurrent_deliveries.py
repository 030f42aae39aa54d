"""Concurrent webhook deliveries against the JSON stores."""

import threading
import time

from onedrop.application.dto import WebhookOutcome
from onedrop.application.handle_payment_event import HandlePaymentEventHandler
from onedrop.domain.model.fulfillment import FulfillmentOrder, FulfillmentStatus
from onedrop.domain.model.inventory import SaleStatus
from onedrop.domain.service.fulfillment_dispatcher import FulfillmentDispatcher
from onedrop.infrastructure.persistence.json_fulfillment_repository import (
    JsonFulfillmentRepository,
)
from onedrop.infrastructure.persistence.json_inventory_repository import JsonInventoryRepository
from tests.fakes import (
    VALID_SIGNATURE,
    FakeFulfillmentProvider,
    FakePaymentGateway,
    completed_event,
)

PAYLOAD = b'{"id": "evt_1"}'


class SlowFulfillmentProvider(FakeFulfillmentProvider):

    def submit(self, order: FulfillmentOrder) -> str:
        time.sleep(0.2)
        return super().submit(order)


def _setup(tmp_path):
    gateway = FakePaymentGateway()
    gateway.add_event(PAYLOAD, completed_event())
    inventory_repo = JsonInventoryRepository(tmp_path / "inventory.json")
    fulfillment_repo = JsonFulfillmentRepository(tmp_path / "fulfillments.json")
    provider = SlowFulfillmentProvider()
    handler = HandlePaymentEventHandler(
        payment_gateway=gateway,
        inventory_repo=inventory_repo,
        fulfillment_repo=fulfillment_repo,
        dispatcher=FulfillmentDispatcher(provider, fulfillment_repo),
    )
    return handler, provider, inventory_repo, fulfillment_repo


def _deliver_concurrently(handler, copies: int) -> list[WebhookOutcome]:
    barrier = threading.Barrier(copies)
    outcomes: list[WebhookOutcome] = []

    def deliver():
        barrier.wait()
        outcomes.append(handler.handle(PAYLOAD, VALID_SIGNATURE).outcome)

    threads = [threading.Thread(target=deliver) for _ in range(copies)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    return outcomes


class TestConcurrentRedelivery:

    def test_simultaneous_deliveries_submit_one_order(self, tmp_path):
        handler, provider, inventory_repo, fulfillment_repo = _setup(tmp_path)

        outcomes = _deliver_concurrently(handler, copies=2)

        assert len(provider.submitted) == 1
        assert sorted(o.value for o in outcomes) == ["duplicate", "processed"]
        assert inventory_repo.status_of("design-007") == SaleStatus.SOLD

    def test_winner_record_is_not_overwritten(self, tmp_path):
        handler, provider, _, fulfillment_repo = _setup(tmp_path)

        _deliver_concurrently(handler, copies=4)

        records = fulfillment_repo.list_all()
        assert len(records) == 1
        assert records[0].status == FulfillmentStatus.SUBMITTED
        assert records[0].provider_order_id == "9001"
        assert len(provider.submitted) == 1
