"""HTTP tests for the FastAPI app, driven through TestClient."""

from fastapi.testclient import TestClient

from onedrop.domain.exceptions import FulfillmentTransportError, UpstreamProviderError
from onedrop.domain.model.fulfillment import FulfillmentStatus
from onedrop.domain.model.inventory import InventoryItem
from onedrop.infrastructure.config import Settings
from onedrop.infrastructure.payments.stripe_gateway import StripePaymentGateway
from onedrop.infrastructure.web.app import create_app
from tests.fakes import VALID_SIGNATURE, completed_event, make_services
from tests.stripe_payloads import WEBHOOK_SECRET, session_event, sign


def _client(services=None):
    services = services or make_services()
    return services, TestClient(create_app(services=services))


class TestCheckoutEndpoint:

    def test_returns_checkout_url(self):
        services, client = _client()
        response = client.post("/checkout", json={"item_id": "design-007", "size": "M"})

        assert response.status_code == 200
        assert response.json() == {
            "checkoutUrl": "https://checkout.test/pay/cs_test_1",
            "url": "https://checkout.test/pay/cs_test_1",
        }
        request = services.payment_gateway.requests[0]
        assert request.cancel_url == "http://testserver/cancel?item=design-007"

    def test_accepts_camel_case_item_id(self):
        _, client = _client()
        response = client.post("/checkout", json={"itemId": "design-007", "size": "M"})
        assert response.status_code == 200

    def test_storefront_product_id_gets_redirect_url(self):
        _, client = _client()
        response = client.post("/checkout", json={"productId": "design-007", "size": "M"})

        assert response.status_code == 200
        assert response.json()["url"] == "https://checkout.test/pay/cs_test_1"
        assert response.json()["checkoutUrl"] == response.json()["url"]

    def test_unknown_item_is_404(self):
        _, client = _client()
        response = client.post("/checkout", json={"item_id": "design-999", "size": "M"})

        assert response.status_code == 404
        assert response.json()["code"] == "unknown_item"

    def test_unmapped_size_is_400(self):
        _, client = _client()
        response = client.post("/checkout", json={"item_id": "design-007", "size": "XXL"})

        assert response.status_code == 400
        assert response.json()["code"] == "size_unavailable"

    def test_missing_fields_is_400(self):
        _, client = _client()
        response = client.post("/checkout", json={"item_id": "design-007"})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing item id or size"

    def test_sold_item_is_409(self):
        services, client = _client()
        sold = InventoryItem(item_id="design-007")
        sold.mark_sold("cs_earlier")
        services.inventory_repo.save(sold)

        response = client.post("/checkout", json={"item_id": "design-007", "size": "M"})

        assert response.status_code == 409
        assert "one of one" in response.json()["error"]

    def test_provider_failure_is_502(self):
        services, client = _client()
        services.payment_gateway.error = UpstreamProviderError("Stripe is down")

        response = client.post("/checkout", json={"item_id": "design-007", "size": "M"})

        assert response.status_code == 502
        assert response.json()["code"] == "upstream_provider_error"


class TestCors:

    ORIGIN = "https://shop.example"

    def _cors_client(self):
        settings = Settings(_env_file=None, cors_origins=[self.ORIGIN])
        return TestClient(create_app(services=make_services(), settings=settings))

    def _preflight(self, client, origin):
        return client.options(
            "/checkout",
            headers={
                "Origin": origin,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

    def test_preflight_from_storefront_allowed(self):
        response = self._preflight(self._cors_client(), self.ORIGIN)

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == self.ORIGIN
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_preflight_from_other_origin_refused(self):
        response = self._preflight(self._cors_client(), "https://evil.example")
        assert "access-control-allow-origin" not in response.headers

    def test_checkout_response_carries_origin(self):
        response = self._cors_client().post(
            "/checkout", json={"item_id": "design-007", "size": "M"}, headers={"Origin": self.ORIGIN}
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == self.ORIGIN

    def test_no_origins_configured_means_no_cors(self):
        _, client = _client()
        response = client.post(
            "/checkout", json={"item_id": "design-007", "size": "M"}, headers={"Origin": self.ORIGIN}
        )
        assert "access-control-allow-origin" not in response.headers


class TestWebhookEndpoint:

    def test_acknowledges_processed_event(self):
        services, client = _client()
        services.payment_gateway.add_event(b"payload", completed_event())

        response = client.post(
            "/payment-webhook", content=b"payload", headers={"Stripe-Signature": VALID_SIGNATURE}
        )

        assert response.status_code == 200
        assert response.text == "ok"
        assert len(services.fulfillment_provider.submitted) == 1

    def test_bad_signature_is_400(self):
        services, client = _client()
        response = client.post(
            "/payment-webhook", content=b"payload", headers={"Stripe-Signature": "forged"}
        )

        assert response.status_code == 400
        assert response.text.startswith("Webhook Error:")
        assert services.inventory_repo.list_all() == []

    def test_fulfillment_failure_still_acknowledged(self):
        services, client = _client()
        services.payment_gateway.add_event(b"payload", completed_event())
        services.fulfillment_provider.submit_error = FulfillmentTransportError("timed out")

        response = client.post(
            "/payment-webhook", content=b"payload", headers={"Stripe-Signature": VALID_SIGNATURE}
        )

        assert response.status_code == 200
        record = services.fulfillment_repo.get_by_session_id("cs_test_abc")
        assert record.status == FulfillmentStatus.FAILED


class TestStatusEndpoints:

    def test_inventory_status(self):
        services, client = _client()
        sold = InventoryItem(item_id="design-002")
        sold.mark_sold("cs_1")
        services.inventory_repo.save(sold)

        response = client.get("/inventory-status")

        assert response.json() == {"design-007": "available", "design-002": "sold"}

    def test_products(self):
        _, client = _client()
        products = {p["id"]: p for p in client.get("/products").json()}
        assert products["design-007"]["price"] == "$42.00"
        assert products["design-007"]["sizes"] == ["S", "M", "L"]

    def test_health(self):
        _, client = _client()
        assert client.get("/health").json() == {"status": "ok"}


class TestSignedDeliveryEndToEnd:
    """A real Stripe-signed delivery through the real gateway adapter."""

    def test_three_deliveries_one_order(self):
        services = make_services()
        services.payment_gateway = StripePaymentGateway("sk_test", WEBHOOK_SECRET)
        _, client = _client(services)
        payload = session_event()

        responses = [
            client.post(
                "/payment-webhook",
                content=payload,
                headers={"Stripe-Signature": sign(payload), "Content-Type": "application/json"},
            )
            for _ in range(3)
        ]

        assert [r.status_code for r in responses] == [200, 200, 200]
        assert client.get("/inventory-status").json()["design-007"] == "sold"
        submitted = services.fulfillment_provider.submitted
        assert len(submitted) == 1
        assert submitted[0].variant_id == 112
        assert submitted[0].recipient.city == "Montreal"

    def test_tampered_delivery_rejected(self):
        services = make_services()
        services.payment_gateway = StripePaymentGateway("sk_test", WEBHOOK_SECRET)
        _, client = _client(services)

        response = client.post(
            "/payment-webhook",
            content=session_event(),
            headers={"Stripe-Signature": sign(b'{"id": "evt_other"}')},
        )

        assert response.status_code == 400
        assert client.get("/inventory-status").json()["design-007"] == "available"
