"""Stripe implementation of PaymentGateway.

Checkout sessions are created with inline ``price_data`` from the catalog
price, so no Stripe Price objects need to exist.  Webhook deliveries are
authenticated with the ``Stripe-Signature`` header before the body is
decoded.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

import stripe

from onedrop.domain.exceptions import InvalidSignatureError, UpstreamProviderError
from onedrop.domain.gateway.payment_gateway import PaymentEvent, PaymentGateway
from onedrop.domain.model.checkout import CheckoutSession, CheckoutSessionRequest

logger = logging.getLogger(__name__)


class StripePaymentGateway(PaymentGateway):

    def __init__(
        self,
        secret_key: str,
        webhook_secret: str,
        tolerance_seconds: int = stripe.Webhook.DEFAULT_TOLERANCE,
        create_session: Callable[..., Any] | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._tolerance_seconds = tolerance_seconds
        self._create_session = create_session or stripe.checkout.Session.create

    # --- Checkout -------------------------------------------------------------

    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        if not self._secret_key:
            raise UpstreamProviderError("Payment provider is not configured")
        try:
            session = self._create_session(api_key=self._secret_key, **self._params(request))
        except stripe.StripeError as exc:
            logger.error("Stripe refused checkout session: %s", exc)
            raise UpstreamProviderError(
                f"Failed to create checkout session: {exc.user_message or exc}"
            ) from exc
        return CheckoutSession(id=session.id, url=session.url)

    @staticmethod
    def _params(request: CheckoutSessionRequest) -> dict[str, Any]:
        return {
            "mode": "payment",
            "line_items": [
                {
                    "quantity": line.quantity,
                    "price_data": {
                        "currency": line.unit_price.currency,
                        "unit_amount": line.unit_price.amount,
                        "product_data": {"name": line.name},
                    },
                }
                for line in request.line_items
            ],
            "metadata": dict(request.metadata),
            "payment_intent_data": {"metadata": dict(request.metadata)},
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "shipping_address_collection": {
                "allowed_countries": list(request.allowed_countries),
            },
        }

    # --- Webhooks -------------------------------------------------------------

    def verify_event(self, payload: bytes, signature_header: str | None) -> PaymentEvent:
        if not self._webhook_secret:
            raise InvalidSignatureError("Webhook signing secret is not configured")
        if not signature_header:
            raise InvalidSignatureError("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidSignatureError("Webhook payload is not UTF-8") from exc

        try:
            stripe.WebhookSignature.verify_header(
                body, signature_header, self._webhook_secret, self._tolerance_seconds
            )
        except stripe.SignatureVerificationError as exc:
            raise InvalidSignatureError(f"Webhook signature verification failed: {exc}") from exc

        try:
            raw = json.loads(body)
        except ValueError as exc:
            raise InvalidSignatureError("Webhook payload is not valid JSON") from exc

        return self._to_event(raw)

    @staticmethod
    def _to_event(raw: dict) -> PaymentEvent:
        session = (raw.get("data") or {}).get("object") or {}
        if not isinstance(session, dict) or session.get("object") != "checkout.session":
            return PaymentEvent(id=raw.get("id", ""), type=raw.get("type", ""))
        return PaymentEvent(
            id=raw.get("id", ""),
            type=raw.get("type", ""),
            session_id=session.get("id") or "",
            payment_status=session.get("payment_status") or "",
            metadata={k: str(v) for k, v in (session.get("metadata") or {}).items()},
            shipping=_shipping_fields(session),
        )


def _shipping_fields(session: dict) -> dict[str, str]:
    """Normalize the buyer's shipping address from a checkout session.

    Newer API versions nest shipping under ``collected_information``;
    ``customer_details`` is the last resort.
    """
    customer = session.get("customer_details") or {}
    details = (
        session.get("shipping_details")
        or (session.get("collected_information") or {}).get("shipping_details")
        or {}
    )
    address = details.get("address") or customer.get("address") or {}
    return {
        "name": details.get("name") or customer.get("name") or "",
        "line1": address.get("line1") or "",
        "line2": address.get("line2") or "",
        "city": address.get("city") or "",
        "state_code": address.get("state") or "",
        "country_code": address.get("country") or "",
        "postal_code": address.get("postal_code") or "",
        "email": customer.get("email") or "",
    }
