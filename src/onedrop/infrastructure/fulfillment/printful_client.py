"""Printful implementation of FulfillmentProvider.

Orders are created as drafts (``POST /orders``) and optionally confirmed
into production (``POST /orders/{id}/confirm``).  HTTP failures are mapped
onto the fulfillment error taxonomy:

- no API key                        -> FulfillmentUnavailableError
- 4xx (bad address, bad variant...) -> FulfillmentRejectedError
- 5xx, timeouts, connection errors  -> FulfillmentTransportError
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from onedrop.domain.exceptions import (
    FulfillmentRejectedError,
    FulfillmentTransportError,
    FulfillmentUnavailableError,
)
from onedrop.domain.gateway.fulfillment_provider import FulfillmentProvider
from onedrop.domain.model.fulfillment import FulfillmentOrder

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.printful.com"


class PrintfulClient(FulfillmentProvider):

    def __init__(
        self,
        api_key: str,
        store_id: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._store_id = store_id
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    # --- FulfillmentProvider interface ----------------------------------------

    def submit(self, order: FulfillmentOrder) -> str:
        result = self._post("/orders", json=self.order_payload(order))
        provider_order_id = result.get("id")
        if provider_order_id is None:
            raise FulfillmentTransportError("Printful response did not include an order id")
        return str(provider_order_id)

    def confirm(self, provider_order_id: str) -> None:
        self._post(f"/orders/{provider_order_id}/confirm")

    # --- Payload --------------------------------------------------------------

    @staticmethod
    def order_payload(order: FulfillmentOrder) -> dict[str, Any]:
        recipient = order.recipient
        payload_recipient = {
            "name": recipient.name,
            "address1": recipient.line1,
            "city": recipient.city,
            "country_code": recipient.country_code,
        }
        optional = {
            "address2": recipient.line2,
            "state_code": recipient.state_code,
            "zip": recipient.postal_code,
            "email": recipient.email,
        }
        payload_recipient.update({k: v for k, v in optional.items() if v})
        return {
            "external_id": order.external_id,
            "recipient": payload_recipient,
            "items": [
                {
                    "variant_id": order.variant_id,
                    "quantity": order.quantity,
                    "files": [{"type": order.placement, "url": order.artwork_url}],
                }
            ],
        }

    # --- HTTP helpers ---------------------------------------------------------

    def _client(self) -> httpx.Client:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        if self._store_id:
            headers["X-PF-Store-Id"] = self._store_id
        return httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    def _post(self, path: str, json: dict | None = None) -> dict:
        if not self._api_key:
            raise FulfillmentUnavailableError("PRINTFUL_API_KEY is not set")

        try:
            with self._client() as client:
                response = client.post(path, json=json)
        except httpx.TimeoutException as exc:
            raise FulfillmentTransportError(f"Printful timed out on {path}") from exc
        except httpx.HTTPError as exc:
            raise FulfillmentTransportError(f"Printful request to {path} failed: {exc}") from exc

        if response.status_code >= 500:
            raise FulfillmentTransportError(
                f"Printful error {response.status_code} on {path}: {_error_message(response)}"
            )
        if response.status_code >= 400:
            raise FulfillmentRejectedError(
                f"Printful rejected {path} ({response.status_code}): {_error_message(response)}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise FulfillmentTransportError(f"Printful returned a non-JSON body on {path}") from exc
        logger.debug("Printful %s -> %s", path, response.status_code)
        return body.get("result") or {}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return str(body.get("result") or body)[:200]
