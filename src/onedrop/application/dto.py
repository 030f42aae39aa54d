"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the web/CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class CheckoutDTO:
    """Output: where to send the buyer to pay."""

    checkout_url: str
    session_id: str


class WebhookOutcome(Enum):
    IGNORED = "ignored"
    AWAITING_PAYMENT = "awaiting_payment"
    INCOMPLETE = "incomplete"
    PROCESSED = "processed"
    DUPLICATE = "duplicate"
    OVERSOLD = "oversold"
    FULFILLMENT_FAILED = "fulfillment_failed"


@dataclass(frozen=True)
class WebhookAckDTO:
    """Output: how a provider event was handled.

    Every outcome is acknowledged to the provider; the value only matters
    for logs and tests.
    """

    outcome: WebhookOutcome
    event_id: str
    session_id: str | None = None
    item_id: str | None = None
    detail: str = ""


@dataclass(frozen=True)
class ProductDTO:
    id: str
    title: str
    price: str  # formatted, e.g. "$42.00"
    price_cents: int
    currency: str
    sizes: list[str]
    image: str
    status: str


@dataclass(frozen=True)
class FulfillmentDTO:
    session_id: str
    item_id: str
    status: str
    provider_order_id: str | None
    external_id: str | None
    attempts: int
    last_error: str | None
    updated_at: str
