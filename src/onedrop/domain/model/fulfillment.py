"""Fulfillment model: production orders and their per-session record.

A FulfillmentOrder is built once per completed payment session.  The
FulfillmentRecord wrapping it is the idempotency marker for that session:
it is persisted before the first submission, and its presence means the
session has already been handled.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from onedrop.domain.exceptions import IncompleteEventError, ValidationError
from onedrop.domain.model.checkout import CheckoutIntent

EXTERNAL_ID_PREFIX = "od-"
EXTERNAL_ID_MAX_LENGTH = 32


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    line1: str
    city: str
    country_code: str
    line2: str = ""
    state_code: str = ""
    postal_code: str = ""
    email: str = ""

    @staticmethod
    def from_mapping(raw: dict | None) -> ShippingAddress:
        """Build an address from normalized provider fields.

        Raises IncompleteEventError if a required field is blank.
        """
        raw = raw or {}
        values = {key: str(raw.get(key) or "").strip() for key in (
            "name", "line1", "line2", "city", "state_code",
            "country_code", "postal_code", "email",
        )}
        missing = [key for key in ("name", "line1", "city", "country_code") if not values[key]]
        if missing:
            raise IncompleteEventError(
                f"Shipping address is missing {', '.join(missing)}"
            )
        values["country_code"] = values["country_code"].upper()
        return ShippingAddress(**values)


def external_reference(item_id: str, session_id: str) -> str:
    """Deterministic provider reference for one (item, session) pair.

    Derived by hashing so it fits the provider's length limit while staying
    stable across retries.
    """
    digest = hashlib.sha256(f"{item_id}:{session_id}".encode("utf-8")).hexdigest()
    return (EXTERNAL_ID_PREFIX + digest)[:EXTERNAL_ID_MAX_LENGTH]


@dataclass(frozen=True)
class FulfillmentOrder:
    external_id: str
    recipient: ShippingAddress
    variant_id: int
    artwork_url: str
    placement: str = "front"
    quantity: int = 1

    @staticmethod
    def for_sale(
        intent: CheckoutIntent,
        session_id: str,
        recipient: ShippingAddress,
        placement: str = "front",
    ) -> FulfillmentOrder:
        return FulfillmentOrder(
            external_id=external_reference(intent.item_id, session_id),
            recipient=recipient,
            variant_id=intent.variant_id,
            artwork_url=intent.artwork_url,
            placement=placement,
        )


class FulfillmentStatus(Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    OVERSOLD = "oversold"


RETRYABLE_STATUSES = (FulfillmentStatus.PENDING, FulfillmentStatus.FAILED)


@dataclass
class FulfillmentRecord:
    """Aggregate root tracking fulfillment of one payment session.

    Invariants:
    - at most one provider order is ever created per record
    - an OVERSOLD record is never dispatched
    """

    session_id: str
    item_id: str
    order: FulfillmentOrder | None
    status: FulfillmentStatus = FulfillmentStatus.PENDING
    provider_order_id: str | None = None
    last_error: str | None = None
    attempts: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def open(session_id: str, item_id: str, order: FulfillmentOrder) -> FulfillmentRecord:
        return FulfillmentRecord(session_id=session_id, item_id=item_id, order=order)

    @staticmethod
    def oversold(session_id: str, item_id: str, reason: str) -> FulfillmentRecord:
        """A paid session for an item another session already bought."""
        return FulfillmentRecord(
            session_id=session_id,
            item_id=item_id,
            order=None,
            status=FulfillmentStatus.OVERSOLD,
            last_error=reason,
        )

    # --- State transitions ----------------------------------------------------

    @property
    def is_retryable(self) -> bool:
        return self.status in RETRYABLE_STATUSES

    def begin_attempt(self) -> None:
        if self.status == FulfillmentStatus.OVERSOLD or self.order is None:
            raise ValidationError(
                f"Session {self.session_id} is oversold and must not be fulfilled"
            )
        if self.status == FulfillmentStatus.CONFIRMED:
            raise ValidationError(f"Session {self.session_id} is already confirmed")
        self.attempts += 1
        self._touch()

    def mark_submitted(self, provider_order_id: str) -> None:
        if self.provider_order_id is not None:
            raise ValidationError(
                f"Session {self.session_id} already has provider order "
                f"{self.provider_order_id}"
            )
        self.provider_order_id = provider_order_id
        self.status = FulfillmentStatus.SUBMITTED
        self.last_error = None
        self._touch()

    def mark_confirmed(self) -> None:
        if self.provider_order_id is None:
            raise ValidationError(
                f"Cannot confirm session {self.session_id}: no provider order yet"
            )
        self.status = FulfillmentStatus.CONFIRMED
        self.last_error = None
        self._touch()

    def clear_failure(self) -> None:
        """Return a failed record whose order was already created to SUBMITTED."""
        if self.provider_order_id is None:
            raise ValidationError(
                f"Session {self.session_id} has no provider order to fall back to"
            )
        self.status = FulfillmentStatus.SUBMITTED
        self.last_error = None
        self._touch()

    def mark_failed(self, error: str) -> None:
        self.status = FulfillmentStatus.FAILED
        self.last_error = error
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
