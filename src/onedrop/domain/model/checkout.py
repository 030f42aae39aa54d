"""Checkout value objects.

A CheckoutIntent is everything the confirmation step needs to finish a
sale.  It has no storage of its own: it travels through the payment
provider as session metadata and is rebuilt when the session completes.
"""

from __future__ import annotations

from dataclasses import dataclass

from onedrop.domain.exceptions import IncompleteEventError, ValidationError
from onedrop.domain.model.value_objects import Money


@dataclass(frozen=True)
class CheckoutIntent:
    item_id: str
    size: str
    variant_id: int
    price: Money
    artwork_url: str

    def to_metadata(self) -> dict[str, str]:
        """Flatten into provider metadata (string keys and values only)."""
        return {
            "item_id": self.item_id,
            "size": self.size,
            "variant_id": str(self.variant_id),
            "price": str(self.price.amount),
            "currency": self.price.currency,
            "artwork_url": self.artwork_url,
        }

    @staticmethod
    def from_metadata(metadata: dict | None) -> CheckoutIntent:
        """Rebuild an intent from session metadata.

        Every field is required; anything missing or malformed raises
        IncompleteEventError.
        """
        metadata = metadata or {}
        missing = [
            key
            for key in ("item_id", "size", "variant_id", "price", "artwork_url")
            if not str(metadata.get(key) or "").strip()
        ]
        if missing:
            raise IncompleteEventError(
                f"Session metadata is missing {', '.join(missing)}"
            )

        try:
            variant_id = int(metadata["variant_id"])
        except (TypeError, ValueError) as exc:
            raise IncompleteEventError(
                f"Invalid variant_id in metadata: {metadata['variant_id']!r}"
            ) from exc

        try:
            price = Money.of(metadata["price"], metadata.get("currency") or "usd")
        except ValidationError as exc:
            raise IncompleteEventError(f"Invalid price in metadata: {exc}") from exc

        return CheckoutIntent(
            item_id=str(metadata["item_id"]).strip(),
            size=str(metadata["size"]).strip(),
            variant_id=variant_id,
            price=price,
            artwork_url=str(metadata["artwork_url"]).strip(),
        )


@dataclass(frozen=True)
class LineItem:
    name: str
    unit_price: Money
    quantity: int = 1


@dataclass(frozen=True)
class ShippingPolicy:
    """Flat shipping fee, waived once the price reaches a threshold.

    A zero fee disables the shipping line entirely; a zero threshold means
    the fee always applies.
    """

    fee: Money
    free_threshold: Money

    def fee_for(self, price: Money) -> Money | None:
        if self.fee.is_zero:
            return None
        if not self.free_threshold.is_zero and price >= self.free_threshold:
            return None
        return self.fee


@dataclass(frozen=True)
class CheckoutSessionRequest:
    """What the payment gateway needs to open a hosted checkout."""

    line_items: tuple[LineItem, ...]
    metadata: dict[str, str]
    success_url: str
    cancel_url: str
    allowed_countries: tuple[str, ...]


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str
