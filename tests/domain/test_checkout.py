"""Unit tests for CheckoutIntent and ShippingPolicy."""

import pytest

from onedrop.domain.exceptions import IncompleteEventError
from onedrop.domain.model.checkout import CheckoutIntent, ShippingPolicy
from onedrop.domain.model.value_objects import Money


def _metadata(**overrides) -> dict:
    metadata = {
        "item_id": "design-007",
        "size": "M",
        "variant_id": "112",
        "price": "4200",
        "currency": "usd",
        "artwork_url": "https://cdn.test/design-007.png",
    }
    metadata.update(overrides)
    return metadata


class TestCheckoutIntentMetadata:

    def test_to_metadata_uses_strings_only(self):
        intent = CheckoutIntent("design-007", "M", 112, Money(4200), "https://cdn.test/a.png")
        metadata = intent.to_metadata()
        assert metadata["variant_id"] == "112"
        assert metadata["price"] == "4200"
        assert all(isinstance(v, str) for v in metadata.values())

    def test_from_metadata_rebuilds_typed_intent(self):
        intent = CheckoutIntent.from_metadata(_metadata())
        assert intent.item_id == "design-007"
        assert intent.variant_id == 112
        assert intent.price == Money(4200)

    def test_extra_metadata_keys_ignored(self):
        intent = CheckoutIntent.from_metadata(_metadata(campaign="spring"))
        assert intent.size == "M"

    @pytest.mark.parametrize("key", ["item_id", "size", "variant_id", "price", "artwork_url"])
    def test_missing_field_rejected(self, key):
        metadata = _metadata()
        del metadata[key]
        with pytest.raises(IncompleteEventError, match=key):
            CheckoutIntent.from_metadata(metadata)

    def test_no_metadata_rejected(self):
        with pytest.raises(IncompleteEventError, match="missing"):
            CheckoutIntent.from_metadata(None)

    def test_non_numeric_variant_rejected(self):
        with pytest.raises(IncompleteEventError, match="variant_id"):
            CheckoutIntent.from_metadata(_metadata(variant_id="large"))


class TestShippingPolicy:

    def test_fee_below_threshold(self):
        policy = ShippingPolicy(fee=Money(500), free_threshold=Money(5000))
        assert policy.fee_for(Money(4200)) == Money(500)

    def test_fee_waived_at_threshold(self):
        policy = ShippingPolicy(fee=Money(500), free_threshold=Money(4200))
        assert policy.fee_for(Money(4200)) is None

    def test_zero_fee_never_adds_line(self):
        policy = ShippingPolicy(fee=Money(0), free_threshold=Money(5000))
        assert policy.fee_for(Money(100)) is None

    def test_zero_threshold_always_charges(self):
        policy = ShippingPolicy(fee=Money(500), free_threshold=Money(0))
        assert policy.fee_for(Money(100000)) == Money(500)
