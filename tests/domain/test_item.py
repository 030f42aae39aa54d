"""Unit tests for the Item catalog fact."""

import pytest

from onedrop.domain.exceptions import SizeUnavailableError, ValidationError
from onedrop.domain.model.item import Item
from onedrop.domain.model.value_objects import Money


def _item(**overrides) -> Item:
    fields = dict(
        id="design-007",
        title="Signal Drift",
        price=Money(4200),
        size_map={"S": 111, "M": 112, "L": 113},
        artwork_url="https://cdn.test/design-007.png",
    )
    fields.update(overrides)
    return Item(**fields)


class TestItemSizes:

    def test_variant_for_mapped_size(self):
        assert _item().variant_for("M") == 112

    def test_variant_lookup_ignores_case_and_whitespace(self):
        assert _item().variant_for(" l ") == 113

    def test_unmapped_size_rejected(self):
        with pytest.raises(SizeUnavailableError, match="XL"):
            _item().variant_for("XL")

    def test_size_map_keys_are_normalized(self):
        item = _item(size_map={"s": 1, "xl": 2})
        assert item.sizes == ("S", "XL")


class TestItemValidation:

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError, match="id is required"):
            _item(id=" ")

    def test_missing_artwork_rejected(self):
        with pytest.raises(ValidationError, match="no artwork"):
            _item(artwork_url="")
