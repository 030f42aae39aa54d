"""Unit tests for the InventoryItem aggregate."""

import pytest

from onedrop.domain.exceptions import AlreadySoldError, ValidationError
from onedrop.domain.model.inventory import InventoryItem, SaleStatus


class TestInventoryItemDefaults:

    def test_new_record_is_available(self):
        inv = InventoryItem(item_id="design-007")
        assert inv.status == SaleStatus.AVAILABLE
        assert not inv.is_sold
        assert inv.session_id is None


class TestInventoryItemMarkSold:

    def test_mark_sold_transitions_once(self):
        inv = InventoryItem(item_id="design-007")
        assert inv.mark_sold("cs_1") is True
        assert inv.status == SaleStatus.SOLD
        assert inv.session_id == "cs_1"
        assert inv.sold_at is not None

    def test_same_session_again_is_noop(self):
        inv = InventoryItem(item_id="design-007")
        inv.mark_sold("cs_1")
        sold_at = inv.sold_at
        assert inv.mark_sold("cs_1") is False
        assert inv.sold_at == sold_at
        assert inv.status == SaleStatus.SOLD

    def test_different_session_rejected(self):
        inv = InventoryItem(item_id="design-007")
        inv.mark_sold("cs_1")
        with pytest.raises(AlreadySoldError, match="already sold by session cs_1"):
            inv.mark_sold("cs_2")
        assert inv.session_id == "cs_1"

    def test_legacy_sold_record_rejects_any_session(self):
        inv = InventoryItem(item_id="design-007", status=SaleStatus.SOLD)
        with pytest.raises(AlreadySoldError):
            inv.mark_sold("cs_1")

    def test_blank_session_rejected(self):
        inv = InventoryItem(item_id="design-007")
        with pytest.raises(ValidationError, match="session id is required"):
            inv.mark_sold("")
        assert not inv.is_sold
