"""InventoryItem aggregate: the sale status of one single-unit item.

There is one record per item id.  An item without a record is available.
The only transition is AVAILABLE -> SOLD, it happens at most once and it
is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from onedrop.domain.exceptions import AlreadySoldError, ValidationError


class SaleStatus(Enum):
    AVAILABLE = "available"
    SOLD = "sold"


@dataclass
class InventoryItem:
    """Aggregate root for sale status.

    Invariants:
    - once ``status`` is SOLD it never changes again
    - ``session_id`` names the one payment session that sold the item
    """

    item_id: str
    status: SaleStatus = SaleStatus.AVAILABLE
    session_id: str | None = None
    sold_at: datetime | None = None

    @property
    def is_sold(self) -> bool:
        return self.status == SaleStatus.SOLD

    def mark_sold(self, session_id: str) -> bool:
        """Record the sale made by ``session_id``.

        Returns True if the status changed, False if this same session
        already sold the item (a redelivered event).  Raises
        AlreadySoldError if a *different* session sold it first.
        """
        if not session_id:
            raise ValidationError("A payment session id is required to mark an item sold")
        if self.is_sold:
            if self.session_id == session_id:
                return False
            raise AlreadySoldError(
                f"Item '{self.item_id}' was already sold"
                + (f" by session {self.session_id}" if self.session_id else "")
            )
        self.status = SaleStatus.SOLD
        self.session_id = session_id
        self.sold_at = datetime.now(timezone.utc)
        return True
