"""Abstract fulfillment provider (print-on-demand production)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from onedrop.domain.model.fulfillment import FulfillmentOrder


class FulfillmentProvider(ABC):

    @abstractmethod
    def submit(self, order: FulfillmentOrder) -> str:
        """Create a (draft) production order and return the provider's id.

        Raises FulfillmentUnavailableError, FulfillmentRejectedError or
        FulfillmentTransportError.
        """

    @abstractmethod
    def confirm(self, provider_order_id: str) -> None:
        """Move a draft order into production.  Same failure modes as submit."""
