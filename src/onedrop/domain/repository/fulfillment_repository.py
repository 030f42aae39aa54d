"""Abstract repository for FulfillmentRecord aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from onedrop.domain.model.fulfillment import FulfillmentRecord, FulfillmentStatus


class FulfillmentRepository(ABC):

    @abstractmethod
    def get_by_session_id(self, session_id: str) -> FulfillmentRecord | None:
        """Return the record for a payment session, or None."""

    @abstractmethod
    def list_all(self) -> list[FulfillmentRecord]:
        """Return every fulfillment record."""

    @abstractmethod
    def save(self, record: FulfillmentRecord) -> None:
        """Persist a new or updated record."""

    @abstractmethod
    def add_if_absent(self, record: FulfillmentRecord) -> bool:
        """Store ``record`` only if its session has no record yet.

        The check and the write are atomic.  Returns False, leaving the
        existing record untouched, when the session is already present.
        """

    def list_by_status(self, status: FulfillmentStatus) -> list[FulfillmentRecord]:
        return [r for r in self.list_all() if r.status == status]
