"""Application service: Retry Fulfillment use case.

Out-of-band recovery for sales whose production order was not created or
not confirmed.  Only fulfillment is retried; the sale itself is never
touched.
"""

from __future__ import annotations

import logging

from onedrop.application.dto import FulfillmentDTO
from onedrop.application.show_fulfillments import to_dto
from onedrop.domain.exceptions import EntityNotFoundError, FulfillmentError, ValidationError
from onedrop.domain.model.fulfillment import RETRYABLE_STATUSES
from onedrop.domain.repository.fulfillment_repository import FulfillmentRepository
from onedrop.domain.service.fulfillment_dispatcher import FulfillmentDispatcher

logger = logging.getLogger(__name__)


class RetryFulfillmentHandler:

    def __init__(
        self,
        fulfillment_repo: FulfillmentRepository,
        dispatcher: FulfillmentDispatcher,
    ) -> None:
        self._fulfillment_repo = fulfillment_repo
        self._dispatcher = dispatcher

    def handle(self, session_id: str) -> FulfillmentDTO:
        """Retry one session.  Raises FulfillmentError if it fails again."""
        record = self._fulfillment_repo.get_by_session_id(session_id)
        if record is None:
            raise EntityNotFoundError(f"No fulfillment record for session {session_id}")
        if not record.is_retryable:
            raise ValidationError(
                f"Session {session_id} is {record.status.value}; nothing to retry"
            )
        return to_dto(self._dispatcher.dispatch(record))

    def handle_all_failed(self) -> list[FulfillmentDTO]:
        """Retry every retryable (pending or failed) record.

        A PENDING record is a sale whose dispatch never ran, e.g. the process
        stopped right after the sale was recorded.  Individual failures are
        logged and do not stop the sweep.
        """
        results: list[FulfillmentDTO] = []
        retryable = [
            record
            for status in RETRYABLE_STATUSES
            for record in self._fulfillment_repo.list_by_status(status)
        ]
        for record in retryable:
            try:
                self._dispatcher.dispatch(record)
            except FulfillmentError:
                logger.warning("Retry failed for session %s", record.session_id)
            results.append(to_dto(record))
        return results
