"""Abstract payment gateway.

The payment provider hosts the checkout page and calls back with signed
events.  The domain only sees provider-neutral values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from onedrop.domain.model.checkout import CheckoutSession, CheckoutSessionRequest

SESSION_COMPLETED = "checkout.session.completed"
ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"
COMPLETION_EVENTS = (SESSION_COMPLETED, ASYNC_PAYMENT_SUCCEEDED)


@dataclass(frozen=True)
class PaymentEvent:
    """An authenticated provider event, reduced to what the core needs.

    ``shipping`` holds normalized address fields (name, line1, line2, city,
    state_code, country_code, postal_code, email); any of them may be blank.
    """

    id: str
    type: str
    session_id: str = ""
    payment_status: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    shipping: dict[str, str] = field(default_factory=dict)

    @property
    def is_completion(self) -> bool:
        return self.type in COMPLETION_EVENTS

    @property
    def is_paid(self) -> bool:
        return self.payment_status != "unpaid"


class PaymentGateway(ABC):

    @abstractmethod
    def create_checkout_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        """Open a hosted single-payment checkout session.

        Raises UpstreamProviderError if the provider call fails.
        """

    @abstractmethod
    def verify_event(self, payload: bytes, signature_header: str | None) -> PaymentEvent:
        """Authenticate and decode a webhook delivery.

        Must verify the signature before parsing the body.  Raises
        InvalidSignatureError on any verification failure.
        """
