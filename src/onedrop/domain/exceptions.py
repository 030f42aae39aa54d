"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the web and CLI layers can catch them uniformly and display
user-friendly messages.  Each class carries a short machine-readable
``code`` used in structured error responses.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "domain_error"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    code = "validation_error"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "not_found"


# --- Checkout -----------------------------------------------------------------


class UnknownItemError(EntityNotFoundError):
    """The requested item is not in the catalog."""

    code = "unknown_item"


class SizeUnavailableError(ValidationError):
    """The item has no fulfillment variant for the requested size."""

    code = "size_unavailable"


class AlreadySoldError(DomainException):
    """The item has already been sold.

    Raised by the advisory check at checkout time and by the inventory
    aggregate when a different payment session tries to claim a sold item.
    """

    code = "already_sold"


class UpstreamProviderError(DomainException):
    """The payment provider failed while opening a checkout session."""

    code = "upstream_provider_error"


# --- Payment events -----------------------------------------------------------


class InvalidSignatureError(DomainException):
    """A webhook delivery could not be authenticated."""

    code = "invalid_signature"


class IncompleteEventError(ValidationError):
    """An authenticated event lacks data required to complete the sale."""

    code = "incomplete_event"


# --- Fulfillment --------------------------------------------------------------


class FulfillmentError(DomainException):
    """Base class for fulfillment-provider failures.

    These never undo a sale; the caller records them for a later retry.
    """

    code = "fulfillment_error"


class FulfillmentUnavailableError(FulfillmentError):
    """Fulfillment is not configured (e.g. missing credentials)."""

    code = "fulfillment_unavailable"


class FulfillmentRejectedError(FulfillmentError):
    """The provider refused the order (validation error, bad address...)."""

    code = "fulfillment_rejected"


class FulfillmentTransportError(FulfillmentError):
    """Network failure, timeout or 5xx from the provider."""

    code = "fulfillment_transport_error"
