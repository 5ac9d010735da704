"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass carries a stable ``code`` that a transport boundary can map
to its own status codes.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    code = "VALIDATION_FAILED"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "NOT_FOUND"


class InsufficientStockError(DomainException):
    """Requested consumption exceeds the quantity on hand."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(need {requested}, have {available} available)"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class DuplicateKeyError(DomainException):
    """A unique key (SKU, order number) is already taken."""

    code = "DUPLICATE_KEY"


class InvalidStateTransitionError(DomainException):
    """An order status change is not allowed from the current status."""

    code = "INVALID_STATE_TRANSITION"


class AlreadyCancelledError(InvalidStateTransitionError):

    code = "ALREADY_CANCELLED"


class CannotCancelDeliveredError(InvalidStateTransitionError):

    code = "CANNOT_CANCEL_DELIVERED"


class UnauthenticatedError(DomainException):
    """No acting user could be resolved for the request."""

    code = "UNAUTHENTICATED"
