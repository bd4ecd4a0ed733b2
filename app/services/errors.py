class OrderServiceError(Exception):
    """Base class for order service errors."""


class NotFoundError(OrderServiceError):
    """A referenced entity does not exist. Maps to a client error."""


class InternalError(OrderServiceError):
    """The store failed mid-transaction. The transaction has been rolled back."""
