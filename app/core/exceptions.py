class NotFoundError(Exception):
    """Raised when an order or menu item id does not resolve to a record."""


class InvalidStatusError(ValueError):
    """Raised for a status value outside the known order statuses."""


class InvalidTransitionError(ValueError):
    """Raised when an order in a final state is moved to a different status."""
