class BakeryError(Exception):
    """Base class for errors raised by the order and content services."""


class ValidationError(BakeryError):
    """Bad or missing input. Reported to the caller as 400."""


class NotFoundError(BakeryError):
    """Unknown order id or content key. Reported as 404."""


class StorageError(BakeryError):
    """The underlying store failed. Reported as a generic 500."""


class NotifierError(BakeryError):
    """Notification delivery failed. Logged only, never surfaced."""
