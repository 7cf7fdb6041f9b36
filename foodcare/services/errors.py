"""Error taxonomy for the reminder and confirmation services.

Services raise these; routers translate them into HTTP responses and batch
operations record them per item.
"""


class ReminderError(Exception):
    """Base class for expected reminder/confirmation failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ReminderError):
    """Subscription or confirmation token does not exist."""


class ExpiredError(ReminderError):
    """Confirmation token is past its expiry."""


class AlreadyProcessedError(ReminderError):
    """Confirmation token has already been consumed."""


class ConcurrencyConflictError(AlreadyProcessedError):
    """Another caller consumed the token first."""


class ConfirmationValidationError(ReminderError):
    """Malformed confirmation input (unknown action, missing pause date)."""


class InvalidTransitionError(ConfirmationValidationError):
    """The subscription state machine does not allow the requested change."""


class DeliveryError(ReminderError):
    """The reminder email could not be dispatched."""
