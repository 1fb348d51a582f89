class ValidationFailed(ValueError):
    """Raised when a booking request fails field-level validation."""

    def __init__(self, errors: list[dict[str, str]]) -> None:
        super().__init__("Booking request failed validation")
        self.errors = errors


class ExternalServiceDegraded(RuntimeError):
    """Raised by calendar/email adapters; always recovered by the caller."""
    pass


class CalendarUnavailableError(ExternalServiceDegraded):
    """Raised when the calendar provider fails (network, auth, bad response)."""
    pass


class EmailDeliveryError(ExternalServiceDegraded):
    """Raised when the email provider refuses or fails to send a message."""
    pass


class PersistenceError(RuntimeError):
    """Raised when the booking store cannot write a record."""
    pass


class SlotTakenError(PersistenceError):
    """Raised when another booking already holds the same date and start time."""
    pass
