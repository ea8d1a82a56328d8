
class StoreError(RuntimeError):
    """Raised when the schedule service rejects a call or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StoreNetworkError(StoreError):
    """Raised when the schedule service cannot be reached (connection errors, timeouts)."""
    pass


class StoreValidationError(StoreError):
    """Raised when the schedule service rejects a request as invalid (400)."""
    pass


class StoreNotFoundError(StoreError):
    """Raised when the addressed client or appointment does not exist (404)."""
    pass


class FormValidationError(ValueError):
    """Raised when a dialog form fails local validation; never reaches the network."""
    pass


class ClientNotFoundError(LookupError):
    """Raised by repositories when an appointment references an unknown client."""
    pass


class AppointmentNotFoundError(LookupError):
    """Raised by repositories when no appointment has the given id."""
    pass
