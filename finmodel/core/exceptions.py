from typing import Optional


class FinModelError(Exception):
    """Base class for errors raised by the FinModel backend."""


class ValidationFailed(FinModelError):
    """Inbound request data rejected before reaching storage or scoring."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_response(self) -> dict:
        body = {"message": self.message}
        if self.field is not None:
            body["field"] = self.field
        return body


class ConnectionClosed(FinModelError):
    """Write attempted on an event stream connection that is already closed."""


class StorageFailed(FinModelError):
    """Storage call failed; carries the client-safe message only."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
