"""Custom exceptions for the application."""


class PairingError(Exception):
    """Base exception for pairing-related errors."""
    pass


class ProtocolError(PairingError):
    """Raised for malformed input or missing configuration. Never retried."""
    pass


class UnhandledEventType(ProtocolError):
    """Raised when a client event has no registered handler."""

    def __init__(self, event_type: str):
        super().__init__(f"Unhandled event: {event_type}")
        self.event_type = event_type


class InvalidDirection(ProtocolError):
    """Raised when a swipe carries an unknown direction."""

    def __init__(self, direction):
        super().__init__(f"Invalid direction: {direction}")
        self.direction = direction


class InvalidPatch(ProtocolError):
    """Raised when an event handler tries to update a read-only field."""
    pass


class ClientError(PairingError):
    """Exception raised for malformed client messages."""
    pass
