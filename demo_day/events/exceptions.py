"""Errors raised by the booking store layer."""


class StoreError(Exception):
    """A read or write against the booking store failed.

    Wraps the underlying database error. Callers surface it to the attendee as a
    generic failure; nothing retries automatically.
    """

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Store operation failed: {operation}")
