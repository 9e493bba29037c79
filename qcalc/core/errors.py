"""Exceptions raised by the calculator core."""


class UnsupportedOperationError(ValueError):
    """Raised when an operation tag is not one the calculator supports."""

    def __init__(self, operation: object):
        self.operation = operation
        super().__init__(f"Unsupported operation: {operation!r}")
