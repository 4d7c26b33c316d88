"""Exceptions raised by query compilation, response binding and ID decoding."""


class ShapeError(ValueError):
    """Raised when a shape cannot be compiled into a query."""


class DecodeError(ValueError):
    """Raised when a raw response value cannot be decoded."""


class GlobalIDError(DecodeError):
    """Raised for malformed opaque global ID tokens."""

    def __init__(self, message: str, token: object = None):
        self.message = message
        self.token = token
        super().__init__(message)


class ResponseDecodeError(DecodeError):
    """Raised when a response payload cannot be bound onto a shape.

    Attributes:
        path: Dotted GraphQL path of the field that failed, empty for the
            response envelope itself.
    """

    def __init__(self, message: str, path: str = ""):
        self.message = message
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
