"""Error taxonomy for the multipart encoder.

Sink and source I/O failures are never wrapped: the caller receives the
original ``OSError`` (or whatever the sink raised).
"""


class FormDataError(Exception):
    """Base exception for encoder misuse."""


class FormFinishedError(FormDataError):
    """Raised when an encoder is used after ``finish()``."""


class InvalidPartError(FormDataError, ValueError):
    """Raised when a header value would break the part framing."""


class BoundaryError(FormDataError, ValueError):
    """Raised when a boundary cannot be generated or is not RFC 2046 compliant."""
