"""Exceptions raised by the CabinetBox import pipeline."""


class ImportFileError(ValueError):
    """Raised when an uploaded file cannot be accepted or parsed.

    Covers unsupported extensions, oversized uploads and structural parse
    failures (malformed quoting, undecodable bytes, rows wider than the header).
    """

    pass


class ImportPreconditionError(ValueError):
    """Raised when an import run is requested in an invalid state."""

    pass


class ImportInProgressError(RuntimeError):
    """Raised when the session is touched while an import run is active."""

    pass


class ProductServiceError(Exception):
    """Raised when the remote product service rejects or fails a request."""

    pass
