"""Domain exceptions for portfolio operations.

Each exception carries the HTTP status the API layer maps it to, so the
handlers in ``main`` stay a single lookup.
"""


class PortfolioShareError(Exception):
    """Base exception for portfolio operations."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortfolioShareError):
    """A required field is missing or malformed."""

    status_code = 400


class NotFoundError(PortfolioShareError):
    """Portfolio is absent or has expired."""

    status_code = 404


class ForbiddenError(PortfolioShareError):
    """Edit secret does not match the stored portfolio."""

    status_code = 403


class UpstreamError(PortfolioShareError):
    """An external dependency failed on a critical path."""

    status_code = 502


class StorageError(UpstreamError):
    """The portfolio store could not complete a read or write."""

    status_code = 500
