"""
Shared exceptions for the paper metadata service.

Each class maps to one HTTP status in ``main.py``; services raise them and
the exception handlers turn them into ``{"error": ...}`` envelopes.
"""


class PaperServiceError(Exception):
    """Base class for all service errors."""

    pass


class InputError(PaperServiceError):
    """Raised when the request payload is missing or invalid."""

    pass


class UpstreamError(PaperServiceError):
    """Raised when an external service (OpenAI, Google Drive) fails."""

    pass


class ParseError(PaperServiceError):
    """Raised when the model reply is not a JSON object."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


class PersistenceError(PaperServiceError):
    """Raised when a database operation fails."""

    pass
