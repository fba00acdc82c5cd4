"""Domain errors raised below the HTTP layer.

Endpoints translate these into status codes; the store and service modules
never import FastAPI.
"""


class CheckinError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class RosterValidationError(CheckinError):
    """The uploaded roster is structurally invalid or of an unsupported type."""


class NotFoundError(CheckinError):
    """An event, participant or image does not exist for the caller."""


class ImageStorageError(CheckinError):
    """The object store could not complete a read or write."""
