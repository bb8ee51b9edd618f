"""Domain errors raised by the catalog services.

Routers never build HTTP errors for these themselves: ``main.py`` registers a
single handler that maps each kind to its status code.
"""
from fastapi import status


class CatalogError(Exception):
    """Base class for recoverable catalog failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(CatalogError):
    """A referenced entity id or name does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class Conflict(CatalogError):
    """A uniqueness rule would be violated."""

    status_code = status.HTTP_409_CONFLICT


class InvalidInput(CatalogError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
