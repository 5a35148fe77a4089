"""
Error taxonomy shared by services and the HTTP layer.

Every failure visible to a client maps to exactly one of these kinds.
"""
from fastapi import status


class LibraError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(LibraError):
    """Bad, missing or revoked credentials, or an ownership violation."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class NotFound(LibraError):
    """A resource whose absence is not sensitive."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class BadRequest(LibraError):
    """Malformed body, unknown referenced id, or cross-resource id mismatch."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class StorageError(LibraError):
    """Persistence or blob store failure."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Storage failure"
