"""Exception types raised by the media sync pipeline."""

from typing import Any, Dict, List, Optional

__all__ = [
    "MediaSyncError",
    "ConfigurationError",
    "SourceFormatError",
    "RemoteCallError",
    "CatalogValidationError",
]


class MediaSyncError(Exception):
    """Base class for every fatal sync error."""
    pass


class ConfigurationError(MediaSyncError):
    """Raised when a required setting is missing or malformed."""
    pass


class SourceFormatError(MediaSyncError):
    """Raised when the asset source response has an unexpected shape."""
    pass


class RemoteCallError(MediaSyncError):
    """Raised when a remote call fails for good.

    Attributes:
        status: HTTP status code, or None for transport/application errors
        payload: Response body text or decoded error list
    """

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.payload = payload


class CatalogValidationError(MediaSyncError):
    """Raised when the catalog rejects a media batch with user errors."""

    def __init__(self, message: str, user_errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.user_errors = user_errors or []
