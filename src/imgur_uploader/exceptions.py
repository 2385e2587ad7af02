"""Exception hierarchy for the imgur_uploader library."""

from __future__ import annotations


class ImgurError(Exception):
    """Base exception for all imgur_uploader errors."""

    pass


class ConfigError(ImgurError):
    """Raised when the configuration is unusable (e.g. missing client id)."""

    pass


class ApiError(ImgurError):
    """Raised when a request to the Imgur API fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AlbumError(ApiError):
    """Raised when an album cannot be created."""

    pass


class HistoryError(ImgurError):
    """Raised when the history log cannot be read, written or removed."""

    pass


class InvalidKeyError(ImgurError, ValueError):
    """Raised when a string is not a valid ``kind:hash`` delete key."""

    pass
