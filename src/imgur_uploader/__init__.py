"""Imgur Uploader - Upload images to Imgur and keep track of what to delete.

Example usage:
    from imgur_uploader import Config, ImgurClient

    config = Config.from_env()
    with ImgurClient.from_config(config) as client:
        result = client.upload("screenshot.png")
        print(result.link, result.key)

        # Later, remove everything still recorded as live
        client.delete_many(client.history.live_keys())
"""

import logging

from imgur_uploader.client import ImgurClient
from imgur_uploader.config import Config
from imgur_uploader.exceptions import (
    AlbumError,
    ApiError,
    ConfigError,
    HistoryError,
    ImgurError,
    InvalidKeyError,
)
from imgur_uploader.history import HistoryLog, reconcile
from imgur_uploader.models import (
    Album,
    Credits,
    DeleteResult,
    Key,
    KeyKind,
    KeyState,
    Target,
    TargetKind,
    UploadResult,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Main client
    "ImgurClient",
    "Config",
    # History
    "HistoryLog",
    "reconcile",
    # Models
    "Album",
    "Credits",
    "DeleteResult",
    "Key",
    "KeyKind",
    "KeyState",
    "Target",
    "TargetKind",
    "UploadResult",
    # Exceptions
    "ImgurError",
    "ConfigError",
    "ApiError",
    "AlbumError",
    "HistoryError",
    "InvalidKeyError",
]
