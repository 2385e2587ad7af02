"""Configuration management for imgur_uploader.

Settings come from the environment (optionally seeded from a ``.env`` file)
and are carried around as an explicit :class:`Config` value.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from imgur_uploader.exceptions import ConfigError

# Public anonymous-upload client id used when APP_ID is not set
DEFAULT_CLIENT_ID = "3e7a4deb7ac67da"
DEFAULT_HISTORY_PATH = Path.home() / ".imgur_history"

# Setting APP_HISTORY to this value turns history logging off
HISTORY_DISABLED = "/dev/null"


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Attributes:
        client_id: Imgur application client id sent with every request
        history_path: Location of the history log, or None when disabled
    """

    client_id: str = DEFAULT_CLIENT_ID
    history_path: Path | None = DEFAULT_HISTORY_PATH

    @property
    def history_enabled(self) -> bool:
        return self.history_path is not None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Build a Config from APP_ID and APP_HISTORY.

        When ``environ`` is omitted a ``.env`` file is loaded (without
        overriding variables already set) and ``os.environ`` is used.

        Raises:
            ConfigError: If APP_ID is set but empty
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        client_id = environ.get("APP_ID", DEFAULT_CLIENT_ID).strip()
        if not client_id:
            raise ConfigError("APP_ID is empty; an Imgur client id is required")

        history = environ.get("APP_HISTORY")
        history_path: Path | None
        if history is None or not history.strip():
            history_path = DEFAULT_HISTORY_PATH
        elif history.strip() == HISTORY_DISABLED:
            history_path = None
        else:
            history_path = Path(history.strip()).expanduser()

        return cls(client_id=client_id, history_path=history_path)
