"""Data models for the imgur_uploader library."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from imgur_uploader.exceptions import InvalidKeyError

KEY_PATTERN = re.compile(r"^(image|album):([A-Za-z0-9]+)$")
DATA_URI_PATTERN = re.compile(r"^data:[^;,]*(?:;[^;,]*)*;base64,(?P<payload>.*)$", re.DOTALL)

# Epoch seconds; rendered as a timestamp rather than a number.
CREDITS_RESET_FIELD = "UserReset"


class KeyKind(str, Enum):
    """Kind of remote item a delete key refers to."""

    IMAGE = "image"
    ALBUM = "album"


class KeyState(Enum):
    """Per-key state while replaying the history log.

    A key starts absent, becomes UPLOADED on its first upload record and
    DELETED on any deletion record. DELETED is terminal.
    """

    UPLOADED = "uploaded"
    DELETED = "deleted"


@dataclass(frozen=True)
class Key:
    """Secret delete key of an uploaded image or album."""

    kind: KeyKind
    hash: str

    @classmethod
    def parse(cls, text: str) -> Key:
        """Parse ``image:HASH`` or ``album:HASH``.

        Raises:
            InvalidKeyError: If the text is not a well-formed key
        """
        match = KEY_PATTERN.match(text.strip())
        if not match:
            raise InvalidKeyError(f"Invalid key: {text!r} (expected image:HASH or album:HASH)")
        return cls(KeyKind(match.group(1)), match.group(2))

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.hash}"


class TargetKind(Enum):
    FILE = "file"
    URL = "url"
    BASE64 = "base64"


@dataclass(frozen=True)
class Target:
    """Something to upload: a local path, a remote URL or a base64 data URI."""

    kind: TargetKind
    value: str

    @classmethod
    def classify(cls, text: str) -> Target:
        if text.startswith(("http://", "https://")):
            return cls(TargetKind.URL, text)
        match = DATA_URI_PATTERN.match(text)
        if match:
            return cls(TargetKind.BASE64, match.group("payload"))
        return cls(TargetKind.FILE, text)

    @property
    def label(self) -> str:
        """Short human-readable name used in messages."""
        if self.kind is TargetKind.BASE64:
            return "<base64 data>"
        return self.value


@dataclass(frozen=True)
class Album:
    """A created album."""

    key: Key
    id: str
    link: str


@dataclass(frozen=True)
class UploadResult:
    """Result of an upload operation."""

    success: bool
    target: Target
    key: Key | None = None
    link: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class DeleteResult:
    """Result of a delete operation."""

    success: bool
    key: str
    error: str | None = None


@dataclass(frozen=True)
class Credits:
    """Rate-limit credits reported by the API, in response order."""

    fields: dict[str, int]

    @property
    def reset_at(self) -> datetime | None:
        """When the user credits reset, if reported."""
        value = self.fields.get(CREDITS_RESET_FIELD)
        if value is None:
            return None
        return datetime.fromtimestamp(value, tz=timezone.utc)
