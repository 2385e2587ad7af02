"""Append-only upload history and reconciliation of live delete keys.

Each line of the log is one of::

    image:HASH https://i.imgur.com/abc.png    upload record
    album:HASH deleted                        deletion record

Any other line is ignored when the log is replayed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from imgur_uploader.exceptions import HistoryError
from imgur_uploader.models import Key, KeyKind, KeyState

logger = logging.getLogger(__name__)

DELETED_MARKER = "deleted"

_RECORD_PATTERN = re.compile(
    r"^(?P<kind>image|album):(?P<hash>[A-Za-z0-9]+)\s+(?P<payload>\S+)(?:\s.*)?$"
)
_URL_PATTERN = re.compile(r"^https?://\S+$")


def parse_record(line: str) -> tuple[Key, KeyState] | None:
    """Parse one log line.

    Returns:
        (key, DELETED) for a deletion record, (key, UPLOADED) for an upload
        record, or None for anything else
    """
    match = _RECORD_PATTERN.match(line.strip())
    if not match:
        return None
    key = Key(KeyKind(match.group("kind")), match.group("hash"))
    payload = match.group("payload")
    if payload == DELETED_MARKER:
        return key, KeyState.DELETED
    if _URL_PATTERN.match(payload):
        return key, KeyState.UPLOADED
    return None


def reconcile(lines: Iterable[str]) -> list[Key]:
    """Compute the keys that were uploaded and never deleted.

    A single forward pass over the log. Keys are returned in the order they
    were first seen. A deletion record removes a key wherever it appears in
    the log, and a deleted key is never revived by a later upload record.
    Deletions without a matching upload and unrecognised lines are ignored.
    """
    states: dict[Key, KeyState] = {}
    for line in lines:
        record = parse_record(line)
        if record is None:
            continue
        key, state = record
        if state is KeyState.DELETED:
            states[key] = KeyState.DELETED
        elif key not in states:
            states[key] = KeyState.UPLOADED
    return [key for key, state in states.items() if state is KeyState.UPLOADED]


class HistoryLog:
    """Line-oriented, append-only log of uploads and deletions.

    A ``None`` path disables history: appends are dropped and reads are empty.
    """

    def __init__(self, path: Path | str | None) -> None:
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def enabled(self) -> bool:
        return self._path is not None

    def exists(self) -> bool:
        """Check whether the log file is present."""
        return self._checked_path() is not None

    def check(self) -> None:
        """Make sure records can be appended.

        Raises:
            HistoryError: If the path exists but is not a regular file
        """
        self._checked_path()

    def _checked_path(self) -> Path | None:
        """Return the path if it exists as a regular file, None if missing."""
        if self._path is None or not self._path.exists():
            return None
        if not self._path.is_file():
            raise HistoryError(f"History log is not a regular file: {self._path}")
        return self._path

    def _append(self, line: str) -> None:
        if self._path is None:
            return
        self._checked_path()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            raise HistoryError(f"Failed to write history log {self._path}: {e}") from e

    def append_upload(self, key: Key, link: str) -> None:
        """Record a successful upload."""
        self._append(f"{key} {link}")

    def append_deletion(self, key: Key) -> None:
        """Record a confirmed deletion."""
        self._append(f"{key} {DELETED_MARKER}")

    def lines(self) -> Iterator[str]:
        """Yield log lines oldest first, without trailing newlines."""
        path = self._checked_path()
        if path is None:
            return
        try:
            with path.open(encoding="utf-8") as f:
                for line in f:
                    yield line.rstrip("\n")
        except (OSError, UnicodeDecodeError) as e:
            raise HistoryError(f"Failed to read history log {path}: {e}") from e

    def live_keys(self) -> list[Key]:
        """Keys uploaded and not yet deleted according to the log."""
        return reconcile(self.lines())

    def remove(self) -> None:
        """Delete the log file entirely."""
        path = self._checked_path()
        if path is None:
            return
        try:
            path.unlink()
        except OSError as e:
            raise HistoryError(f"Failed to remove history log {path}: {e}") from e
        logger.info(f"Removed history log {path}")
