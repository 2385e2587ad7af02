"""Main ImgurClient class for uploading to and deleting from Imgur."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx

from imgur_uploader._internal.transport import ImgurTransport
from imgur_uploader.config import Config
from imgur_uploader.exceptions import AlbumError, ApiError, HistoryError, InvalidKeyError
from imgur_uploader.history import HistoryLog
from imgur_uploader.models import (
    Album,
    Credits,
    DeleteResult,
    Key,
    KeyKind,
    Target,
    TargetKind,
    UploadResult,
)

logger = logging.getLogger(__name__)

ALBUM_URL = "https://imgur.com/a/{id}"


def canonical_link(link: str) -> str:
    """Prefer https for links returned by the API."""
    if link.startswith("http://"):
        return "https://" + link[len("http://") :]
    return link


class ImgurClient:
    """Client for anonymous uploads to Imgur.

    Every successful upload and deletion is recorded in the history log so
    that items can later be removed in bulk.

    Example:
        with ImgurClient.from_config(Config.from_env()) as client:
            result = client.upload("cat.png")
            print(result.link, result.key)
    """

    def __init__(
        self,
        client_id: str,
        *,
        history: HistoryLog | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            client_id: Imgur application client id
            history: History log to record uploads and deletions in
                (defaults to a disabled log)
            transport: Optional httpx transport, mainly for tests
        """
        self._transport = ImgurTransport(client_id, transport=transport)
        self._history = history if history is not None else HistoryLog(None)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> ImgurClient:
        """Create a client wired to the configured history log."""
        return cls(config.client_id, history=HistoryLog(config.history_path), **kwargs)

    def __enter__(self) -> ImgurClient:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit context manager."""
        self.close()

    @property
    def history(self) -> HistoryLog:
        return self._history

    def create_album(self, title: str | None = None) -> Album:
        """Create a hidden album.

        Returns:
            The created Album; its key is the album's delete hash

        Raises:
            AlbumError: If the album cannot be created
        """
        self._history.check()

        data = {"privacy": "hidden"}
        if title:
            data["title"] = title

        try:
            response = self._transport.post("/album", data=data)
        except ApiError as e:
            raise AlbumError(f"Failed to create album: {e}", e.status_code) from e
        if not response.success:
            raise AlbumError(f"Failed to create album: {response.error}", response.status_code)

        album_id = response.data.get("id")
        deletehash = response.data.get("deletehash")
        if not album_id or not deletehash:
            raise AlbumError("Failed to create album: incomplete response from Imgur")

        try:
            key = Key.parse(f"{KeyKind.ALBUM.value}:{deletehash}")
        except InvalidKeyError as e:
            raise AlbumError(f"Failed to create album: {e}") from e

        album = Album(key=key, id=str(album_id), link=ALBUM_URL.format(id=album_id))
        self._record_upload(album.key, album.link)
        logger.info(f"Created album {album.link}")
        return album

    def _record_upload(self, key: Key, link: str) -> None:
        try:
            self._history.append_upload(key, link)
        except HistoryError as e:
            raise HistoryError(
                f"Uploaded {link} (delete key: {key}) but could not record it: {e}"
            ) from e

    def _build_payload(
        self, target: Target
    ) -> tuple[dict[str, str], dict[str, Any] | None]:
        if target.kind is TargetKind.URL:
            return {"image": target.value, "type": "url"}, None
        if target.kind is TargetKind.BASE64:
            return {"image": target.value, "type": "base64"}, None
        path = Path(target.value)
        return {"type": "file"}, {"image": (path.name, path.read_bytes())}

    def upload(
        self,
        target: Target | str,
        *,
        album: Album | None = None,
        title: str | None = None,
        description: str | None = None,
    ) -> UploadResult:
        """Upload an image from a local file, a URL or a base64 data URI.

        Args:
            target: What to upload (a Target, or text to classify)
            album: Album to add the image to
            title: Optional image title
            description: Optional image description

        Returns:
            UploadResult with the delete key and link on success, or the
            error message on failure
        """
        if isinstance(target, str):
            target = Target.classify(target)

        if target.kind is TargetKind.FILE and not Path(target.value).is_file():
            return UploadResult(
                success=False,
                target=target,
                error=f"File not found: {target.value}",
            )

        try:
            data, files = self._build_payload(target)
        except OSError as e:
            return UploadResult(success=False, target=target, error=f"Cannot read file: {e}")

        if album is not None:
            # Anonymous albums are addressed by their delete hash
            data["album"] = album.key.hash
        if title:
            data["title"] = title
        if description:
            data["description"] = description

        self._history.check()

        try:
            response = self._transport.post("/image", data=data, files=files)
        except ApiError as e:
            error_msg = f"Upload failed: {e}"
            logger.warning(error_msg)
            return UploadResult(success=False, target=target, error=error_msg)

        if not response.success:
            error_msg = f"Upload failed: {response.error}"
            logger.warning(error_msg)
            return UploadResult(success=False, target=target, error=error_msg)

        deletehash = response.data.get("deletehash")
        link = response.data.get("link")
        if not deletehash or not link:
            return UploadResult(
                success=False,
                target=target,
                error="Upload failed: incomplete response from Imgur",
            )

        try:
            key = Key.parse(f"{KeyKind.IMAGE.value}:{deletehash}")
        except InvalidKeyError as e:
            return UploadResult(success=False, target=target, error=f"Upload failed: {e}")

        link = canonical_link(link)
        self._record_upload(key, link)
        logger.info(f"Uploaded {target.label} to {link}")
        return UploadResult(success=True, target=target, key=key, link=link)

    def upload_many(
        self,
        targets: Iterable[Target | str],
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> tuple[Album | None, list[UploadResult]]:
        """Upload several targets, grouping them in an album when more than one.

        Targets are uploaded one at a time in the given order; a failed item
        does not stop the rest.

        Returns:
            (album, results) where album is None for a single target

        Raises:
            AlbumError: If the album for a multi-target upload cannot be created
            HistoryError: If the history log cannot be written
        """
        targets = list(targets)
        # Fail before anything is created remotely
        self._history.check()
        if len(targets) == 1:
            result = self.upload(targets[0], title=title, description=description)
            return None, [result]

        album = self.create_album(title) if targets else None
        results = [
            self.upload(target, album=album, description=description) for target in targets
        ]
        return album, results

    def delete(self, key: Key | str) -> DeleteResult:
        """Delete an image or album by its delete key.

        Args:
            key: A Key or its ``kind:hash`` text

        Returns:
            DeleteResult; invalid key text gives a failed result
        """
        if isinstance(key, str):
            try:
                key = Key.parse(key)
            except InvalidKeyError as e:
                return DeleteResult(success=False, key=key, error=str(e))

        try:
            response = self._transport.delete(f"/{key.kind.value}/{key.hash}")
        except ApiError as e:
            error_msg = f"Delete failed: {e}"
            logger.warning(error_msg)
            return DeleteResult(success=False, key=str(key), error=error_msg)

        if not response.success:
            error_msg = f"Delete failed: {response.error}"
            logger.warning(error_msg)
            return DeleteResult(success=False, key=str(key), error=error_msg)

        self._history.append_deletion(key)
        logger.info(f"Deleted {key}")
        return DeleteResult(success=True, key=str(key))

    def delete_many(self, keys: Iterable[Key | str]) -> list[DeleteResult]:
        """Delete several keys in order, continuing past failures."""
        return [self.delete(key) for key in keys]

    def credits(self) -> Credits:
        """Fetch the rate-limit credits for this client id.

        Raises:
            ApiError: If the request fails
        """
        response = self._transport.get("/credits")
        if not response.success:
            raise ApiError(
                f"Failed to fetch credits: {response.error}", response.status_code
            )
        return Credits(fields=dict(response.data))

    def close(self) -> None:
        """Close the client and clean up resources."""
        self._transport.close()
