"""Pytest fixtures for imgur_uploader tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from helpers import FakeImgur

from imgur_uploader import Config, HistoryLog, ImgurClient


@pytest.fixture
def fake_imgur() -> FakeImgur:
    """Create an in-memory Imgur API."""
    return FakeImgur()


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    """Location of a (not yet created) history log."""
    return tmp_path / "imgur_history"


@pytest.fixture
def history(history_path: Path) -> HistoryLog:
    return HistoryLog(history_path)


@pytest.fixture
def config(history_path: Path) -> Config:
    """Config pointing at the temporary history log."""
    return Config(client_id="test_client_id", history_path=history_path)


@pytest.fixture
def client(fake_imgur: FakeImgur, history: HistoryLog) -> Iterator[ImgurClient]:
    """ImgurClient talking to the fake API and recording to the temp log."""
    with ImgurClient(
        "test_client_id", history=history, transport=fake_imgur.transport
    ) as client:
        yield client


@pytest.fixture
def temp_png(tmp_path: Path) -> Path:
    """Create a temporary PNG file for testing."""
    png_path = tmp_path / "test.png"
    png_path.write_bytes(b"\x89PNG\r\n\x1a\n test content")
    return png_path


@pytest.fixture
def patch_get_client(fake_imgur: FakeImgur) -> Iterator[FakeImgur]:
    """Make the CLI build clients that talk to the fake API."""

    def _make(config: Config) -> ImgurClient:
        return ImgurClient.from_config(config, transport=fake_imgur.transport)

    with patch("imgur_uploader.cli.get_client", side_effect=_make):
        yield fake_imgur
