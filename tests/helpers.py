"""Shared test helpers for imgur_uploader tests."""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl

import httpx


def _reply(status: int, data: Any, success: bool) -> httpx.Response:
    return httpx.Response(status, json={"data": data, "success": success, "status": status})


def _error(status: int, message: str, request: httpx.Request) -> httpx.Response:
    return _reply(
        status,
        {"error": message, "request": request.url.path, "method": request.method},
        False,
    )


class FakeImgur:
    """In-memory stand-in for the Imgur API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.forms: list[dict[str, str]] = []
        self.deleted: list[str] = []
        self.fail_deletes: set[str] = set()
        self.fail_uploads: set[str] = set()
        self.fail_albums = False
        self.credits: dict[str, Any] | None = {
            "UserLimit": 12500,
            "UserRemaining": 12497,
            "UserReset": 1700000000,
            "ClientLimit": 12500,
            "ClientRemaining": 12400,
        }
        self._counter = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _next_id(self) -> int:
        self._counter += 1
        return self._counter

    def handle(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        path = request.url.path
        form: dict[str, str] = {}
        if request.headers.get("content-type", "").startswith(
            "application/x-www-form-urlencoded"
        ):
            form = dict(parse_qsl(request.content.decode()))
        if request.method == "POST":
            self.forms.append(form)

        if request.method == "POST" and path == "/3/album":
            if self.fail_albums:
                return _error(429, "Too many albums", request)
            n = self._next_id()
            return _reply(200, {"id": f"alb{n}", "deletehash": f"albdel{n}"}, True)

        if request.method == "POST" and path == "/3/image":
            if form.get("image") in self.fail_uploads:
                return _error(400, "Image format not supported", request)
            n = self._next_id()
            return _reply(
                200,
                {
                    "id": f"img{n}",
                    "deletehash": f"del{n}",
                    "link": f"http://i.imgur.com/img{n}.png",
                },
                True,
            )

        if request.method == "DELETE" and path.startswith(("/3/image/", "/3/album/")):
            kind, _, deletehash = path[len("/3/") :].partition("/")
            if deletehash in self.fail_deletes:
                return _error(403, "Permission denied", request)
            self.deleted.append(f"{kind}:{deletehash}")
            return _reply(200, True, True)

        if request.method == "GET" and path == "/3/credits":
            if self.credits is None:
                return _error(500, "Imgur is over capacity", request)
            return _reply(200, self.credits, True)

        return _error(404, "Not found", request)
