import asyncio
import io

import httpx
import pytest
from rich.console import Console

from ucuptest import RequestClient
from ucuptest.config import ClientConfig

BASE_URL = "http://api.test"

TODO = {"userId": 1, "id": 1, "title": "x", "completed": False}


class FixtureServer:
    """In-process API behind httpx.MockTransport. Records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/todos/1":
            return httpx.Response(200, json=TODO)
        if path == "/login":
            return httpx.Response(
                200,
                json={"ok": True},
                headers=[
                    ("Set-Cookie", "sid=abc; Path=/"),
                    ("Set-Cookie", "theme=dark; HttpOnly; Expires=Wed, 21 Oct 2026 07:28:00 GMT"),
                ],
            )
        if path == "/text":
            return httpx.Response(200, text="plain body")
        if path == "/down":
            raise httpx.ConnectError("connection refused", request=request)
        if path == "/slow":
            self.entered.set()
            await self.release.wait()
            return httpx.Response(200, json={"slow": True})
        if path.startswith("/delay/"):
            await asyncio.sleep(float(path.rsplit("/", 1)[1]))
            return httpx.Response(200, json={"path": path})
        if path == "/upload":
            return httpx.Response(201, json={
                "received": len(request.content),
                "type": request.headers["content-type"],
            })
        return httpx.Response(200, json={"method": request.method, "path": path})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def server():
    return FixtureServer()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def client(server, output, tmp_path):
    return RequestClient(
        BASE_URL,
        config=ClientConfig(),
        transport=httpx.MockTransport(server),
        console=Console(file=output, width=200, color_system=None),
        download_dir=tmp_path,
    )
