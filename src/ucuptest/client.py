"""
Request client for HTTP API tests.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import inspect
import json
import time
import uuid
from pathlib import Path
from typing import Any, Iterable, Mapping
from urllib.parse import urlencode

import httpx
from rich.console import Console

from ucuptest.cancellation import CancellationToken
from ucuptest.config import ClientConfig, get_config
from ucuptest.cookies import build_cookie_header, harvest_cookies
from ucuptest.exceptions import TransportError
from ucuptest.logging_config import get_logger, setup_logging, track_error
from ucuptest.models import (
    Cancelled,
    ClientState,
    OutgoingRequest,
    RequestInterceptor,
    RequestSpec,
    Response,
    ResponseInterceptor,
    RunSummary,
    TestRecord,
    decode_body,
)
from ucuptest.report import print_report
from ucuptest.schema import validate_body

logger = get_logger(__name__)

OCTET_STREAM = "application/octet-stream"


async def _invoke(interceptor: Any, *args: Any) -> None:
    result = interceptor(*args)
    if inspect.isawaitable(result):
        await result


def _has_body(data: Any) -> bool:
    """Whether non-GET ``data`` is sent as a body.

    None, False, 0 and "" are skipped. Empty containers and empty bytes
    are still sent.
    """
    if data is None or data is False:
        return False
    if isinstance(data, (int, float, str)):
        return bool(data)
    return True


class RequestClient:
    """HTTP client that records every request as a pass/fail test.

    State (cookies, interceptors, results) belongs to the instance. All
    methods are meant to run on a single event loop.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        console: Console | None = None,
        download_dir: str | Path | None = None,
    ):
        self.config = config or get_config()
        if self.config.log_level:
            setup_logging(self.config.log_level)
        self.state = ClientState(
            base_url=self.config.base_url if base_url is None else base_url
        )
        self.download_dir = Path(download_dir or self.config.download_dir)
        self.console = console or Console()
        self._transport = transport
        self._token = CancellationToken()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                verify=self.config.verify_ssl,
                follow_redirects=self.config.follow_redirects,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # Configuration

    @property
    def base_url(self) -> str:
        return self.state.base_url

    @property
    def cookies(self) -> dict[str, str]:
        return dict(self.state.cookies)

    @property
    def results(self) -> list[TestRecord]:
        return list(self.state.results)

    @property
    def passed_count(self) -> int:
        return self.state.passed_count

    @property
    def failed_count(self) -> int:
        return self.state.failed_count

    @property
    def total_duration_ms(self) -> float:
        return self.state.total_duration_ms

    @property
    def generation(self) -> int:
        """Generation number of the current cancellation token."""
        return self._token.generation

    def set_base_url(self, base_url: str) -> None:
        self.state.base_url = base_url

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        """Register a callable run against every outgoing request."""
        self.state.request_interceptors.append(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        """Register a callable run with every response and its decoded body."""
        self.state.response_interceptors.append(interceptor)

    def set_cookie(self, name: str, value: str) -> None:
        self.state.cookies[name] = value

    def get_cookie(self, name: str) -> str | None:
        return self.state.cookies.get(name)

    def cancel_request(self) -> None:
        """Abort every request in flight and start a new generation."""
        aborted = self._token
        aborted.cancel()
        self._token = aborted.next()
        logger.debug("Cancelled request generation %d", aborted.generation)

    def handle_global_error(self, error: Exception) -> None:
        """Log an error raised while preparing a request. Never suppresses it."""
        track_error("global_error", f"Global Error: {error}", exception=error)

    # Dispatch

    def _build_request(
        self,
        method: str,
        path: str,
        data: Any,
        options: Mapping[str, Any],
    ) -> OutgoingRequest:
        url = self.state.base_url + path
        content = None

        if method == "GET":
            if data:
                query = urlencode(data, doseq=True)
                if query:
                    separator = "&" if "?" in url else "?"
                    url = url + separator + query
        elif _has_body(data):
            if isinstance(data, (bytes, bytearray)):
                content = bytes(data)
            else:
                content = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

        headers = httpx.Headers({"Content-Type": "application/json"})
        if self.state.cookies:
            headers["Cookie"] = build_cookie_header(self.state.cookies)
        headers.update(options.get("headers") or {})

        if content is not None:
            headers["Content-Length"] = str(len(content))

        return OutgoingRequest(
            method=method,
            url=url,
            headers=headers,
            content=content,
            extensions=dict(options.get("extensions") or {}),
        )

    async def _send(
        self,
        request: httpx.Request,
        token: CancellationToken,
    ) -> httpx.Response | None:
        """Send ``request``, racing it against ``token``.

        Returns None when the token was cancelled before the response
        could be committed.
        """
        client = await self._get_client()
        send_task = asyncio.ensure_future(client.send(request))
        waiter = asyncio.ensure_future(token.wait())

        try:
            await asyncio.wait({send_task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            send_task.cancel()
            waiter.cancel()
            raise
        waiter.cancel()

        if token.cancelled:
            if not send_task.done():
                send_task.cancel()
            await asyncio.gather(send_task, return_exceptions=True)
            return None

        try:
            return send_task.result()
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", request.method, request.url, e)
            raise TransportError(request.method, str(request.url), str(e) or type(e).__name__) from e

    def _cancelled(self, token: CancellationToken, description: str) -> Cancelled:
        logger.info("Request canceled: %s", description)
        return Cancelled(generation=token.generation, description=description)

    async def make_request(
        self,
        method: str,
        url: str,
        data: Any = None,
        description: str | None = None,
        start_time: float | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Response | Cancelled:
        """Send one request and record it as a passing test.

        Args:
            method: HTTP method
            url: Path appended to the base URL
            data: Query parameters for GET, JSON body (or raw bytes) otherwise
            description: Name of the test in the report
            start_time: Epoch seconds the duration is measured from
            options: ``headers`` merged over the defaults and httpx
                ``extensions`` for the request

        Returns:
            Response with status and decoded body, or Cancelled when
            ``cancel_request()`` ran while the request was in flight.
        """
        method = method.upper()
        description = description or f"{method} {url}"
        if start_time is None:
            start_time = time.time()
        token = self._token

        try:
            outgoing = self._build_request(method, url, data, options or {})
            for interceptor in self.state.request_interceptors:
                await _invoke(interceptor, outgoing)
            request = outgoing.to_httpx()
        except Exception as e:
            self.handle_global_error(e)
            raise

        response = await self._send(request, token)
        if response is None:
            return self._cancelled(token, description)

        result = Response(status=response.status_code, body=decode_body(response.text))

        for interceptor in self.state.response_interceptors:
            await _invoke(interceptor, response, result.data)

        if token.cancelled:
            return self._cancelled(token, description)

        elapsed_ms = (time.time() - start_time) * 1000
        self.state.record_pass(description, elapsed_ms)

        for name in harvest_cookies(response, self.state.cookies):
            logger.debug("Stored cookie %s from %s", name, request.url)

        return result

    async def test(
        self,
        method: str,
        url: str,
        data: Any = None,
        schema: Any = None,
        description: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and validate the decoded body against ``schema``.

        A failure of any kind is recorded as FAIL and re-raised. On success
        the decoded body is returned; a cancelled request returns its
        Cancelled outcome and records nothing.
        """
        description = description or f"{method.upper()} {url}"
        try:
            start_time = time.time()
            outcome = await self.make_request(method, url, data, description, start_time, options)
            if isinstance(outcome, Cancelled):
                return outcome

            if schema is not None:
                await validate_body(schema, outcome.data)

            return outcome.data
        except Exception:
            self.state.record_fail(description)
            raise

    async def get(self, url: str, params: Any = None, schema: Any = None,
                  description: str | None = None, headers: dict[str, str] | None = None) -> Any:
        return await self.test("GET", url, params, schema, description, {"headers": headers})

    async def post(self, url: str, data: Any = None, schema: Any = None,
                   description: str | None = None, headers: dict[str, str] | None = None) -> Any:
        return await self.test("POST", url, {} if data is None else data, schema, description, {"headers": headers})

    async def put(self, url: str, data: Any = None, schema: Any = None,
                  description: str | None = None, headers: dict[str, str] | None = None) -> Any:
        return await self.test("PUT", url, {} if data is None else data, schema, description, {"headers": headers})

    async def delete(self, url: str, params: Any = None, schema: Any = None,
                     description: str | None = None, headers: dict[str, str] | None = None) -> Any:
        return await self.test("DELETE", url, {} if params is None else params, schema, description, {"headers": headers})

    async def login(self, url: str, payload: Any, schema: Any = None,
                    description: str | None = None, headers: dict[str, str] | None = None) -> Any:
        return await self.test("POST", url, payload, schema, description, {"headers": headers})

    async def inspect_response(
        self,
        method: str,
        url: str,
        data: Any = None,
        description: str | None = None,
        start_time: float | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Response | Cancelled:
        """Dispatch without schema validation and return status plus body."""
        return await self.make_request(method, url, data, description, start_time, options)

    # Files

    async def upload_file(
        self,
        url: str,
        file_path: str | Path,
        description: str | None = None,
    ) -> Response | Cancelled:
        """POST the raw bytes of ``file_path`` as application/octet-stream."""
        try:
            start_time = time.time()
            content = await asyncio.to_thread(Path(file_path).read_bytes)
            return await self.make_request(
                "POST", url, content, description, start_time,
                {"headers": {"Content-Type": OCTET_STREAM}},
            )
        except Exception as e:
            logger.error("Error uploading file: %s", e)
            raise

    async def download_file(self, url: str, description: str | None = None) -> str | Cancelled:
        """GET ``url`` and save the body as JSON text. Returns the filename."""
        try:
            start_time = time.time()
            outcome = await self.make_request("GET", url, None, description, start_time)
            if isinstance(outcome, Cancelled):
                return outcome

            path = self.download_dir / f"downloaded_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}.txt"
            await asyncio.to_thread(self.download_dir.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_text, json.dumps(outcome.data), encoding="utf-8")
            return str(path)
        except Exception as e:
            logger.error("Error downloading file: %s", e)
            raise

    # Batches

    async def _dispatch(self, spec: RequestSpec, start_time: float) -> Response | Cancelled:
        outcome = await self.make_request(
            spec.method, spec.url, spec.data, spec.description, start_time, spec.options,
        )
        if spec.schema is not None and isinstance(outcome, Response):
            await validate_body(spec.schema, outcome.data)
        return outcome

    async def send_concurrent_requests(
        self,
        requests: Iterable[RequestSpec | Mapping[str, Any]],
    ) -> list[Response | Cancelled]:
        """Run all requests at once; results follow input order.

        The first failure fails the whole batch.
        """
        specs = [r if isinstance(r, RequestSpec) else RequestSpec(**r) for r in requests]
        try:
            start_time = time.time()
            results = await asyncio.gather(*(self._dispatch(spec, start_time) for spec in specs))
            return list(results)
        except Exception as e:
            logger.error("Error sending concurrent requests: %s", e)
            raise

    # Reporting

    def run_tests(self) -> RunSummary:
        """Print every recorded test and the totals. Does not reset state."""
        return print_report(self.state, self.console)
