"""
Data models for the request client.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

import httpx


class RecordStatus(str, Enum):
    """Outcome of a single test invocation."""
    PASS = "PASS"
    FAIL = "FAIL"


@dataclass(frozen=True)
class TestRecord:
    """Outcome of one test invocation, in invocation order."""
    __test__ = False  # not a pytest test class

    description: str
    status: RecordStatus
    duration_ms: float | None = None


@dataclass
class OutgoingRequest:
    """Mutable request options handed to request interceptors."""
    method: str
    url: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: bytes | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    def to_httpx(self) -> httpx.Request:
        return httpx.Request(
            self.method,
            self.url,
            headers=self.headers,
            content=self.content,
            extensions=self.extensions,
        )


@dataclass(frozen=True)
class Decoded:
    """Response body that parsed as JSON."""
    value: Any


@dataclass(frozen=True)
class Raw:
    """Response body that did not parse as JSON."""
    text: str


Body = Decoded | Raw


def decode_body(text: str) -> Body:
    """Best-effort JSON decode of a response body."""
    try:
        return Decoded(json.loads(text))
    except ValueError:
        return Raw(text)


@dataclass(frozen=True)
class Response:
    """Status and decoded body of a completed request."""
    status: int
    body: Body

    @property
    def data(self) -> Any:
        if isinstance(self.body, Decoded):
            return self.body.value
        return self.body.text


@dataclass(frozen=True)
class Cancelled:
    """Outcome of a request aborted by ``cancel_request()``."""
    generation: int
    description: str


@dataclass
class RequestSpec:
    """One entry of a concurrent batch."""
    method: str
    url: str
    data: Any = None
    description: str | None = None
    options: dict[str, Any] | None = None
    schema: Any = None


@dataclass
class RunSummary:
    """Snapshot of the accumulated results printed by ``run_tests()``."""
    total_duration_ms: float
    passed: int
    failed: int
    records: list[TestRecord] = field(default_factory=list)


RequestInterceptor = Callable[[OutgoingRequest], Awaitable[None] | None]
ResponseInterceptor = Callable[[httpx.Response, Any], Awaitable[None] | None]


@dataclass
class ClientState:
    """Mutable state owned by one client instance."""
    base_url: str = ""
    cookies: dict[str, str] = field(default_factory=dict)
    request_interceptors: list[RequestInterceptor] = field(default_factory=list)
    response_interceptors: list[ResponseInterceptor] = field(default_factory=list)
    results: list[TestRecord] = field(default_factory=list)
    passed_count: int = 0
    failed_count: int = 0
    total_duration_ms: float = 0.0

    def record_pass(self, description: str, duration_ms: float) -> TestRecord:
        record = TestRecord(description, RecordStatus.PASS, duration_ms)
        self.results.append(record)
        self.passed_count += 1
        self.total_duration_ms += duration_ms
        return record

    def record_fail(self, description: str) -> TestRecord:
        record = TestRecord(description, RecordStatus.FAIL)
        self.results.append(record)
        self.failed_count += 1
        return record
