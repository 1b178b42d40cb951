"""
ucuptest - HTTP API testing helper

An asyncio request client for exercising HTTP APIs: verb helpers,
optional response schema validation, pass/fail bookkeeping, interceptors,
cookie propagation, cancellation and concurrent dispatch.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from ucuptest.client import RequestClient
from ucuptest.exceptions import (
    SchemaValidationError,
    TransportError,
    UcuptestError,
)
from ucuptest.models import (
    Cancelled,
    Decoded,
    OutgoingRequest,
    Raw,
    RecordStatus,
    RequestSpec,
    Response,
    RunSummary,
    TestRecord,
)

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"

__all__ = [
    "RequestClient",
    "Cancelled",
    "Decoded",
    "OutgoingRequest",
    "Raw",
    "RecordStatus",
    "RequestSpec",
    "Response",
    "RunSummary",
    "TestRecord",
    "SchemaValidationError",
    "TransportError",
    "UcuptestError",
]
