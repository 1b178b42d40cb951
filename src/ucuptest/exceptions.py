"""
Exceptions raised by the request client.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class UcuptestError(Exception):
    """Base class for client errors."""


class TransportError(UcuptestError):
    """Network or connection failure while sending a request."""

    def __init__(self, method: str, url: str, message: str):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {message}")


class SchemaValidationError(UcuptestError):
    """Response body violated its schema. Holds every violation found."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        count = len(self.errors)
        noun = "violation" if count == 1 else "violations"
        super().__init__(f"{count} schema {noun}: " + "; ".join(self.errors))
