"""
Response body validation.

A schema is treated as an opaque capability. Supported forms:

- a JSON Schema document (``dict``), checked with ``jsonschema``
- a ``jsonschema`` validator instance (anything exposing ``iter_errors``)
- any object with ``validate_async(body)`` or ``validate(body)`` that raises
  on an invalid body and returns (usually the validated value) otherwise;
  a returned result carrying ``errors`` or ``error`` also counts as invalid

Validation never stops at the first problem: every violation is collected
and raised together as one SchemaValidationError.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import inspect
from typing import Any

from jsonschema import ValidationError
from jsonschema.validators import validator_for

from ucuptest.exceptions import SchemaValidationError
from ucuptest.logging_config import get_logger

logger = get_logger(__name__)


def format_error(error: ValidationError) -> str:
    """Render a jsonschema error as ``$.path[0]: message``."""
    path = "$"
    for part in error.absolute_path:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return f"{path}: {error.message}"


def collect_jsonschema_errors(validator: Any, body: Any) -> list[str]:
    """Collect every error reported by a jsonschema validator."""
    errors = sorted(validator.iter_errors(body), key=lambda e: [str(p) for p in e.absolute_path])
    return [format_error(e) for e in errors]


def build_validator(schema: dict[str, Any]) -> Any:
    """Build a jsonschema validator matching the document's ``$schema``."""
    cls = validator_for(schema)
    cls.check_schema(schema)
    return cls(schema)


async def collect_errors(schema: Any, body: Any) -> list[str]:
    """Run the schema against ``body`` and return all violation messages.

    ``validate``/``validate_async`` capabilities signal failure by raising;
    the exception is re-raised as SchemaValidationError. Their return value
    only counts as a failure when it carries an ``errors`` list or a set
    ``error`` attribute.
    """
    if isinstance(schema, dict):
        return collect_jsonschema_errors(build_validator(schema), body)

    if hasattr(schema, "iter_errors"):
        return collect_jsonschema_errors(schema, body)

    if hasattr(schema, "validate_async"):
        validate = schema.validate_async
    elif hasattr(schema, "validate"):
        validate = schema.validate
    else:
        raise TypeError(f"Unsupported schema type: {type(schema).__name__}")

    try:
        result = validate(body)
        if inspect.isawaitable(result):
            result = await result
    except SchemaValidationError:
        raise
    except Exception as e:
        raise SchemaValidationError(_exception_messages(e)) from e

    return _result_messages(result)


def _message(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("message", "msg"):
            if key in item:
                return str(item[key])
    return str(item)


def _listed(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [_message(item) for item in value]
    return []


def _exception_messages(error: Exception) -> list[str]:
    for attr in ("errors", "details"):
        messages = _listed(getattr(error, attr, None))
        if messages:
            return messages
    return [str(error) or type(error).__name__]


def _result_messages(result: Any) -> list[str]:
    messages = _listed(getattr(result, "errors", None))
    if messages:
        return messages

    error = getattr(result, "error", None)
    if not error:
        return []
    if isinstance(error, Exception):
        return _exception_messages(error)
    return _listed(error) or [_message(error)]


async def validate_body(schema: Any, body: Any) -> None:
    """Validate ``body``; raise SchemaValidationError listing every violation."""
    errors = await collect_errors(schema, body)
    if errors:
        logger.debug("Schema validation found %d violation(s)", len(errors))
        raise SchemaValidationError(errors)
