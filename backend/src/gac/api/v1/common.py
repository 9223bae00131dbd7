"""Helpers shared by the referrer and referrer type endpoints."""

import json
from contextlib import contextmanager
from typing import Annotated, Any, Generator, TypeVar

from fastapi import Path, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from gac.errors import ClientInputError, PersistenceError
from gac.logging_config import get_logger

logger = get_logger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)

# Largest value a 64-bit INTEGER key can hold
MAX_ID = 2**63 - 1

RecordId = Annotated[int, Path(ge=1, le=MAX_ID)]


async def read_json_body(request: Request) -> dict[str, Any]:
    """Read and decode the request body as a JSON object.

    Raises:
        ClientInputError: Empty body, malformed JSON, or not an object
    """
    raw = await request.body()
    if not raw or not raw.strip():
        raise ClientInputError("No data provided")

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.info("invalid_json_body", path=request.url.path, error=str(e))
        raise ClientInputError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ClientInputError("Invalid JSON: expected an object")
    return data


def parse_payload(model: type[PayloadT], data: dict[str, Any]) -> PayloadT:
    """Validate decoded body against a payload model."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ClientInputError(f"Invalid value for {field}: {first['msg']}") from e


def is_blank(value: Any) -> bool:
    """True for None, empty or whitespace-only strings, and zero."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, int) and not isinstance(value, bool):
        return value == 0
    return False


@contextmanager
def store_errors(message: str) -> Generator[None, None, None]:
    """Translate unexpected store failures into a 500 with a safe message."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("store_error", message=message, error=str(e))
        raise PersistenceError(message) from e
