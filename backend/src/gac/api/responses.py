"""Uniform response envelope: ``{status, message, data?}``."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    """Render a success envelope.

    Args:
        message: Human readable message
        data: Optional payload (pydantic models are encoded)
        status_code: HTTP status, 200 or 201

    Returns:
        JSON response
    """
    content: dict[str, Any] = {"status": "success", "message": message}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


def error(message: str, status_code: int = 400) -> JSONResponse:
    """Render an error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )
