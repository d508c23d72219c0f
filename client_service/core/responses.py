"""
Uniform JSON envelope shared by every endpoint.
"""
from typing import Any, Dict, List, Optional
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    """
    Build a successful API response.

    Args:
        data: Payload; pydantic models are dumped using their camelCase aliases
        message: Human readable message
        status_code: HTTP status code

    Returns:
        JSONResponse: ``{"statusCode", "data", "message", "success"}``
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "data": jsonable_encoder(data, by_alias=True),
            "message": message,
            "success": status_code < 400,
        },
    )


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[Any]] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """Build the error flavour of the envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "data": None,
            "message": message,
            "success": False,
            "errors": errors or [],
        },
        headers=headers,
    )
