"""Centralized error transformation for API routes.

Maps mapping errors to HTTP responses.
"""

from typing import Any

from fastapi import Response
from fastapi.responses import JSONResponse

from utils.errors import (
    MalformedInputError,
    MappingError,
    MissingFieldError,
    MissingMetadataError,
    SerializationError,
)


def map_mapping_error(error: MappingError) -> Response:
    """Map a mapping error to an HTTP response.

    A body that is not a JSON object gets a bare 400. Header and field
    problems get a 400 with a machine-readable reason.

    Args:
        error: The mapping error to map.

    Returns:
        Response with appropriate status code and content.
    """
    if isinstance(error, MalformedInputError):
        return Response(status_code=400)

    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, SerializationError):
        return JSONResponse(status_code=500, content=detail)

    if isinstance(error, MissingMetadataError):
        detail["header"] = error.header
    elif isinstance(error, MissingFieldError):
        detail["field"] = error.field
    return JSONResponse(status_code=400, content=detail)
