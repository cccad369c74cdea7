# traitsearch/routers/responses.py
# Purpose: CORS headers and error bodies shared by the search routers.

from typing import Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse, Response

INTERNAL_ERROR = "Internal server error"
INTERNAL_MESSAGE = "An error occurred while processing your request"


def cors_headers(methods: str = "GET") -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


def preflight_response() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=cors_headers("GET, OPTIONS"))


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content, headers=cors_headers())


def internal_error_response() -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, INTERNAL_MESSAGE)
