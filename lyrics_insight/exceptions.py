import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LyricsAnalysisError(Exception):
    """Base class for failures that abort an analysis request."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(LyricsAnalysisError):
    """A required setting (e.g. the provider API key) is missing."""


class ProviderError(LyricsAnalysisError):
    """The LLM provider rejected the call or could not be reached."""

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


def create_error_response(error_message: str, details: Optional[List[Dict[str, Any]]] = None) -> dict:
    """Create a standardized error response"""
    content = {
        "success": False,
        "data": None,
        "error": error_message,
    }
    if details is not None:
        content["details"] = details
    return content


def _field_path(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_path(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    logger.info(f"Rejected {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content=create_error_response("Invalid request data", details),
    )


async def analysis_exception_handler(request: Request, exc: LyricsAnalysisError) -> JSONResponse:
    logger.error(f"Analysis failed on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.message),
    )
