from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from croak_relay.models import ErrorReply


class RelayException(HTTPException):
    def __init__(self, status_code: int, error: str, details: Optional[str] = None):
        super().__init__(status_code=status_code, detail=error)
        self.details = details


class MissingParameterException(RelayException):
    def __init__(self, name: str):
        super().__init__(status_code=400, error=f"Query parameter '{name}' is required!")


class UpstreamFailedException(RelayException):
    def __init__(self, error: str, details: Optional[str] = None):
        super().__init__(status_code=500, error=error, details=details)


def error_body(error: str, details: Optional[str] = None) -> dict:
    return ErrorReply(error=error, details=details).model_dump(exclude_none=True)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTPException (ours and Starlette's 404/405) as {error, details?}."""
    details = getattr(exc, "details", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), details),
        headers=getattr(exc, "headers", None),
    )
