"""Domain errors and their HTTP mapping"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

logger = structlog.get_logger()


class HotelError(Exception):
    """Base class for errors raised by the booking core"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HotelError):
    """Malformed or missing input"""


class NotFoundError(HotelError):
    status_code = status.HTTP_404_NOT_FOUND


class AvailabilityError(HotelError):
    """No room free for the requested window"""


class ReservationExpiredError(AvailabilityError):
    """The soft hold lapsed before it was converted"""


class PriceMismatchError(HotelError):
    """Client total differs from the server-computed total"""


class InvalidTransitionError(HotelError):
    """Status change not allowed from the current state"""

    def __init__(self, resource: str, current: str, target: str):
        super().__init__(f"Cannot change {resource} status from {current} to {target}")
        self.current = current
        self.target = target


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        parts.append(f"{field}: {error.get('msg')}")
    return "; ".join(parts) or "Invalid request"


async def hotel_error_handler(request: Request, exc: HotelError) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        error=type(exc).__name__,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _format_validation_error(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as {"message": ...}"""
    app.add_exception_handler(HotelError, hotel_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
