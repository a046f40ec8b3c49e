import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FriendshipError(Exception):
    """Base class for errors rendered as ``{"message": ..., "error": ...}``."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class Unauthenticated(FriendshipError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidRequest(FriendshipError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(FriendshipError):
    status_code = status.HTTP_404_NOT_FOUND


class DataAccessFailure(FriendshipError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str):
        super().__init__("Server error", error)


async def friendship_error_handler(request: Request, exc: FriendshipError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"[{request.method} {request.url.path}] {exc.message}: {exc.error}")
    else:
        logger.warning(f"[{request.method} {request.url.path}] {exc.status_code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"[{request.method} {request.url.path}] Invalid request: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "error": str(jsonable_encoder(exc.errors()))},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FriendshipError, friendship_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
