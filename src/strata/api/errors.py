"""Error responses for the Strata HTTP API.

Every error body uses the same Result/Message structure:

    {"messages": [{"code": "NotFound", "messageType": "Error",
                   "text": "...", "timestamp": "..."}]}

Domain errors raised by the accessors are translated here: a missing record
becomes 404 and an unavailable store becomes 503. Cache failures never reach
this layer.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from strata.errors import EntityNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)


class MessageType(str, Enum):
    """Type of message in error response."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    EXCEPTION = "Exception"


class Message(BaseModel):
    """A single error message."""

    model_config = {"extra": "forbid", "populate_by_name": True}

    code: str
    message_type: MessageType = Field(alias="messageType")
    text: str
    timestamp: str | None = None


class Result(BaseModel):
    """Result wrapper for errors."""

    model_config = {"extra": "forbid"}

    messages: list[Message]


class ApiError(HTTPException):
    """Base exception for API errors."""

    def __init__(
        self,
        status_code: int,
        code: str,
        text: str,
        message_type: MessageType = MessageType.ERROR,
    ):
        self.code = code
        self.text = text
        self.message_type = message_type
        super().__init__(status_code=status_code, detail=text)

    def to_result(self) -> Result:
        return Result(
            messages=[
                Message(
                    code=self.code,
                    messageType=self.message_type,
                    text=self.text,
                    timestamp=datetime.now(UTC).isoformat(),
                )
            ]
        )

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_result().model_dump(by_alias=True),
        )


class NotFoundError(ApiError):
    """Resource not found (404)."""

    def __init__(self, resource_type: str, identifier: object):
        super().__init__(
            status_code=404,
            code="NotFound",
            text=f"{resource_type} with id '{identifier}' not found",
        )


class ServiceUnavailableError(ApiError):
    """Backing store unavailable (503)."""

    def __init__(self, text: str = "The data store is unavailable"):
        super().__init__(
            status_code=503,
            code="StoreUnavailable",
            text=text,
            message_type=MessageType.EXCEPTION,
        )


class InternalServerError(ApiError):
    """Internal server error (500)."""

    def __init__(self, text: str = "An unexpected error occurred"):
        super().__init__(
            status_code=500,
            code="InternalServerError",
            text=text,
            message_type=MessageType.EXCEPTION,
        )


async def api_exception_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Exception handler for API errors."""
    return exc.to_response()


async def not_found_exception_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    """Map a missing record to 404."""
    return NotFoundError(exc.entity, exc.identifier).to_response()


async def store_unavailable_exception_handler(
    request: Request, exc: StoreUnavailableError
) -> JSONResponse:
    """Map a store failure to 503."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return ServiceUnavailableError().to_response()


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for unexpected errors."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return InternalServerError().to_response()
