"""
Error response service for the listings API.
Every failure leaves the API as ``{"error": {code, message, timestamp, request_id, details?}}``.
"""

from typing import Dict, Any, Optional, List
from datetime import datetime, timezone
from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.utils.exceptions import APIException
from app.utils.validators import describe_field_errors
import logging
import uuid

logger = logging.getLogger(__name__)


class ErrorHandlerService:
    """
    Builds error envelopes and logs the failure that produced them.

    Listing errors arrive as ``APIException`` subclasses: 400 for a malformed
    id, 404 for an unknown one, 422 when a write breaks the draft rules or the
    publication contract. Store and unexpected failures become 500s without
    leaking internals. Client errors log at warning level, server errors at
    error level with the traceback.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the error envelope.

        Args:
            error_code: Machine-readable code, e.g. ``NOT_FOUND``
            message: Human-readable message
            details: Per-field problems, omitted when empty
            request_id: Identifier echoed in the log line

        Returns:
            Envelope dictionary
        """
        error: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        }
        if details:
            error["details"] = details
        if request_id:
            error["request_id"] = request_id
        return {"error": error}

    @classmethod
    def handle_api_exception(cls, exception: APIException, request: Optional[Request] = None) -> JSONResponse:
        """Listing errors raised by services and validators."""
        return cls._respond(
            status_code=exception.status_code,
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            request=request,
            details=getattr(exception, "field_errors", None),
            headers=exception.headers
        )

    @classmethod
    def handle_validation_error(cls, exception: Any, request: Optional[Request] = None) -> JSONResponse:
        """Request bodies and query values that fail schema validation."""
        return cls._respond(
            status_code=422,
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            request=request,
            details=describe_field_errors(exception.errors())
        )

    @classmethod
    def handle_database_error(cls, exception: SQLAlchemyError, request: Optional[Request] = None) -> JSONResponse:
        """Store failures. The driver message is logged, never returned."""
        return cls._respond(
            status_code=500,
            error_code="DATABASE_ERROR",
            message="Database operation failed",
            request=request,
            cause=exception
        )

    @classmethod
    def handle_http_exception(cls, exception: HTTPException, request: Optional[Request] = None) -> JSONResponse:
        """Framework errors such as unknown routes or wrong methods."""
        return cls._respond(
            status_code=exception.status_code,
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            request=request,
            headers=exception.headers
        )

    @classmethod
    def handle_unexpected_error(cls, exception: Exception, request: Optional[Request] = None) -> JSONResponse:
        return cls._respond(
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again later.",
            request=request,
            cause=exception
        )

    @classmethod
    def _respond(
        cls,
        status_code: int,
        error_code: str,
        message: str,
        request: Optional[Request] = None,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        cause: Optional[Exception] = None
    ) -> JSONResponse:
        request_id = uuid.uuid4().hex[:8]
        route = f"{request.method} {request.url.path}" if request else "-"

        if status_code >= 500:
            reason = f"{type(cause).__name__}: {cause}" if cause else message
            logger.error(
                f"[{request_id}] {route} -> {status_code} {error_code}: {reason}",
                exc_info=cause
            )
        else:
            logger.warning(
                f"[{request_id}] {route} -> {status_code} {error_code}: {message}"
                + (f" ({len(details)} field errors)" if details else "")
            )

        body = cls.format_error_response(error_code, message, details, request_id)
        return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)
