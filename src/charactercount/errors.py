"""
Error handling utilities for the character count engine.

Provides custom exception classes and the Flask error handlers that turn
them into structured JSON responses.
"""

import logging
import traceback
from typing import Optional, Dict, Any
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class CharacterCountError(Exception):
    """Base exception for character count errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code when surfaced through the API
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}


class ValidationError(CharacterCountError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details=details
        )


class ConfigurationError(ValidationError):
    """Raised when bind options or settings are malformed."""

    def __init__(self, option: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid value for '{option}': {reason}",
            details={"option": option, "value": repr(value)}
        )
        self.error_code = "CONFIGURATION_ERROR"
        self.option = option


class NotFoundError(CharacterCountError):
    """Raised when an API resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            message=f"{resource_type} '{resource_id}' not found.",
            error_code="NOT_FOUND",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class RateLimitError(CharacterCountError):
    """Raised when rate limit is exceeded."""

    def __init__(self):
        super().__init__(
            message="Rate limit exceeded. Please try again later.",
            error_code="RATE_LIMIT_EXCEEDED",
            status_code=429
        )


def create_error_response(
    error: Exception,
    include_traceback: bool = False
) -> tuple:
    """
    Create a standardized error response.

    Args:
        error: Exception instance
        include_traceback: Whether to include traceback in response (for debugging)

    Returns:
        Tuple of (json_response, status_code)
    """
    if isinstance(error, CharacterCountError) and error.status_code < 500:
        logger.info(f"{type(error).__name__}: {error.message}")
    else:
        logger.error(
            f"Error: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "path": request.path if request else None,
                "method": request.method if request else None,
            }
        )

    if isinstance(error, CharacterCountError):
        response = {
            "error": error.message,
            "error_code": error.error_code,
        }
        if error.details:
            response["details"] = error.details
        if include_traceback:
            response["traceback"] = traceback.format_exc()

        return jsonify(response), error.status_code

    error_message = str(error)
    error_type = type(error).__name__

    # Don't expose internal errors in production
    if not include_traceback:
        error_message = "An unexpected error occurred."

    response = {
        "error": error_message,
        "error_code": "INTERNAL_ERROR",
        "error_type": error_type,
    }

    if include_traceback:
        response["traceback"] = traceback.format_exc()

    return jsonify(response), 500


def register_error_handlers(app, debug: bool = False):
    """
    Register error handlers for the Flask app.

    Args:
        app: Flask application instance
        debug: Whether to include tracebacks in error responses
    """
    @app.errorhandler(CharacterCountError)
    def handle_api_error(error: CharacterCountError):
        return create_error_response(error, include_traceback=debug)

    @app.errorhandler(404)
    def handle_not_found(error):
        return create_error_response(
            NotFoundError("Resource", request.path),
            include_traceback=debug
        )

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({
            "error": f"Method '{request.method}' not allowed for this endpoint.",
            "error_code": "METHOD_NOT_ALLOWED",
        }), 405

    @app.errorhandler(429)
    def handle_rate_limit(error):
        return create_error_response(
            RateLimitError(),
            include_traceback=debug
        )

    @app.errorhandler(Exception)
    def handle_generic_exception(error: Exception):
        """Handle all other exceptions."""
        if isinstance(error, HTTPException):
            return jsonify({
                "error": error.description,
                "error_code": error.name.upper().replace(" ", "_"),
            }), error.code
        return create_error_response(error, include_traceback=debug)
