"""Domain error taxonomy and the Flask handlers that render it as JSON."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Flask, jsonify
from sqlalchemy.exc import DisconnectionError, OperationalError
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger(__name__)


class SpendTrackError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    code = "internal_error"
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message}


class ValidationError(SpendTrackError):
    """Missing or malformed input."""

    status_code = 400
    code = "validation_error"
    default_message = "Validation failed."

    def __init__(
        self,
        message: str | None = None,
        *,
        fields: Mapping[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.fields = {key: list(value) for key, value in (fields or {}).items()}

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.fields:
            payload["fields"] = self.fields
        return payload


class InvalidArgument(ValidationError):
    """A query argument (date, range, grouping key) could not be interpreted."""

    code = "invalid_argument"
    default_message = "Invalid argument."


class AuthenticationRequired(SpendTrackError):
    status_code = 401
    code = "authentication_required"
    default_message = "Log in to access this resource."


class InvalidCredentials(SpendTrackError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid credentials."


class NotFound(SpendTrackError):
    """Unknown id, an id owned by someone else, or nothing qualifying."""

    status_code = 404
    code = "not_found"
    default_message = "Resource not found or not authorized."


class AlreadySettled(SpendTrackError):
    status_code = 409
    code = "already_settled"
    default_message = "This business credit is already marked as paid."


class DuplicateCategory(SpendTrackError):
    status_code = 409
    code = "duplicate_category"
    default_message = "Category with this name and type already exists for this user."


class DuplicateUser(SpendTrackError):
    status_code = 409
    code = "duplicate_user"
    default_message = "This email or username is already registered."


class CategoryInUse(SpendTrackError):
    status_code = 409
    code = "category_in_use"
    default_message = "Category is still used by expenses and cannot be deleted."


class StorageUnavailable(SpendTrackError):
    """The database could not be reached; the caller may retry later."""

    status_code = 503
    code = "storage_unavailable"
    default_message = "Storage is temporarily unavailable."


def register_error_handlers(app: Flask) -> None:
    """Render domain errors, storage failures and HTTP errors as JSON."""

    @app.errorhandler(SpendTrackError)
    def _handle_domain_error(error: SpendTrackError):
        if error.status_code >= 500:
            logger.error("Request failed: %s", error.message, extra={"code": error.code})
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(OperationalError)
    @app.errorhandler(DisconnectionError)
    def _handle_storage_error(error: Exception):
        logger.exception("Storage backend failure")
        unavailable = StorageUnavailable()
        return jsonify(unavailable.to_dict()), unavailable.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(error: HTTPException):
        code = (error.name or "error").lower().replace(" ", "_")
        return jsonify({"error": code, "message": error.description}), error.code

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover - safety net
        logger.exception("Unhandled error while serving request")
        return jsonify(SpendTrackError().to_dict()), 500
