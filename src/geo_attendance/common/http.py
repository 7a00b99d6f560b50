from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import (
    AlreadyCheckedIn,
    AuthorizationError,
    DomainError,
    NoActiveSession,
    NoGeofenceConfigured,
    OutsideGeofence,
    StorageUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (AlreadyCheckedIn, 409),
    (NoActiveSession, 409),
    (NoGeofenceConfigured, 409),
)


def error_response(error: Exception):
    """Translate an exception raised by a service into a JSON response."""
    if isinstance(error, OutsideGeofence):
        return (
            jsonify(
                {
                    "error": "Check-in location is outside allowed area",
                    "message": str(error),
                    "geofenceValidation": {
                        "isValid": False,
                        "distance": error.distance_meters,
                        "allowedRadius": error.allowed_radius,
                        "geofenceName": error.zone_name,
                    },
                }
            ),
            403,
        )

    if isinstance(error, DomainError):
        for kind, status in _STATUS_BY_ERROR:
            if isinstance(error, kind):
                body = {"error": str(error), "code": type(error).__name__}
                if isinstance(error, ValidationError) and error.field:
                    body["field"] = error.field
                return jsonify(body), status

    if isinstance(error, StorageUnavailable):
        logger.error("Storage unavailable: %s", error)
        return jsonify({"error": "Storage temporarily unavailable", "code": "StorageUnavailable"}), 503

    logger.exception("Unhandled error", exc_info=error)
    return jsonify({"error": "Internal server error"}), 500
