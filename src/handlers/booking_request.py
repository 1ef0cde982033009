"""Booking creation handler: stores one booking or a batch of bookings."""

import json
import logging
from collections import Counter
from typing import Any

from golobe.clients import get_dynamo_client
from golobe.config import get_config
from golobe.db import DocumentCreator, DocumentValidator, DynamoDocumentStore, SchemaRegistry, build_registry
from golobe.errors import ErrorCode, GolobeError
from golobe.services.analytics import increment_counters

logger = logging.getLogger(__name__)

_COUNTERS = {"flight": "totalFlightBookings", "hotel": "totalHotelBookings"}

_ERROR_STATUS = {
    ErrorCode.TYPE_MISMATCH: 400,
    ErrorCode.UNKNOWN_ENTITY: 400,
    ErrorCode.UNEXPECTED_FIELDS: 400,
    ErrorCode.FIELD_VALIDATION_FAILED: 400,
    ErrorCode.PERSISTENCE_FAILED: 500,
}


def _response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _error_response(error: GolobeError) -> dict[str, Any]:
    status_code = _ERROR_STATUS.get(error.code, 500)
    # Validation detail is meant for display; storage detail stays in the logs.
    message = error.message if status_code == 400 else error.user_message
    body: dict[str, Any] = {"success": False, "code": error.code.value, "message": message}
    field_errors = getattr(error, "field_errors", None)
    if field_errors:
        body["error"] = field_errors
    return _response(status_code, body)


def _count_bookings(dynamo_client: Any, registry: SchemaRegistry, bookings: list[dict[str, Any]]) -> None:
    deltas = Counter(_COUNTERS[b["bookingType"]] for b in bookings if b.get("bookingType") in _COUNTERS)
    if not deltas:
        return
    analytics = registry.lookup("analytics")
    if not analytics.ok:
        logger.error("Booking counters not updated: %s", analytics.error.message)
        return
    try:
        increment_counters(dynamo_client, analytics.value.table_name, dict(deltas))
    except Exception:
        logger.exception("Failed to update booking counters")


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    config = get_config()
    logging.getLogger().setLevel(config.log_level)

    try:
        payload = json.loads(event.get("body") or "null")
    except ValueError:
        return _response(400, {"success": False, "code": ErrorCode.TYPE_MISMATCH.value, "message": "Body must be JSON"})

    registry = build_registry(config)
    dynamo_client = get_dynamo_client()
    creator = DocumentCreator(registry, DynamoDocumentStore(dynamo_client, config.unique_keys_table))

    if isinstance(payload, list):
        validator = DocumentValidator(registry)
        bookings = []
        for record in payload:
            validation = validator.validate("booking", record)
            if not validation.ok:
                return _error_response(validation.error)
            bookings.append(validation.value.data)

        result = creator.create_many("booking", bookings)
        if not result.ok:
            return _error_response(result.error)
        _count_bookings(dynamo_client, registry, bookings)
        return _response(201, {"success": True, "ids": result.value})

    result = creator.create_one("booking", payload)
    if not result.ok:
        return _error_response(result.error)
    _count_bookings(dynamo_client, registry, [result.value])
    return _response(201, {"success": True, "booking": result.value})
