"""HTTP signup handler, accepts a URL-encoded form post from the signup page."""

import base64
import json
import logging
from typing import Any
from urllib.parse import parse_qsl

from golobe.clients import get_dynamo_client, get_ses_client
from golobe.config import get_config
from golobe.db import DynamoDocumentStore, build_registry
from golobe.services.email import SesEmailSender
from golobe.services.signup import SignupStatus, SignupWorkflow

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    SignupStatus.SUCCESS: 201,
    SignupStatus.VALIDATION_FAILURE: 400,
    SignupStatus.DUPLICATE_FAILURE: 409,
    SignupStatus.GENERIC_FAILURE: 500,
}


def _response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def parse_form_body(event: dict[str, Any]) -> dict[str, str]:
    """Raises ValueError when a base64 body is malformed or not UTF-8."""
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    # Last value wins for repeated keys, as with a browser FormData.
    return dict(parse_qsl(body, keep_blank_values=True))


def build_workflow() -> SignupWorkflow:
    config = get_config()
    store = DynamoDocumentStore(get_dynamo_client(), config.unique_keys_table)
    sender = SesEmailSender(get_ses_client(), config.email_sender)
    return SignupWorkflow(build_registry(config), store, sender, config)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    logging.getLogger().setLevel(get_config().log_level)

    try:
        form_data = parse_form_body(event)
    except ValueError:
        logger.warning("Rejected signup with an undecodable body")
        return _response(400, {"success": False, "message": "Invalid form submission", "error": None})

    result = build_workflow().sign_up(form_data)

    return _response(
        _STATUS_CODES[result.status],
        {"success": result.success, "message": result.message, "error": result.errors or None},
    )
