"""Unit tests for the HTTP signup handler."""

import base64
import json
from unittest.mock import MagicMock, patch

import pytest

from golobe.config import Config
from golobe.services.signup import SignupResult, SignupStatus, SignupWorkflow
from handlers.signup import build_workflow, handler, parse_form_body

FORM_BODY = "email=jane%40golobe.com&password=correct-horse&confirmPassword=correct-horse&firstname=Jane&lastname=Doe&acceptTerms=on"


def _run(event: dict, result: SignupResult, config: Config):
    workflow = MagicMock()
    workflow.sign_up.return_value = result
    with patch("handlers.signup.get_config", return_value=config), patch(
        "handlers.signup.build_workflow", return_value=workflow
    ):
        response = handler(event, None)
    return response, workflow


def test_parse_form_body():
    form = parse_form_body({"body": FORM_BODY + "&phone=%7B%7D"})
    assert form["email"] == "jane@golobe.com"
    assert form["acceptTerms"] == "on"
    assert form["phone"] == "{}"


def test_parse_base64_form_body():
    event = {"body": base64.b64encode(b"firstname=Jane+Ann&lastname=").decode(), "isBase64Encoded": True}
    assert parse_form_body(event) == {"firstname": "Jane Ann", "lastname": ""}


def test_parse_rejects_malformed_base64():
    with pytest.raises(ValueError):
        parse_form_body({"body": "abc", "isBase64Encoded": True})


def test_parse_rejects_non_utf8_body():
    with pytest.raises(ValueError):
        parse_form_body({"body": base64.b64encode(b"\xff\xfe").decode(), "isBase64Encoded": True})


def test_parse_empty_body():
    assert parse_form_body({"body": None}) == {}


def test_repeated_keys_last_value_wins():
    assert parse_form_body({"body": "email=a%40b.com&email=c%40d.com"}) == {"email": "c@d.com"}


def test_success_returns_201(config):
    result = SignupResult(status=SignupStatus.SUCCESS, message="User created successfully", user_id="u-1")
    response, workflow = _run({"body": FORM_BODY}, result, config)

    assert response["statusCode"] == 201
    assert json.loads(response["body"]) == {"success": True, "message": "User created successfully", "error": None}
    assert workflow.sign_up.call_args.args[0]["firstname"] == "Jane"


def test_validation_failure_returns_400_with_field_errors(config):
    result = SignupResult(status=SignupStatus.VALIDATION_FAILURE, errors={"email": "Invalid email address"})
    response, _ = _run({"body": "email=nope"}, result, config)

    assert response["statusCode"] == 400
    assert json.loads(response["body"])["error"] == {"email": "Invalid email address"}


def test_duplicate_returns_409(config):
    result = SignupResult(status=SignupStatus.DUPLICATE_FAILURE, errors={"email": "User already exists"})
    response, _ = _run({"body": FORM_BODY}, result, config)
    assert response["statusCode"] == 409


def test_generic_failure_returns_500(config):
    result = SignupResult(status=SignupStatus.GENERIC_FAILURE, message="Something went wrong, try again")
    response, _ = _run({"body": FORM_BODY}, result, config)

    assert response["statusCode"] == 500
    body = json.loads(response["body"])
    assert body == {"success": False, "message": "Something went wrong, try again", "error": None}


def test_build_workflow_wires_aws_clients(config):
    with patch("handlers.signup.get_config", return_value=config), patch(
        "handlers.signup.get_dynamo_client"
    ) as mock_dynamo, patch("handlers.signup.get_ses_client") as mock_ses:
        workflow = build_workflow()

    assert isinstance(workflow, SignupWorkflow)
    mock_dynamo.assert_called_once()
    mock_ses.assert_called_once()


@pytest.mark.parametrize("body", ["abc", "//4="])
def test_undecodable_body_returns_400(config, body):
    result = SignupResult(status=SignupStatus.SUCCESS, user_id="u-1")
    response, workflow = _run({"body": body, "isBase64Encoded": True}, result, config)

    assert response["statusCode"] == 400
    assert json.loads(response["body"]) == {"success": False, "message": "Invalid form submission", "error": None}
    workflow.sign_up.assert_not_called()
