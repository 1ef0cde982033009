"""Unit tests for the booking creation handler."""

import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from handlers.booking_request import handler

BOOKING = {
    "userId": "user-1",
    "bookingType": "flight",
    "referenceId": "FL-100",
    "totalPrice": 320.5,
    "startDate": "2026-03-10",
}


@pytest.fixture
def dynamo_client(config):
    client = MagicMock()
    with patch("handlers.booking_request.get_config", return_value=config), patch(
        "handlers.booking_request.get_dynamo_client", return_value=client
    ):
        yield client


def _call(payload) -> tuple[int, dict]:
    body = payload if isinstance(payload, str) else json.dumps(payload)
    response = handler({"body": body}, None)
    return response["statusCode"], json.loads(response["body"])


def test_single_booking_is_created(dynamo_client):
    status, body = _call(BOOKING)

    assert status == 201
    assert body["success"] is True
    assert body["booking"]["status"] == "confirmed"
    assert dynamo_client.put_item.call_args.kwargs["TableName"] == "Bookings"
    counters = dynamo_client.update_item.call_args.kwargs
    assert counters["ExpressionAttributeNames"] == {"#c0": "totalFlightBookings"}


def test_batch_of_bookings(dynamo_client):
    hotel = {**BOOKING, "bookingType": "hotel", "referenceId": "HT-9"}
    status, body = _call([BOOKING, hotel, BOOKING])

    assert status == 201
    assert len(body["ids"]) == 3
    actions = dynamo_client.transact_write_items.call_args.kwargs["TransactItems"]
    assert len(actions) == 3
    counters = dynamo_client.update_item.call_args.kwargs
    assert counters["ExpressionAttributeValues"] == {":d0": {"N": "2"}, ":d1": {"N": "1"}}


def test_invalid_booking_in_batch_writes_nothing(dynamo_client):
    status, body = _call([BOOKING, {**BOOKING, "totalPrice": -5}])

    assert status == 400
    assert body["code"] == "FIELD_VALIDATION_FAILED"
    assert "totalPrice" in body["error"]
    dynamo_client.transact_write_items.assert_not_called()


def test_unexpected_field_is_rejected(dynamo_client):
    status, body = _call({**BOOKING, "discountCode": "SPRING"})

    assert status == 400
    assert body["code"] == "UNEXPECTED_FIELDS"
    assert "discountCode" in body["message"]
    dynamo_client.put_item.assert_not_called()


def test_storage_failure_hides_internal_detail(dynamo_client):
    dynamo_client.put_item.side_effect = ClientError(
        {"Error": {"Code": "InternalServerError", "Message": "partition 7 unavailable"}}, "PutItem"
    )

    status, body = _call(BOOKING)

    assert status == 500
    assert body["code"] == "PERSISTENCE_FAILED"
    assert "partition 7" not in body["message"]
    dynamo_client.update_item.assert_not_called()


def test_counter_failure_does_not_fail_the_request(dynamo_client):
    dynamo_client.update_item.side_effect = RuntimeError("throttled")
    status, _ = _call(BOOKING)
    assert status == 201


def test_body_must_be_json(dynamo_client):
    status, body = _call("{not json")
    assert status == 400
    assert body["code"] == "TYPE_MISMATCH"


def test_non_object_body(dynamo_client):
    status, body = _call("42")
    assert status == 400
    assert body["code"] == "TYPE_MISMATCH"


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_price_is_rejected_before_storage(dynamo_client, literal):
    raw = (
        '{"userId":"user-1","bookingType":"flight","referenceId":"FL-100",'
        f'"totalPrice":{literal},"startDate":"2026-03-10"}}'
    )
    status, body = _call(raw)

    assert status == 400
    assert body["code"] == "FIELD_VALIDATION_FAILED"
    assert "totalPrice" in body["error"]
    dynamo_client.put_item.assert_not_called()
    dynamo_client.update_item.assert_not_called()


def test_non_finite_price_in_batch_writes_nothing(dynamo_client):
    raw = "[" + json.dumps(BOOKING) + ',{"userId":"user-1","bookingType":"hotel","referenceId":"HT-1",'
    raw += '"totalPrice":Infinity,"startDate":"2026-03-10"}]'
    status, body = _call(raw)

    assert status == 400
    assert "totalPrice" in body["error"]
    dynamo_client.transact_write_items.assert_not_called()
