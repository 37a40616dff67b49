"""Tests for the Python form submission client."""

import httpx

from app.client import GENERIC_FAILURE, NETWORK_FAILURE, RegistrationClient
from app.services.validation import FieldError


def test_successful_submission(client, valid_form):
    outcome = RegistrationClient(http_client=client).submit(valid_form)

    assert outcome.success
    assert outcome.status_code == 201
    assert outcome.student["email"] == "a@b.com"
    assert outcome.field_errors == []


def test_invalid_form_is_not_sent(valid_form):
    def handler(request):
        raise AssertionError("request should not be sent")

    http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
    valid_form.update(email="nope", confirmPassword="other1")

    outcome = RegistrationClient(http_client=http_client).submit(valid_form)

    assert not outcome.success
    assert not outcome.submitted
    assert [e.field for e in outcome.field_errors] == ["email", "confirmPassword"]


def test_inputs_are_shaped_before_sending(client, store, valid_form):
    valid_form.update(phone="+1 (234) 567-8901 ext", pinCode="411-001")

    outcome = RegistrationClient(http_client=client).submit(valid_form)

    assert outcome.success
    [record] = store.load()
    assert record.phone == "1234567890"
    assert record.pin_code == "411001"


def test_duplicate_email_targets_email_field(client, valid_form):
    registration = RegistrationClient(http_client=client)
    registration.submit(valid_form)

    outcome = registration.submit(valid_form)

    assert not outcome.success
    assert outcome.status_code == 400
    assert outcome.field_errors == [FieldError("email", "Email already registered")]


def test_unmapped_server_error_is_generic(valid_form):
    def handler(request):
        return httpx.Response(500, json={"success": False, "message": "Internal server error"})

    http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
    outcome = RegistrationClient(http_client=http_client).submit(valid_form)

    assert not outcome.success
    assert outcome.field_errors == []
    assert outcome.message == "Internal server error"


def test_non_json_response(valid_form):
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
    outcome = RegistrationClient(http_client=http_client).submit(valid_form)

    assert outcome.message == GENERIC_FAILURE
    assert outcome.status_code == 502


def test_network_failure(valid_form):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
    outcome = RegistrationClient(http_client=http_client).submit(valid_form)

    assert not outcome.success
    assert not outcome.submitted
    assert outcome.message == NETWORK_FAILURE
