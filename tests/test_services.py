"""Tests for the Authorization, AccountInquiry and DebitRequest steps."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
import requests
from rma_payments.core.errors import (
    APIError,
    AuthenticationError,
    InvalidParameterError,
    NetworkError,
)
from rma_payments.core.services import validate_result

NOW = datetime(2024, 3, 5, 7, 8, 9, tzinfo=timezone.utc)

# --- Authorization ---


def test_authorization_returns_result_with_transaction_id(client, session, make_response, gateway_result):
    session.request.return_value = make_response(200, gateway_result(bfs_bfsTxnId="TXN0001"))

    result = client.authorization.call("ORD-1", 250, "buyer@example.com", now=NOW)

    assert result["bfs_bfsTxnId"] == "TXN0001"
    assert result["bfs_responseCode"] == "00"


def test_authorization_sends_expected_fields(client, session, make_response, gateway_result, sent_fields):
    session.request.return_value = make_response(200, gateway_result(bfs_bfsTxnId="TXN0001"))

    client.authorization.call("ORD-1", 100, "buyer@example.com", now=NOW)

    fields = sent_fields(session)
    assert fields["bfs_msgType"] == "AR"
    assert fields["bfs_txnAmount"] == "100.00"
    assert fields["bfs_benfTxnTime"] == "20240305070809"
    assert fields["bfs_benfId"] == "BE10000123"
    assert fields["bfs_paymentDesc"] == "Online order"
    assert fields["bfs_version"] == "5.0"


@pytest.mark.parametrize(
    "amount, expected",
    [(100.5, "100.50"), (100, "100.00"), ("42.1", "42.10"), (0.005, "0.01"), (19.999, "20.00")],
)
def test_authorization_amount_has_two_decimals(
    client, session, make_response, gateway_result, sent_fields, amount, expected
):
    session.request.return_value = make_response(200, gateway_result(bfs_bfsTxnId="T"))

    client.authorization.call("ORD-1", amount, "buyer@example.com")

    assert sent_fields(session)["bfs_txnAmount"] == expected


@pytest.mark.parametrize(
    "order_no, amount, email, field, message",
    [
        ("", 10, "buyer@example.com", "order_no", "Order number is required"),
        (None, None, None, "order_no", "Order number is required"),
        ("ORD-1", None, "buyer@example.com", "amount", "Amount is required"),
        ("ORD-1", "", "", "amount", "Amount is required"),
        ("ORD-1", 10, "", "email", "Email is required"),
        ("ORD-1", "ten", "not-an-email", "amount", "Amount must be a number"),
        ("ORD-1", 0, "buyer@example.com", "amount", "Amount must be greater than zero"),
        ("ORD-1", -5, "buyer@example.com", "amount", "Amount must be greater than zero"),
        ("ORD-1", 10, "buyer@example", "email", "Email must be a valid email"),
    ],
)
def test_authorization_validation_order(client, session, order_no, amount, email, field, message):
    with pytest.raises(InvalidParameterError) as excinfo:
        client.authorization.call(order_no, amount, email)

    error = excinfo.value
    assert isinstance(error, AuthenticationError)
    assert error.field == field
    assert str(error) == f"Failed to authorize: {message}"
    assert error.kind == "validation"
    assert isinstance(error.cause, InvalidParameterError)
    session.request.assert_not_called()


@pytest.mark.parametrize("amount", [0, -0.01, "-3", "abc", float("nan"), True, [1]])
def test_non_positive_or_non_numeric_amounts_never_reach_transport(client, session, amount):
    with pytest.raises(InvalidParameterError):
        client.authorization.call("ORD-1", amount, "buyer@example.com")

    assert session.request.call_count == 0


@pytest.mark.parametrize("email", ["userexample.com", "user@", "user@example", "@example.com"])
def test_malformed_emails_rejected(client, session, email):
    with pytest.raises(InvalidParameterError) as excinfo:
        client.authorization.call("ORD-1", 10, email)

    assert excinfo.value.field == "email"
    session.request.assert_not_called()


@pytest.mark.parametrize("email", ["user@example.com", "user.name+tag@domain.co.uk"])
def test_well_formed_emails_accepted(client, session, make_response, gateway_result, email):
    session.request.return_value = make_response(200, gateway_result(bfs_bfsTxnId="T"))

    client.authorization.call("ORD-1", 10, email)

    session.request.assert_called_once()


def test_authorization_business_failure(client, session, make_response, gateway_result):
    session.request.return_value = make_response(200, gateway_result("02", "Invalid beneficiary"))

    with pytest.raises(AuthenticationError) as excinfo:
        client.authorization.call("ORD-1", 10, "buyer@example.com")

    error = excinfo.value
    assert str(error) == "Failed to authorize: Authorization failed: Invalid beneficiary"
    assert error.response_code == "02"
    assert error.response_description == "Invalid beneficiary"
    assert error.kind == "business"
    assert not isinstance(error, NetworkError)
    assert not error.retryable


def test_failure_without_description_reports_unknown_error(client, session, make_response):
    session.request.return_value = make_response(200, {"result": {"bfs_responseCode": "77"}})

    with pytest.raises(AuthenticationError, match="Authorization failed: Unknown error") as excinfo:
        client.authorization.call("ORD-1", 10, "buyer@example.com")

    assert excinfo.value.response_code == "77"


@pytest.mark.parametrize("payload", [{}, {"result": None}, {"result": "00"}, ["not", "a", "mapping"]])
def test_missing_result_is_distinct_business_error(client, session, make_response, payload):
    session.request.return_value = make_response(200, payload)

    with pytest.raises(AuthenticationError) as excinfo:
        client.authorization.call("ORD-1", 10, "buyer@example.com")

    assert str(excinfo.value) == "Failed to authorize: No response data in response"
    assert excinfo.value.kind == "business"


# --- Account inquiry ---


def test_account_inquiry_success(client, session, make_response, gateway_result, sent_fields):
    session.request.return_value = make_response(
        200,
        gateway_result(bfs_remitterName="Karma Wangchuk", bfs_remitterAccNo="100200300"),
    )

    result = client.account_inquiry.call("TXN0001", "1010", "100200300")

    assert result["bfs_remitterName"] == "Karma Wangchuk"
    assert sent_fields(session) == {
        "bfs_bfsTxnId": "TXN0001",
        "bfs_remitterBankId": "1010",
        "bfs_remitterAccNo": "100200300",
        "bfs_benfId": "BE10000123",
        "bfs_msgType": "AE",
    }


def test_account_inquiry_does_not_validate_bank_or_account_format(
    client, session, make_response, gateway_result, sent_fields
):
    # Unknown bank codes and malformed account numbers are left to the gateway.
    session.request.return_value = make_response(200, gateway_result("01", "Invalid request"))

    with pytest.raises(AuthenticationError, match="Account inquiry failed: Invalid request"):
        client.account_inquiry.call("TXN0001", "9999", "12-AB")

    assert sent_fields(session)["bfs_remitterBankId"] == "9999"


def test_account_inquiry_error_does_not_leak_account_number(client, session, make_response, gateway_result):
    session.request.return_value = make_response(200, gateway_result("03", "Invalid transaction"))

    with pytest.raises(AuthenticationError) as excinfo:
        client.account_inquiry.call("TXN0001", "1010", "100200300")

    assert str(excinfo.value) == (
        "Failed to fetch account inquiry: Account inquiry failed: Invalid transaction"
    )
    assert "100200300" not in str(excinfo.value)


# --- Debit request ---


def test_debit_request_success(client, session, make_response, gateway_result, sent_fields):
    session.request.return_value = make_response(
        200,
        gateway_result(bfs_txnAmount="100.00", bfs_orderNo="ORD-1", bfs_txnCurrency="BTN"),
    )

    result = client.debit_request.call("TXN0001", "123456")

    assert result["bfs_orderNo"] == "ORD-1"
    assert sent_fields(session)["bfs_msgType"] == "DR"
    assert sent_fields(session)["bfs_remitterOtp"] == "123456"


def test_debit_invalid_otp_is_business_error(client, session, make_response, gateway_result):
    session.request.return_value = make_response(200, gateway_result("05", "Invalid OTP"))

    with pytest.raises(AuthenticationError) as excinfo:
        client.debit_request.call("TXN0001", "654321")

    error = excinfo.value
    assert "Invalid OTP" in str(error)
    assert error.response_code == "05"
    assert error.kind == "business"
    assert "654321" not in str(error)


def test_debit_otp_is_not_validated_locally(client, session, make_response, gateway_result, sent_fields):
    session.request.return_value = make_response(200, gateway_result())

    client.debit_request.call("TXN0001", "x")

    assert sent_fields(session)["bfs_remitterOtp"] == "x"


def test_debit_is_not_deduplicated(client, session, make_response, gateway_result):
    session.request.return_value = make_response(200, gateway_result())

    client.debit_request.call("TXN0001", "123456")
    client.debit_request.call("TXN0001", "123456")

    assert session.request.call_count == 2


# --- Errors shared by every step ---

STEPS = [
    ("authorization", ("ORD-1", 10, "buyer@example.com"), "Failed to authorize"),
    ("account_inquiry", ("TXN0001", "1010", "100200300"), "Failed to fetch account inquiry"),
    ("debit_request", ("TXN0001", "123456"), "Failed to fetch debit request"),
]


@pytest.mark.parametrize("step, args, prefix", STEPS)
def test_timeout_surfaces_as_network_error(client, session, step, args, prefix):
    session.request.side_effect = requests.ConnectTimeout("connect timed out")

    with pytest.raises(NetworkError) as excinfo:
        getattr(client, step).call(*args)

    error = excinfo.value
    assert isinstance(error, AuthenticationError)
    assert error.kind == "network"
    assert error.retryable
    assert str(error).startswith(f"{prefix}: Network error: ")
    assert isinstance(error.cause, NetworkError)
    assert error.__cause__ is error.cause


@pytest.mark.parametrize("step, args, prefix", STEPS)
def test_server_error_keeps_api_kind(client, session, make_response, gateway_result, step, args, prefix):
    session.request.return_value = make_response(500, gateway_result("99", "System error"))

    with pytest.raises(APIError) as excinfo:
        getattr(client, step).call(*args)

    error = excinfo.value
    assert isinstance(error, AuthenticationError)
    assert str(error) == f"{prefix}: System error"
    assert error.response_code == "99"
    assert error.status_code == 500
    assert not error.retryable


@pytest.mark.parametrize("step, args, prefix", STEPS)
def test_client_error_keeps_validation_kind(client, session, make_response, gateway_result, step, args, prefix):
    session.request.return_value = make_response(400, gateway_result("01", "Invalid request"))

    with pytest.raises(InvalidParameterError) as excinfo:
        getattr(client, step).call(*args)

    assert excinfo.value.response_code == "01"
    assert excinfo.value.status_code == 400


@pytest.mark.parametrize("step, args, prefix", STEPS)
def test_steps_are_callable(client, session, make_response, gateway_result, step, args, prefix):
    session.request.return_value = make_response(200, gateway_result())

    assert getattr(client, step)(*args)["bfs_responseCode"] == "00"


def test_validate_result_copies_result():
    response = {"result": {"bfs_responseCode": "00", "bfs_remitterName": "Pema"}}

    result = validate_result(response, "Account inquiry")

    assert result == response["result"]
    assert result is not response["result"]


@pytest.mark.parametrize("amount", [0.001, "0.004", "1e-9", Decimal("0.0049")])
def test_amounts_that_round_to_zero_never_reach_transport(client, session, amount):
    with pytest.raises(InvalidParameterError) as excinfo:
        client.authorization.call("ORD-1", amount, "buyer@example.com")

    assert str(excinfo.value) == "Failed to authorize: Amount must be greater than zero"
    assert excinfo.value.field == "amount"
    session.request.assert_not_called()


def test_half_cent_rounds_up_to_a_sendable_amount(client, session, make_response, gateway_result, sent_fields):
    session.request.return_value = make_response(200, gateway_result(bfs_bfsTxnId="T"))

    client.authorization.call("ORD-1", "0.005", "buyer@example.com")

    assert sent_fields(session)["bfs_txnAmount"] == "0.01"


@pytest.mark.parametrize("amount", ["1e30", Decimal("123456789012345678901234567.89")])
def test_unrepresentable_amount_is_a_validation_error(client, session, amount):
    with pytest.raises(InvalidParameterError) as excinfo:
        client.authorization.call("ORD-1", amount, "buyer@example.com")

    error = excinfo.value
    assert error.kind == "validation"
    assert error.field == "amount"
    assert str(error) == "Failed to authorize: Amount cannot be represented with 2 decimals"
    session.request.assert_not_called()
