"""
The three protocol steps: Authorization, Account Inquiry and Debit Request.

Each step builds its envelope, posts it through :class:`GatewayClient` and
checks the business response code before handing back the ``result``
mapping. Steps keep no state between calls; the caller carries the
transaction id from one step to the next.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from .codes import SUCCESS_CODE
from .errors import AuthenticationError, InvalidParameterError, wrap_step_error
from .payloads import (
    build_account_inquiry_request,
    build_authorization_request,
    build_debit_request,
    encode_request,
)
from .utils import mask_sensitive, parse_amount, round_amount, valid_email

if TYPE_CHECKING:
    from .client import GatewayClient
    from .config import GatewayConfig

__all__ = ["AccountInquiry", "Authorization", "DebitRequest", "validate_result"]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_result(response: Any, step_name: str) -> Dict[str, Any]:
    """
    Return ``response["result"]`` when it carries the success code.

    Raises :class:`AuthenticationError` when the result is missing or the
    gateway reported a failure code.
    """
    result = response.get("result") if isinstance(response, Mapping) else None
    if not isinstance(result, Mapping):
        raise AuthenticationError("No response data in response")

    code = result.get("bfs_responseCode")
    if code != SUCCESS_CODE:
        description = result.get("bfs_responseDesc")
        raise AuthenticationError(
            f"{step_name} failed: {description or 'Unknown error'}",
            response_code=code,
            response_description=description,
        )
    return dict(result)


class _Step:
    """Shared plumbing for a step: post the envelope, then check the result."""

    step_name = ""
    failure_prefix = ""

    def __init__(self, client: "GatewayClient") -> None:
        self.client = client

    @property
    def config(self) -> "GatewayConfig":
        return self.client.config

    def _submit(self, fields: Mapping[str, str]) -> Dict[str, Any]:
        response = self.client.post(body=encode_request(fields))
        return validate_result(response, self.step_name)


class Authorization(_Step):
    """Start a transaction (``AR``); the result carries ``bfs_bfsTxnId``."""

    step_name = "Authorization"
    failure_prefix = "Failed to authorize"

    def call(
        self,
        order_no: str,
        amount: Any,
        email: str,
        *,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        try:
            self.validate_request(order_no, amount, email)
            fields = build_authorization_request(self.config, order_no, amount, email, now=now)
            logging.info(
                "Submitting authorization for order %s (%s %s)",
                order_no,
                fields["bfs_txnAmount"],
                fields["bfs_txnCurrency"],
            )
            return self._submit(fields)
        except Exception as exc:
            raise wrap_step_error(self.failure_prefix, exc) from exc

    __call__ = call

    @staticmethod
    def validate_request(order_no: Any, amount: Any, email: Any) -> None:
        """Check the arguments in order; the first failure wins."""
        if _is_blank(order_no):
            raise InvalidParameterError("Order number is required", field="order_no")
        if _is_blank(amount):
            raise InvalidParameterError("Amount is required", field="amount")
        if _is_blank(email):
            raise InvalidParameterError("Email is required", field="email")
        if parse_amount(amount) is None:
            raise InvalidParameterError("Amount must be a number", field="amount")
        try:
            rounded = round_amount(amount)
        except ValueError as exc:
            raise InvalidParameterError(
                "Amount cannot be represented with 2 decimals", field="amount"
            ) from exc
        if rounded <= 0:
            raise InvalidParameterError("Amount must be greater than zero", field="amount")
        if not valid_email(email):
            raise InvalidParameterError("Email must be a valid email", field="email")


class AccountInquiry(_Step):
    """
    Bind the remitter's account to a transaction (``AE``) and trigger the OTP.

    Bank id and account number are sent as given; the gateway validates them.
    """

    step_name = "Account inquiry"
    failure_prefix = "Failed to fetch account inquiry"

    def call(self, transaction_id: str, bank_id: str, account_no: str) -> Dict[str, Any]:
        try:
            fields = build_account_inquiry_request(self.config, transaction_id, bank_id, account_no)
            logging.info(
                "Submitting account inquiry for transaction %s (bank %s, account %s)",
                transaction_id,
                bank_id,
                mask_sensitive(account_no, 2),
            )
            return self._submit(fields)
        except Exception as exc:
            raise wrap_step_error(self.failure_prefix, exc) from exc

    __call__ = call


class DebitRequest(_Step):
    """
    Complete the debit with the remitter's OTP (``DR``).

    This step is not idempotent and nothing here deduplicates repeated calls.
    """

    step_name = "Debit request"
    failure_prefix = "Failed to fetch debit request"

    def call(self, transaction_id: str, otp: str) -> Dict[str, Any]:
        try:
            fields = build_debit_request(self.config, transaction_id, otp)
            logging.info("Submitting debit request for transaction %s", transaction_id)
            return self._submit(fields)
        except Exception as exc:
            raise wrap_step_error(self.failure_prefix, exc) from exc

    __call__ = call
