"""
Builders for the form-encoded request envelopes sent to the gateway.

Each builder returns a plain ``dict`` of ``bfs_*`` wire names to strings so
the envelope can be inspected before :func:`encode_request` turns it into a
request body.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from .codes import (
    BENEFICIARY_BANK_CODE,
    MSG_ACCOUNT_ENQUIRY,
    MSG_AUTHORIZATION,
    MSG_DEBIT_REQUEST,
    PROTOCOL_VERSION,
    TRANSACTION_CURRENCY,
)
from .config import GatewayConfig
from .utils import format_amount, generate_timestamp

__all__ = [
    "build_account_inquiry_request",
    "build_authorization_request",
    "build_debit_request",
    "encode_request",
]


def _field(value: Any) -> str:
    return "" if value is None else str(value)


def build_authorization_request(
    config: GatewayConfig,
    order_no: str,
    amount: Any,
    email: str,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """
    Construct the Authorization Request (``AR``) envelope.

    ``amount`` must already be validated; it is rendered with two decimals.
    """
    return {
        "bfs_benfTxnTime": generate_timestamp(now),
        "bfs_orderNo": _field(order_no),
        "bfs_benfBankCode": BENEFICIARY_BANK_CODE,
        "bfs_txnCurrency": TRANSACTION_CURRENCY,
        "bfs_txnAmount": format_amount(amount),
        "bfs_remitterEmail": _field(email),
        "bfs_paymentDesc": str(config.payment_description),
        "bfs_benfId": str(config.beneficiary_id),
        "bfs_msgType": MSG_AUTHORIZATION,
        "bfs_version": PROTOCOL_VERSION,
    }


def build_account_inquiry_request(
    config: GatewayConfig,
    transaction_id: str,
    bank_id: str,
    account_no: str,
) -> Dict[str, str]:
    """Construct the Account Enquiry (``AE``) envelope."""
    return {
        "bfs_bfsTxnId": _field(transaction_id),
        "bfs_remitterBankId": _field(bank_id),
        "bfs_remitterAccNo": _field(account_no),
        "bfs_benfId": str(config.beneficiary_id),
        "bfs_msgType": MSG_ACCOUNT_ENQUIRY,
    }


def build_debit_request(
    config: GatewayConfig,
    transaction_id: str,
    otp: str,
) -> Dict[str, str]:
    """Construct the Debit Request (``DR``) envelope."""
    return {
        "bfs_bfsTxnId": _field(transaction_id),
        "bfs_remitterOtp": _field(otp),
        "bfs_benfId": str(config.beneficiary_id),
        "bfs_msgType": MSG_DEBIT_REQUEST,
    }


def encode_request(fields: Mapping[str, str]) -> str:
    return urlencode(fields)
