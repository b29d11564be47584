"""
Wire-level constants shared by the request builders and the step services.
"""

from __future__ import annotations

from typing import Dict, Optional

__all__ = [
    "API_PATH",
    "BENEFICIARY_BANK_CODE",
    "FORM_CONTENT_TYPE",
    "MSG_ACCOUNT_ENQUIRY",
    "MSG_AUTHORIZATION",
    "MSG_DEBIT_REQUEST",
    "PROTOCOL_VERSION",
    "RESPONSE_CODES",
    "SUCCESS_CODE",
    "TRANSACTION_CURRENCY",
    "describe_response_code",
]

API_PATH = "/BFSSecure/nvpapi"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

MSG_AUTHORIZATION = "AR"
MSG_ACCOUNT_ENQUIRY = "AE"
MSG_DEBIT_REQUEST = "DR"

BENEFICIARY_BANK_CODE = "01"
TRANSACTION_CURRENCY = "BTN"
PROTOCOL_VERSION = "5.0"

SUCCESS_CODE = "00"

RESPONSE_CODES: Dict[str, str] = {
    "00": "Success",
    "01": "Invalid request",
    "02": "Invalid beneficiary",
    "03": "Invalid transaction",
    "04": "Insufficient funds",
    "05": "Invalid OTP",
    "06": "OTP expired",
    "99": "System error",
}


def describe_response_code(code: Optional[str]) -> Optional[str]:
    """
    Return the documented meaning of ``code``.

    Codes outside the table are defined by the remote side and yield ``None``;
    callers should fall back to the ``bfs_responseDesc`` they received.
    """
    if code is None:
        return None
    return RESPONSE_CODES.get(str(code))
