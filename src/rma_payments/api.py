"""
Public, high-level helpers for talking to the RMA payment gateway.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from .core.client import GatewayClient
from .core.config import GatewayConfig, load_gateway_config

__all__ = [
    "authorize",
    "create_gateway_client",
    "debit",
    "inquire_account",
]


def create_gateway_client(
    *,
    config: Optional[GatewayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    base_url: Optional[str] = None,
    rsa_key_path: Optional[str] = None,
    beneficiary_id: Optional[str] = None,
    payment_description: Optional[str] = None,
    timeout: Optional[float | str] = None,
    open_timeout: Optional[float | str] = None,
) -> GatewayClient:
    """
    Construct a :class:`GatewayClient`.

    Callers can either supply a ready-made :class:`GatewayConfig` or let the
    helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            base_url,
            rsa_key_path,
            beneficiary_id,
            payment_description,
            timeout,
            open_timeout,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built GatewayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_gateway_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            base_url=base_url,
            rsa_key_path=rsa_key_path,
            beneficiary_id=beneficiary_id,
            payment_description=payment_description,
            timeout=timeout,
            open_timeout=open_timeout,
        )
    return GatewayClient(cfg, session=session)


def authorize(client: GatewayClient, order_no: str, amount: Any, email: str) -> Dict[str, Any]:
    """Run the Authorization step and return the gateway ``result`` mapping."""
    return client.authorization.call(order_no, amount, email)


def inquire_account(
    client: GatewayClient,
    transaction_id: str,
    bank_id: str,
    account_no: str,
) -> Dict[str, Any]:
    """Run the Account Inquiry step; the gateway then sends the OTP to the remitter."""
    return client.account_inquiry.call(transaction_id, bank_id, account_no)


def debit(client: GatewayClient, transaction_id: str, otp: str) -> Dict[str, Any]:
    return client.debit_request.call(transaction_id, otp)
