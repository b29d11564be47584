"""
Public facade for the RMA payment gateway client.

The most useful pieces are re-exported so integrators can
``from rma_payments import ...`` without navigating the package.
"""

from .api import authorize, create_gateway_client, debit, inquire_account
from .core import (
    APIError,
    AccountInquiry,
    AuthenticationError,
    Authorization,
    ConfigurationError,
    DebitRequest,
    GatewayClient,
    GatewayConfig,
    GatewayEnvironment,
    GatewayError,
    InvalidParameterError,
    NetworkError,
    RESPONSE_CODES,
    SUCCESS_CODE,
    build_account_inquiry_request,
    build_authorization_request,
    build_debit_request,
    build_environment,
    describe_response_code,
    encode_request,
    load_env_file,
    load_gateway_config,
)
from .core.utils import BANK_CODES, bank_name, format_amount, mask_sensitive

__all__ = (
    "APIError",
    "AccountInquiry",
    "AuthenticationError",
    "Authorization",
    "BANK_CODES",
    "ConfigurationError",
    "DebitRequest",
    "GatewayClient",
    "GatewayConfig",
    "GatewayEnvironment",
    "GatewayError",
    "InvalidParameterError",
    "NetworkError",
    "RESPONSE_CODES",
    "SUCCESS_CODE",
    "authorize",
    "bank_name",
    "build_account_inquiry_request",
    "build_authorization_request",
    "build_debit_request",
    "build_environment",
    "create_gateway_client",
    "debit",
    "describe_response_code",
    "encode_request",
    "format_amount",
    "inquire_account",
    "load_env_file",
    "load_gateway_config",
    "mask_sensitive",
)
