"""
Core primitives that implement the RMA payment gateway protocol.
"""

from .client import GatewayClient
from .codes import RESPONSE_CODES, SUCCESS_CODE, describe_response_code
from .config import GatewayConfig, load_gateway_config
from .environment import GatewayEnvironment, build_environment, load_env_file
from .errors import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    GatewayError,
    InvalidParameterError,
    NetworkError,
)
from .payloads import (
    build_account_inquiry_request,
    build_authorization_request,
    build_debit_request,
    encode_request,
)
from .services import AccountInquiry, Authorization, DebitRequest

__all__ = [
    "APIError",
    "AccountInquiry",
    "AuthenticationError",
    "Authorization",
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
    "build_account_inquiry_request",
    "build_authorization_request",
    "build_debit_request",
    "build_environment",
    "describe_response_code",
    "encode_request",
    "load_env_file",
    "load_gateway_config",
]
