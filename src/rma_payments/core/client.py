"""
HTTP transport for the RMA payment gateway.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from urllib.parse import urljoin

import requests

from .codes import API_PATH, FORM_CONTENT_TYPE
from .config import GatewayConfig
from .errors import APIError, ConfigurationError, InvalidParameterError, NetworkError
from .services import AccountInquiry, Authorization, DebitRequest

__all__ = ["GatewayClient"]


def _decode_error_body(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    if not isinstance(body, dict):
        return {}
    result = body.get("result")
    return result if isinstance(result, dict) else {}


class GatewayClient:
    """
    Sends one form-encoded request per call to the gateway endpoint.

    The client validates its configuration on construction and classifies
    HTTP outcomes into the error taxonomy. Business-level response codes in a
    2xx body are left to the step services.
    """

    def __init__(
        self,
        config: Optional[GatewayConfig],
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        if config is None:
            raise ConfigurationError("Configuration is required")
        config.validate()
        self.config = config
        self.session = session or requests.Session()
        self._authorization: Optional[Authorization] = None
        self._account_inquiry: Optional[AccountInquiry] = None
        self._debit_request: Optional[DebitRequest] = None

    @property
    def endpoint(self) -> str:
        """The API path is absolute, so any path in ``base_url`` is replaced."""
        return urljoin(f"{self.config.endpoint_root}/", API_PATH)

    @property
    def authorization(self) -> Authorization:
        if self._authorization is None:
            self._authorization = Authorization(self)
        return self._authorization

    @property
    def account_inquiry(self) -> AccountInquiry:
        if self._account_inquiry is None:
            self._account_inquiry = AccountInquiry(self)
        return self._account_inquiry

    @property
    def debit_request(self) -> DebitRequest:
        if self._debit_request is None:
            self._debit_request = DebitRequest(self)
        return self._debit_request

    def post(self, body: str = "", headers: Optional[Mapping[str, str]] = None) -> Any:
        return self._request("POST", body=body, headers=headers)

    def get(self, headers: Optional[Mapping[str, str]] = None) -> Any:
        return self._request("GET", headers=headers)

    def _build_headers(self, custom: Optional[Mapping[str, str]]) -> Dict[str, str]:
        headers = {"Content-Type": FORM_CONTENT_TYPE}
        if custom:
            headers.update(custom)
        return headers

    def _request(
        self,
        method: str,
        *,
        body: str = "",
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        try:
            response = self.session.request(
                method,
                self.endpoint,
                data=body if method == "POST" and body else None,
                headers=self._build_headers(headers),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Network error: {exc}", cause=exc) from exc

        return self._handle_response(response)

    def _handle_response(self, response: requests.Response) -> Any:
        status = response.status_code
        if 200 <= status < 300:
            try:
                return response.json()
            except ValueError as exc:
                raise APIError(
                    f"Failed to parse JSON from gateway (HTTP {status})",
                    status_code=status,
                    cause=exc,
                ) from exc
        if 400 <= status < 500:
            result = _decode_error_body(response)
            raise InvalidParameterError(
                result.get("bfs_responseDesc") or "Client error",
                response_code=result.get("bfs_responseCode"),
                response_description=result.get("bfs_responseDesc"),
                status_code=status,
            )
        if 500 <= status < 600:
            result = _decode_error_body(response)
            raise APIError(
                result.get("bfs_responseDesc") or "Server error",
                response_code=result.get("bfs_responseCode"),
                response_description=result.get("bfs_responseDesc"),
                status_code=status,
            )
        raise NetworkError(f"Unexpected response status: {status}", status_code=status)
