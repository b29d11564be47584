import json
from typing import Any, Optional
from unittest.mock import MagicMock
from urllib.parse import parse_qs

import pytest
import requests
from rma_payments.core.client import GatewayClient
from rma_payments.core.config import GatewayConfig


def make_response(status: int, payload: Any = None, *, text: Optional[str] = None) -> requests.Response:
    """Build a real ``requests.Response`` carrying ``payload`` as JSON (or raw ``text``)."""
    response = requests.Response()
    response.status_code = status
    body = text if text is not None else json.dumps(payload if payload is not None else {})
    response._content = body.encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


def gateway_result(code: str = "00", description: str = "Approved", **fields: Any) -> dict:
    result = {"bfs_responseCode": code, "bfs_responseDesc": description}
    result.update(fields)
    return {"result": result}


def sent_fields(session: MagicMock) -> dict:
    """Decode the form body of the last request made through ``session``."""
    data = session.request.call_args.kwargs["data"]
    return {key: values[0] for key, values in parse_qs(data, keep_blank_values=True).items()}


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(
        base_url="https://gateway.example.bt",
        rsa_key_path="/etc/rma/private_key.pem",
        beneficiary_id="BE10000123",
        payment_description="Online order",
    )


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(config: GatewayConfig, session: MagicMock) -> GatewayClient:
    return GatewayClient(config, session=session)


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response


@pytest.fixture(name="gateway_result")
def gateway_result_fixture():
    return gateway_result


@pytest.fixture(name="sent_fields")
def sent_fields_fixture():
    return sent_fields
