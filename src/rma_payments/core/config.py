"""
Configuration objects and loaders for the RMA payment gateway.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

from cryptography.hazmat.primitives import serialization

from .environment import build_environment
from .errors import ConfigurationError

__all__ = [
    "DEFAULT_OPEN_TIMEOUT",
    "DEFAULT_TIMEOUT",
    "GatewayConfig",
    "load_gateway_config",
]

DEFAULT_TIMEOUT = 30.0
DEFAULT_OPEN_TIMEOUT = 10.0

_PARAMETER_TO_ENV_KEY = {
    "base_url": "RMA_BASE_URL",
    "rsa_key_path": "RMA_RSA_KEY_PATH",
    "beneficiary_id": "RMA_BENEFICIARY_ID",
    "payment_description": "RMA_PAYMENT_DESCRIPTION",
    "timeout": "RMA_TIMEOUT",
    "open_timeout": "RMA_OPEN_TIMEOUT",
}

_REQUIRED_FIELDS = ("base_url", "rsa_key_path", "beneficiary_id", "payment_description")


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _parse_timeout(raw: Optional[str], env_key: str, default: float) -> float:
    if _blank(raw):
        return default
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ConfigurationError(f"{env_key} must be a number of seconds, got '{raw}'") from exc
    if not value.is_finite() or value <= 0:
        raise ConfigurationError(f"{env_key} must be greater than zero")
    return float(value)


def _positive_seconds(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return 0 < value < float("inf")


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown gateway parameter '{key}'") from exc
        overrides[env_key] = str(value)
    return overrides


@dataclass(frozen=True)
class GatewayConfig:
    """
    Immutable connection profile for the gateway.

    Required fields may be left empty here; :class:`GatewayClient` refuses to
    start with an incomplete configuration and lists what is missing.
    """

    base_url: Optional[str] = None
    rsa_key_path: Optional[str] = None
    beneficiary_id: Optional[str] = None
    payment_description: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    open_timeout: float = DEFAULT_OPEN_TIMEOUT

    @staticmethod
    def required_fields() -> Tuple[str, ...]:
        return _REQUIRED_FIELDS

    def missing_fields(self) -> List[str]:
        return [name for name in _REQUIRED_FIELDS if _blank(getattr(self, name))]

    def uses_https(self) -> bool:
        if _blank(self.base_url):
            return False
        parsed = urlparse(str(self.base_url).strip())
        return parsed.scheme.lower() == "https" and bool(parsed.netloc)

    def invalid_timeouts(self) -> List[str]:
        return [
            name for name in ("timeout", "open_timeout") if not _positive_seconds(getattr(self, name))
        ]

    def is_valid(self) -> bool:
        return not self.missing_fields() and self.uses_https() and not self.invalid_timeouts()

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` unless the configuration is usable."""
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration fields: {', '.join(missing)}"
            )
        if not self.uses_https():
            raise ConfigurationError(f"base_url must be an https:// URL, got '{self.base_url}'")
        invalid = self.invalid_timeouts()
        if invalid:
            raise ConfigurationError(
                f"{', '.join(invalid)} must be a number of seconds greater than zero"
            )

    @property
    def endpoint_root(self) -> str:
        return str(self.base_url or "").strip().rstrip("/")

    @property
    def request_timeout(self) -> Tuple[float, float]:
        """``(connect, read)`` timeout pair in the form ``requests`` expects."""
        return (self.open_timeout, self.timeout)

    def load_private_key(self) -> Any:
        """
        Load the PEM private key referenced by ``rsa_key_path``.

        The gateway client never signs requests itself; the key is exposed for
        integrators that sign out-of-band and for configuration checks.
        """
        if _blank(self.rsa_key_path):
            raise ConfigurationError("Missing required configuration fields: rsa_key_path")
        path = Path(str(self.rsa_key_path))
        try:
            pem = path.read_bytes()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read RSA key at {path}: {exc.strerror}") from exc
        try:
            return serialization.load_pem_private_key(pem, password=None)
        except (ValueError, TypeError) as exc:
            raise ConfigurationError(f"RSA key at {path} is not a usable PEM private key") from exc

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "GatewayConfig":
        def _text(key: str) -> Optional[str]:
            raw = values.get(key)
            if raw is None:
                return None
            stripped = str(raw).strip()
            return stripped or None

        return cls(
            base_url=_text("RMA_BASE_URL"),
            rsa_key_path=_text("RMA_RSA_KEY_PATH"),
            beneficiary_id=_text("RMA_BENEFICIARY_ID"),
            payment_description=_text("RMA_PAYMENT_DESCRIPTION"),
            timeout=_parse_timeout(values.get("RMA_TIMEOUT"), "RMA_TIMEOUT", DEFAULT_TIMEOUT),
            open_timeout=_parse_timeout(
                values.get("RMA_OPEN_TIMEOUT"), "RMA_OPEN_TIMEOUT", DEFAULT_OPEN_TIMEOUT
            ),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        base_url: Optional[str] = None,
        rsa_key_path: Optional[str] = None,
        beneficiary_id: Optional[str] = None,
        payment_description: Optional[str] = None,
        timeout: Optional[float | str] = None,
        open_timeout: Optional[float | str] = None,
    ) -> "GatewayConfig":
        parameter_overrides = _collect_parameter_overrides(
            {
                "base_url": base_url,
                "rsa_key_path": rsa_key_path,
                "beneficiary_id": beneficiary_id,
                "payment_description": payment_description,
                "timeout": timeout,
                "open_timeout": open_timeout,
            }
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_gateway_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    base_url: Optional[str] = None,
    rsa_key_path: Optional[str] = None,
    beneficiary_id: Optional[str] = None,
    payment_description: Optional[str] = None,
    timeout: Optional[float | str] = None,
    open_timeout: Optional[float | str] = None,
) -> GatewayConfig:
    """
    Convenience wrapper that mirrors :meth:`GatewayConfig.from_env`.

    Settings can come from the environment, a ``.env`` file, ``overrides``
    keyed by ``RMA_*`` names, explicit keyword arguments, or any mix of them.
    Explicit keyword arguments win.
    """
    return GatewayConfig.from_env(
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
