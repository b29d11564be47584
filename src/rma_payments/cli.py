"""
Command-line interface for exercising the RMA payment gateway steps.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Iterable, Mapping, Sequence, Tuple

import requests

from .api import authorize, create_gateway_client, debit, inquire_account
from .core.config import GatewayConfig, load_gateway_config
from .core.errors import ConfigurationError, GatewayError
from .core.utils import BANK_CODES


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _print_json(payload: Mapping[str, Any]) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rma-payments",
        description="Run a single step of the RMA payment gateway flow",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing RMA_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    auth = commands.add_parser("authorize", help="Start a transaction (AR)")
    auth.add_argument("--order-no", required=True, help="Merchant order number")
    auth.add_argument("--amount", required=True, help="Amount in BTN, e.g. 100.50")
    auth.add_argument("--email", required=True, help="Remitter email address")

    inquiry = commands.add_parser("inquire", help="Verify the remitter account and send the OTP (AE)")
    inquiry.add_argument("--transaction-id", required=True, help="bfs_bfsTxnId from authorize")
    inquiry.add_argument("--bank-id", required=True, help="Remitter bank code (see 'banks')")
    inquiry.add_argument("--account-no", required=True, help="Remitter account number")

    debit_cmd = commands.add_parser("debit", help="Complete the payment with the OTP (DR)")
    debit_cmd.add_argument("--transaction-id", required=True, help="bfs_bfsTxnId from authorize")
    debit_cmd.add_argument("--otp", required=True, help="One-time passcode received by the remitter")

    commands.add_parser("banks", help="List the known remitter bank codes")
    commands.add_parser("check-config", help="Validate the configuration and RSA key")
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    if args.command == "banks":
        _print_json(BANK_CODES)
        return 0

    overrides = _collect_overrides(args.set or ())

    try:
        config = load_gateway_config(env_file=args.env_file, overrides=overrides)
        config.validate()
    except ConfigurationError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    if args.command == "check-config":
        return _check_config(config)

    client = create_gateway_client(config=config, session=requests.Session())

    try:
        if args.command == "authorize":
            result = authorize(client, args.order_no, args.amount, args.email)
            logging.info("Authorization accepted. Transaction id: %s", result.get("bfs_bfsTxnId"))
        elif args.command == "inquire":
            result = inquire_account(client, args.transaction_id, args.bank_id, args.account_no)
            logging.info("Account verified for %s", result.get("bfs_remitterName"))
        else:
            result = debit(client, args.transaction_id, args.otp)
            logging.info("Debit completed for order %s", result.get("bfs_orderNo"))
    except GatewayError as exc:
        logging.error("%s (kind=%s, retryable=%s)", exc, exc.kind, exc.retryable)
        return 1

    _print_json(result)
    return 0


def _check_config(config: GatewayConfig) -> int:
    try:
        config.load_private_key()
    except ConfigurationError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1
    logging.info("Configuration OK for %s", config.endpoint_root)
    return 0


def main() -> None:
    sys.exit(run_cli())
