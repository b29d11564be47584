"""
Walk a payment through authorize -> account inquiry -> debit using the public API.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from rma_payments import (
    ConfigurationError,
    GatewayError,
    NetworkError,
    bank_name,
    create_gateway_client,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an RMA gateway payment end to end")
    parser.add_argument("--env-file", default=".env", help="Path to the .env file with RMA_* settings")
    parser.add_argument("--log-level", default="INFO", help="Python logging level (default: INFO)")
    parser.add_argument("--order-no", required=True, help="Merchant order number")
    parser.add_argument("--amount", required=True, help="Amount in BTN")
    parser.add_argument("--email", required=True, help="Remitter email address")
    parser.add_argument("--bank-id", required=True, help="Remitter bank code, e.g. 1010")
    parser.add_argument("--account-no", required=True, help="Remitter account number")
    parser.add_argument("--retries", type=int, default=3, help="Attempts for network failures")
    return parser.parse_args()


def _with_retries(attempts: int, func, *args):
    attempt = 1
    while True:
        try:
            return func(*args)
        except NetworkError as exc:
            if attempt >= attempts:
                raise
            delay = 2 ** (attempt - 1)
            logging.warning("Attempt %d failed (%s); retrying in %ss", attempt, exc, delay)
            time.sleep(delay)
            attempt += 1


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        client = create_gateway_client(env_file=args.env_file)
    except ConfigurationError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        auth = _with_retries(args.retries, client.authorization, args.order_no, args.amount, args.email)
        transaction_id = auth["bfs_bfsTxnId"]
        logging.info("Authorized transaction %s", transaction_id)

        logging.info("Verifying account at %s", bank_name(args.bank_id) or args.bank_id)
        account = _with_retries(
            args.retries, client.account_inquiry, transaction_id, args.bank_id, args.account_no
        )
        logging.info("Account holder: %s", account.get("bfs_remitterName"))

        otp = input("OTP sent to the remitter: ").strip()
        # The debit is not idempotent, so it is never retried here.
        result = client.debit_request(transaction_id, otp)
    except GatewayError as exc:
        logging.error("Payment failed: %s", exc)
        return 1

    logging.info(
        "Paid %s %s for order %s",
        result.get("bfs_txnAmount"),
        result.get("bfs_txnCurrency"),
        result.get("bfs_orderNo"),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
