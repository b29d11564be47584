"""
Input helpers used by the request builders and by integrators.

Only :func:`format_amount`, :func:`parse_amount`, :func:`valid_email` and
:func:`generate_timestamp` sit on the request path. The account, phone and
bank-code checks are available to callers but are not enforced before an
Account Inquiry; the gateway performs its own validation there.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional

__all__ = [
    "BANK_CODES",
    "bank_name",
    "format_amount",
    "generate_timestamp",
    "mask_sensitive",
    "parse_amount",
    "parse_date",
    "round_amount",
    "sanitize_string",
    "valid_account_number",
    "valid_amount",
    "valid_bank_code",
    "valid_date_format",
    "valid_email",
    "valid_phone_number",
]

BANK_CODES: Dict[str, str] = {
    "1010": "Bank of Bhutan (BOBL)",
    "1020": "Bhutan National Bank (BNBL)",
    "1030": "Druk PNB Bank Limited (DPNBL)",
    "1040": "Tashi Bank (TBank)",
    "1050": "Bhutan Development Bank Limited (BDBL)",
    "1060": "Digital Kidu (DK Bank)",
}

_EMAIL_RE = re.compile(r"[\w+\-.]+@[a-z\d-]+(\.[a-z\d-]+)*\.[a-z]+", re.IGNORECASE)
_ACCOUNT_RE = re.compile(r"\d{8,15}")
_PHONE_RE = re.compile(r"\d{8}")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_CENTS = Decimal("0.01")


def generate_timestamp(now: Optional[datetime] = None) -> str:
    """Return ``now`` (default: current time) as a UTC ``YYYYMMDDHHMMSS`` string."""
    moment = now if now is not None else datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y%m%d%H%M%S")


def parse_amount(amount: Any) -> Optional[Decimal]:
    """
    Convert ``amount`` into a finite :class:`Decimal`.

    Integers, floats, decimals and numeric strings are accepted. Booleans,
    ``None`` and anything that does not parse as a finite number yield
    ``None``.
    """
    if amount is None or isinstance(amount, bool):
        return None
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, (int, float, str)):
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not value.is_finite():
        return None
    return value


def round_amount(amount: Any) -> Decimal:
    """
    Round ``amount`` to cents, half up.

    Raises :class:`ValueError` when ``amount`` is not a number or has too many
    digits to carry two decimals.
    """
    value = parse_amount(amount)
    if value is None:
        raise ValueError(f"Amount {amount!r} is not a number")
    try:
        return value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Amount {amount!r} cannot be represented with 2 decimals") from exc


def valid_amount(amount: Any) -> bool:
    """True when ``amount`` is still greater than zero once rounded to cents."""
    try:
        return round_amount(amount) > 0
    except ValueError:
        return False


def format_amount(amount: Any) -> str:
    """
    Format ``amount`` with exactly two decimal places, rounding half up.

    Formatting is idempotent: passing a formatted string returns it unchanged.
    """
    return str(round_amount(amount))


def valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return _EMAIL_RE.fullmatch(str(email)) is not None


def valid_account_number(account_number: Optional[str]) -> bool:
    """Account numbers are 8 to 15 digits."""
    if not account_number:
        return False
    return _ACCOUNT_RE.fullmatch(str(account_number)) is not None


def valid_phone_number(phone_number: Optional[str]) -> bool:
    """Bhutanese phone numbers are 8 digits."""
    if not phone_number:
        return False
    return _PHONE_RE.fullmatch(str(phone_number)) is not None


def valid_date_format(date_string: Optional[str]) -> bool:
    if not date_string:
        return False
    return _DATE_RE.fullmatch(str(date_string)) is not None


def parse_date(date_string: Optional[str]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string, returning ``None`` when it is not a real date."""
    if not valid_date_format(date_string):
        return None
    try:
        return date.fromisoformat(str(date_string))
    except ValueError:
        return None


def sanitize_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def mask_sensitive(data: Any, visible_chars: int = 4) -> str:
    """
    Mask all but the first and last ``visible_chars`` characters of ``data``.

    Values no longer than ``2 * visible_chars`` are returned unchanged.
    """
    if data is None:
        return ""
    text = str(data)
    if not text:
        return ""
    if len(text) <= visible_chars * 2:
        return text
    hidden = "*" * (len(text) - visible_chars * 2)
    return f"{text[:visible_chars]}{hidden}{text[-visible_chars:]}"


def bank_name(bank_code: Any) -> Optional[str]:
    """Return the display name for ``bank_code`` or ``None`` when it is unknown."""
    if bank_code is None:
        return None
    return BANK_CODES.get(str(bank_code))


def valid_bank_code(bank_code: Any) -> bool:
    if bank_code is None:
        return False
    return str(bank_code) in BANK_CODES
