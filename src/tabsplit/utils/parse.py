from __future__ import annotations

import re

from tabsplit.errors import InvalidAmountError, InvalidFormatError, NonPositiveAmountError

AMOUNT_RE = re.compile(r"([0-9]+)(?:\.([0-9]{1,2}))?", re.ASCII)

# Largest amount a signed 64-bit column can hold.
MAX_AMOUNT_CENTS = 2**63 - 1

CURRENCY_SYMBOL = "$"


def _parse_hundredths(value: str, label: str) -> int:
    match = AMOUNT_RE.fullmatch(value.strip())
    if match is None:
        raise InvalidFormatError(f"Invalid {label} format")

    whole, fraction = match.group(1), match.group(2) or ""
    if len(whole.lstrip("0")) > len(str(MAX_AMOUNT_CENTS)):
        raise InvalidAmountError(f"Invalid {label}")
    result = int(whole) * 100 + int(fraction.ljust(2, "0"))

    if result > MAX_AMOUNT_CENTS:
        raise InvalidAmountError(f"Invalid {label}")
    return result


def parse_cents(value: str, allow_zero: bool = False) -> int:
    """
    Parse a user-entered decimal amount into integer cents.

    Accepted: "12", "12.5", "12.50". Rejected: "12.345", "-1", "$12", "1,000", "".
    """
    cents = _parse_hundredths(value, "amount")
    if cents == 0 and not allow_zero:
        raise NonPositiveAmountError("Amount must be greater than zero")
    return cents


def parse_percent(value: str) -> int:
    """Parse a percentage such as "18" or "18.5" into basis points (1850)."""
    return _parse_hundredths(value, "percent")


def format_cents_plain(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    whole, rest = divmod(abs(cents), 100)
    return f"{sign}{whole}.{rest:02d}"


def format_cents(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{format_cents_plain(abs(cents))}"
