"""
Field validators for parsed instructions.

All predicates are total over arbitrary strings and never raise.
"""
import string
from datetime import date
from typing import Optional

from core.messages import SUPPORTED_CURRENCIES, DatePosition

_DIGITS = frozenset(string.digits)

_ACCOUNT_ID_CHARS = frozenset(string.ascii_letters + string.digits + "-.@")

# Longest amount accepted; valid amounts fit in a signed 64-bit integer
MAX_AMOUNT_DIGITS = 18


def _all_digits(value: str) -> bool:
    return all(char in _DIGITS for char in value)


def is_positive_integer(amount: Optional[str]) -> bool:
    """
    Check that an amount is a positive whole number written in plain digits,
    at most MAX_AMOUNT_DIGITS long.

    Args:
        amount: Raw amount token

    Returns:
        True if valid, False otherwise
    """
    if not amount:
        return False

    if "." in amount or "-" in amount:
        return False

    if not _all_digits(amount):
        return False

    if len(amount) > MAX_AMOUNT_DIGITS:
        return False

    return amount.strip("0") != ""


def is_valid_account_id(account_id: Optional[str]) -> bool:
    """Account ids may hold letters, digits, hyphens, periods and @ only."""
    if not account_id:
        return False
    return all(char in _ACCOUNT_ID_CHARS for char in account_id)


def is_valid_date(date_str: Optional[str]) -> bool:
    """
    Validate a YYYY-MM-DD date string and check it names a real calendar day.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid, False otherwise
    """
    if not date_str or len(date_str) != 10:
        return False

    if date_str[4] != "-" or date_str[7] != "-":
        return False

    year, month, day = date_str[0:4], date_str[5:7], date_str[8:10]
    if not (_all_digits(year) and _all_digits(month) and _all_digits(day)):
        return False

    year_num, month_num, day_num = int(year), int(month), int(day)

    if month_num < 1 or month_num > 12:
        return False
    if day_num < 1 or day_num > 31:
        return False
    if year_num < 1000:
        return False

    try:
        parsed = date(year_num, month_num, day_num)
    except ValueError:
        # e.g. 2024-02-30
        return False

    return parsed.isoformat() == date_str


def is_supported_currency(currency: Optional[str]) -> bool:
    """Currency codes are matched exactly against the supported set."""
    return currency in SUPPORTED_CURRENCIES


def compare_date(date_str: str, reference_date: date) -> DatePosition:
    """
    Classify a validated YYYY-MM-DD date against a reference calendar date.

    Args:
        date_str: Date that already passed is_valid_date
        reference_date: Current UTC calendar date supplied by the caller

    Returns:
        DatePosition.PAST, TODAY or FUTURE
    """
    instruction_date = date.fromisoformat(date_str)

    if instruction_date < reference_date:
        return DatePosition.PAST
    if instruction_date == reference_date:
        return DatePosition.TODAY
    return DatePosition.FUTURE
