"""
Status taxonomy and human-readable reasons for transaction results.
"""
from enum import Enum
from typing import Tuple


class TransactionType(str, Enum):
    """Instruction type, decided by the leading keyword."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionStatus(str, Enum):
    """Terminal status of a processed instruction."""
    SUCCESSFUL = "successful"
    PENDING = "pending"
    FAILED = "failed"


class StatusCode(str, Enum):
    """Short codes identifying the outcome of an instruction."""
    AP00 = "AP00"  # executed
    AP02 = "AP02"  # scheduled for a future date
    AM01 = "AM01"  # amount is not a positive integer
    AC01 = "AC01"  # insufficient funds
    AC02 = "AC02"  # debit and credit accounts are the same
    AC03 = "AC03"  # account not found
    AC04 = "AC04"  # malformed account id
    CU01 = "CU01"  # currency mismatch
    CU02 = "CU02"  # unsupported currency
    DT01 = "DT01"  # malformed or invalid date
    SY01 = "SY01"  # missing keyword (not emitted, parse failures collapse to SY03)
    SY02 = "SY02"  # keyword out of order (not emitted, parse failures collapse to SY03)
    SY03 = "SY03"  # malformed instruction


class DatePosition(str, Enum):
    """Position of an execute-by date relative to the reference date."""
    PAST = "past"
    TODAY = "today"
    FUTURE = "future"


SUPPORTED_CURRENCIES: Tuple[str, ...] = ("NGN", "USD", "GBP", "GHS")


class PaymentMessages:
    """Reason texts reported in ``status_reason``."""
    TRANSACTION_SUCCESSFUL = "Transaction executed successfully"
    TRANSACTION_PENDING = "Transaction scheduled for future execution"
    INVALID_AMOUNT = "Amount must be a positive integer"
    INVALID_ACCOUNT_ID = "Invalid account ID format"
    INVALID_DATE_FORMAT = "Invalid date format. Expected a valid YYYY-MM-DD date"
    UNSUPPORTED_CURRENCY = "Unsupported currency"
    SAME_ACCOUNT_ERROR = "Debit and credit accounts cannot be the same"
    ACCOUNT_NOT_FOUND = "Account not found"
    CURRENCY_MISMATCH = "Currency mismatch between instruction and accounts"
    INSUFFICIENT_FUNDS = "Insufficient funds in debit account"
    MALFORMED_INSTRUCTION = "Malformed instruction"


def unsupported_currency_reason() -> str:
    """Build the CU02 reason listing every supported currency."""
    supported = ", ".join(SUPPORTED_CURRENCIES[:-1]) + f", and {SUPPORTED_CURRENCIES[-1]}"
    return f"{PaymentMessages.UNSUPPORTED_CURRENCY}. Only {supported} are supported"
