"""
Payment instruction processing service.

Runs a parsed instruction through the ordered rule chain and produces
exactly one TransactionResult. Rule violations come back as failed
results; only internal faults raise.
"""
from datetime import date
from typing import List, NamedTuple, Optional, Sequence, Tuple

from core.exceptions import ProcessingError
from core.logger import setup_logger
from core.messages import (
    DatePosition,
    PaymentMessages,
    StatusCode,
    TransactionStatus,
    unsupported_currency_reason,
)
from core.parsing import parse_instruction
from core.schema import Account, AccountSnapshot, ParsedInstruction, TransactionResult
from core.validators import (
    MAX_AMOUNT_DIGITS,
    compare_date,
    is_positive_integer,
    is_supported_currency,
    is_valid_account_id,
    is_valid_date,
)

logger = setup_logger(__name__)


class Rejection(NamedTuple):
    """Failed rule: status code plus reason text."""
    code: StatusCode
    reason: str


def leading_integer(value: Optional[str]) -> Optional[int]:
    """
    Read the signed integer prefix of a raw amount token.

    Used to echo the amount on AM01 rejections: "5.5" -> 5, "-5" -> -5,
    "abc" -> None. Prefixes longer than MAX_AMOUNT_DIGITS also give None.
    """
    if not value:
        return None

    text = value.lstrip()
    sign = ""
    if text[:1] in ("+", "-"):
        sign, text = text[0], text[1:]

    digits = []
    for char in text:
        if not ("0" <= char <= "9"):
            break
        digits.append(char)

    if not digits or len(digits) > MAX_AMOUNT_DIGITS:
        return None
    return int(sign + "".join(digits))


def snapshot_all(accounts: Sequence[Account]) -> List[AccountSnapshot]:
    """Echo every input account unchanged."""
    return [
        AccountSnapshot(
            id=account.id,
            balance=account.balance,
            balance_before=account.balance,
            currency=account.currency.upper(),
        )
        for account in accounts
    ]


def snapshot_parties(
    accounts: Sequence[Account],
    debit: Account,
    credit: Account,
    new_debit_balance: Optional[int] = None,
    new_credit_balance: Optional[int] = None,
) -> List[AccountSnapshot]:
    """
    Snapshot only the debit and credit accounts, keeping input order.

    Balances default to their pre-transfer values.
    """
    if new_debit_balance is None:
        new_debit_balance = debit.balance
    if new_credit_balance is None:
        new_credit_balance = credit.balance

    snapshots = []
    for account in accounts:
        if account.id == debit.id:
            balance, before = new_debit_balance, debit.balance
        elif account.id == credit.id:
            balance, before = new_credit_balance, credit.balance
        else:
            continue
        snapshots.append(
            AccountSnapshot(
                id=account.id,
                balance=balance,
                balance_before=before,
                currency=account.currency.upper(),
            )
        )
    return snapshots


def find_account(accounts: Sequence[Account], account_id: str) -> Optional[Account]:
    """First account with a matching id, or None."""
    for account in accounts:
        if account.id == account_id:
            return account
    return None


class PaymentInstructionService:
    """Service evaluating payment instructions against caller-supplied accounts."""

    def check_fields(self, parsed: ParsedInstruction) -> Optional[Rejection]:
        """
        Rules that need no account lookup, in order.

        Returns:
            First rejection hit, or None if every rule passed
        """
        if not is_positive_integer(parsed.amount):
            return Rejection(StatusCode.AM01, PaymentMessages.INVALID_AMOUNT)

        for account_id in (parsed.debit_account, parsed.credit_account):
            if not is_valid_account_id(account_id):
                return Rejection(
                    StatusCode.AC04,
                    f"{PaymentMessages.INVALID_ACCOUNT_ID}: {account_id}"
                )

        if parsed.execute_by and not is_valid_date(parsed.execute_by):
            return Rejection(StatusCode.DT01, PaymentMessages.INVALID_DATE_FORMAT)

        if not is_supported_currency(parsed.currency):
            return Rejection(StatusCode.CU02, unsupported_currency_reason())

        if parsed.debit_account == parsed.credit_account:
            return Rejection(StatusCode.AC02, PaymentMessages.SAME_ACCOUNT_ERROR)

        return None

    def resolve_accounts(
        self,
        parsed: ParsedInstruction,
        accounts: Sequence[Account]
    ) -> Tuple[Optional[Account], Optional[Account], Optional[Rejection]]:
        """
        Look up both parties.

        Returns:
            (debit, credit, None) when both exist, otherwise a rejection for the
            first missing one
        """
        debit = find_account(accounts, parsed.debit_account)
        if debit is None:
            return None, None, Rejection(
                StatusCode.AC03,
                f"{PaymentMessages.ACCOUNT_NOT_FOUND}: {parsed.debit_account}"
            )

        credit = find_account(accounts, parsed.credit_account)
        if credit is None:
            return None, None, Rejection(
                StatusCode.AC03,
                f"{PaymentMessages.ACCOUNT_NOT_FOUND}: {parsed.credit_account}"
            )

        return debit, credit, None

    def check_transfer(
        self,
        parsed: ParsedInstruction,
        amount: int,
        debit: Account,
        credit: Account
    ) -> Optional[Rejection]:
        """Rules that compare the instruction against the resolved accounts."""
        debit_currency = debit.currency.upper()

        if debit_currency != credit.currency.upper():
            return Rejection(StatusCode.CU01, PaymentMessages.CURRENCY_MISMATCH)

        if parsed.currency != debit_currency:
            return Rejection(StatusCode.CU01, PaymentMessages.CURRENCY_MISMATCH)

        if debit.balance < amount:
            return Rejection(
                StatusCode.AC01,
                f"{PaymentMessages.INSUFFICIENT_FUNDS}: has {debit.balance} {parsed.currency}, "
                f"needs {amount} {parsed.currency}"
            )

        return None

    def process(
        self,
        accounts: Sequence[Account],
        instruction: str,
        reference_date: date
    ) -> TransactionResult:
        """
        Evaluate one instruction.

        Args:
            accounts: Accounts supplied with the request (never mutated)
            instruction: Raw instruction text
            reference_date: Current UTC calendar date used to classify execute-by dates

        Returns:
            TransactionResult in a successful, pending or failed state

        Raises:
            ProcessingError: If evaluation fails for a reason other than a rule violation
        """
        try:
            return self._evaluate(accounts, instruction, reference_date)
        except Exception as e:
            logger.error(f"Payment instruction processing failed: {e}", exc_info=True)
            raise ProcessingError(
                "Failed to process payment instruction",
                details={"error": str(e)}
            ) from e

    def _evaluate(
        self,
        accounts: Sequence[Account],
        instruction: str,
        reference_date: date
    ) -> TransactionResult:
        parsed = parse_instruction(instruction)
        if parsed is None:
            logger.warning(f"Instruction could not be parsed: {instruction!r}")
            return TransactionResult(
                status=TransactionStatus.FAILED,
                status_reason=f"{PaymentMessages.MALFORMED_INSTRUCTION}: unable to parse keywords",
                status_code=StatusCode.SY03,
                accounts=[],
            )

        rejection = self.check_fields(parsed)
        if rejection is not None:
            amount = leading_integer(parsed.amount) if rejection.code == StatusCode.AM01 else int(parsed.amount)
            return self._failed(parsed, amount, rejection, snapshot_all(accounts))

        amount = int(parsed.amount)

        debit, credit, rejection = self.resolve_accounts(parsed, accounts)
        if rejection is not None:
            return self._failed(parsed, amount, rejection, snapshot_all(accounts))

        rejection = self.check_transfer(parsed, amount, debit, credit)
        if rejection is not None:
            return self._failed(parsed, amount, rejection, snapshot_parties(accounts, debit, credit))

        if parsed.execute_by and compare_date(parsed.execute_by, reference_date) == DatePosition.FUTURE:
            status = TransactionStatus.PENDING
            status_code = StatusCode.AP02
            status_reason = PaymentMessages.TRANSACTION_PENDING
            snapshots = snapshot_parties(accounts, debit, credit)
        else:
            status = TransactionStatus.SUCCESSFUL
            status_code = StatusCode.AP00
            status_reason = PaymentMessages.TRANSACTION_SUCCESSFUL
            snapshots = snapshot_parties(
                accounts,
                debit,
                credit,
                new_debit_balance=debit.balance - amount,
                new_credit_balance=credit.balance + amount,
            )

        logger.info(
            f"Payment instruction processed: type={parsed.type.value} debit={parsed.debit_account} "
            f"credit={parsed.credit_account} amount={amount} {parsed.currency} status={status.value}"
        )

        return TransactionResult(
            type=parsed.type,
            amount=amount,
            currency=parsed.currency,
            debit_account=parsed.debit_account,
            credit_account=parsed.credit_account,
            execute_by=parsed.execute_by,
            status=status,
            status_reason=status_reason,
            status_code=status_code,
            accounts=snapshots,
        )

    def _failed(
        self,
        parsed: ParsedInstruction,
        amount: Optional[int],
        rejection: Rejection,
        snapshots: List[AccountSnapshot]
    ) -> TransactionResult:
        logger.info(f"Payment instruction rejected: {rejection.code.value} ({rejection.reason})")
        return TransactionResult(
            type=parsed.type,
            amount=amount,
            currency=parsed.currency,
            debit_account=parsed.debit_account,
            credit_account=parsed.credit_account,
            execute_by=parsed.execute_by,
            status=TransactionStatus.FAILED,
            status_reason=rejection.reason,
            status_code=rejection.code,
            accounts=snapshots,
        )
