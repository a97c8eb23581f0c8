"""
Pydantic schemas for request/response validation.
Defines the transfer request shape, the parsed instruction and the result.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.messages import StatusCode, TransactionStatus, TransactionType


class Account(BaseModel):
    """Account supplied by the caller for a single request."""
    model_config = ConfigDict(frozen=True)

    id: str
    balance: int
    currency: str


class PaymentInstructionRequest(BaseModel):
    """Request body: the accounts in play and the free-text instruction."""
    accounts: List[Account] = Field(..., description="Accounts the instruction may reference")
    instruction: str = Field(..., description="Free-text payment instruction")


class ParsedInstruction(BaseModel):
    """
    Structured fields extracted from an instruction.

    Values are raw strings as they appeared in the text; only the
    currency is upper-cased. Nothing here has been validated yet.
    """
    model_config = ConfigDict(frozen=True)

    type: TransactionType
    amount: str
    currency: str
    debit_account: str
    credit_account: str
    execute_by: Optional[str] = None


class AccountSnapshot(BaseModel):
    """Account view returned with a result, before and after the transfer."""
    model_config = ConfigDict(frozen=True)

    id: str
    balance: int
    balance_before: int
    currency: str


class TransactionResult(BaseModel):
    """Terminal outcome of processing one instruction."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    type: Optional[TransactionType] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    debit_account: Optional[str] = None
    credit_account: Optional[str] = None
    execute_by: Optional[str] = None
    status: TransactionStatus
    status_reason: str
    status_code: StatusCode
    accounts: List[AccountSnapshot] = Field(default_factory=list)

    @property
    def is_failed(self) -> bool:
        """True when the instruction was rejected."""
        return self.status == TransactionStatus.FAILED.value
