"""
Error taxonomy for the payments engine.

    PaymentsError
    ├── AccountError (per transaction, logged and skipped)
    │   ├── InsufficientFunds
    │   ├── AccountLocked
    │   ├── ReferenceNotFound
    │   ├── InvalidAmount
    │   ├── InvalidHeld
    │   └── PossibleFraud (warning only, never raised by a handler)
    ├── InvalidTransaction (record violates the data model)
    ├── MalformedTransactionError (ingestion failure, fatal)
    └── SummarizeError (worker failure, fatal)
"""
from typing import Optional


class PaymentsError(Exception):
    """Base class for every error raised by the engine."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        self.message = message
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.__cause__:
            return f"{self.message} (Caused by: {self.__cause__})"
        return self.message


class AccountError(PaymentsError):
    """
    A single transaction could not be applied to an account.
    Subclasses carry a fixed default message so handlers can raise them bare.
    """

    default_message = "Account operation failed"

    def __init__(self, message: Optional[str] = None, cause: Optional[Exception] = None) -> None:
        super().__init__(message or self.default_message, cause)


class InsufficientFunds(AccountError):
    default_message = "Doesn't have enough funds to process the transaction"


class AccountLocked(AccountError):
    default_message = "Account is locked, can't withdraw or deposit funds"


class ReferenceNotFound(AccountError):
    default_message = "The operation didn't find referenced transaction ID"


class InvalidAmount(AccountError):
    default_message = "The amount is invalid"


class InvalidHeld(AccountError):
    default_message = "The held amount has already been released"


class PossibleFraud(AccountError):
    default_message = "Possible fraud, manual check is necessary"


class InvalidTransaction(PaymentsError, ValueError):
    """A transaction record violates the data model constraints."""


class MalformedTransactionError(PaymentsError):
    """An input row could not be turned into a transaction."""

    def __init__(self, line_number: int, message: str, cause: Optional[Exception] = None) -> None:
        self.line_number = line_number
        super().__init__(f"line {line_number}: {message}", cause)


class SummarizeError(PaymentsError):
    """A summarizer worker failed; the whole batch is discarded."""
