from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from amounts import ZERO, round_amount
from exceptions import InvalidTransaction

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @classmethod
    def parse(cls, value: str) -> Optional["TransactionType"]:
        """Return the matching type, or None for an unrecognized operation."""
        try:
            return cls(value)
        except ValueError:
            return None


AMOUNT_BEARING_TYPES = frozenset({TransactionType.DEPOSIT, TransactionType.WITHDRAW})


class ProcessingResult(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Transaction:
    transaction_type: str
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        if not 0 <= self.client_id <= MAX_CLIENT_ID:
            raise InvalidTransaction(f"client id {self.client_id} out of range")
        if not 0 <= self.transaction_id <= MAX_TRANSACTION_ID:
            raise InvalidTransaction(f"transaction id {self.transaction_id} out of range")

        kind = self.kind
        if kind is None:
            return
        if kind in AMOUNT_BEARING_TYPES and self.amount is None:
            raise InvalidTransaction(f"{kind.value} tx {self.transaction_id} requires an amount")
        if kind not in AMOUNT_BEARING_TYPES and self.amount is not None:
            raise InvalidTransaction(f"{kind.value} tx {self.transaction_id} must not carry an amount")

    @property
    def kind(self) -> Optional[TransactionType]:
        return TransactionType.parse(self.transaction_type)

    @property
    def has_amount(self) -> bool:
        return self.amount is not None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    """
    Balances for one client. Every primitive rounds to the canonical
    precision and leaves total == available + held.
    """

    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    total: Decimal = ZERO
    locked: bool = False

    def credit(self, amount: Decimal) -> None:
        total, available = round_amount(self.total + amount), round_amount(self.available + amount)
        self.total, self.available = total, available

    def debit(self, amount: Decimal) -> None:
        total, available = round_amount(self.total - amount), round_amount(self.available - amount)
        self.total, self.available = total, available

    def hold(self, amount: Decimal) -> None:
        held, available = round_amount(self.held + amount), round_amount(self.available - amount)
        self.held, self.available = held, available

    def release_hold(self, amount: Decimal) -> None:
        held, available = round_amount(self.held - amount), round_amount(self.available + amount)
        self.held, self.available = held, available

    def charge_back(self, amount: Decimal, refund: bool) -> None:
        """
        Remove the held amount and lock the account. A refunded charge back
        (disputed withdrawal) returns the amount to the client, otherwise the
        disputed deposit is clawed back.
        """
        held = round_amount(self.held - amount)
        if refund:
            available = round_amount(self.total + amount)
        else:
            available = round_amount(self.total - amount)
        total = round_amount(held + available)

        self.held, self.available, self.total = held, available, total
        self.locked = True

    def check_invariant(self) -> bool:
        return self.total == round_amount(self.available + self.held)


@dataclass
class ProcessingStats:
    """Counters owned by a single worker, merged after all workers join."""

    processed: int = 0
    rejected: int = 0
    ignored: int = 0
    clients: int = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.processed += 1
        elif result == ProcessingResult.REJECTED:
            self.rejected += 1
        else:
            self.ignored += 1

    def merge(self, other: "ProcessingStats") -> "ProcessingStats":
        return ProcessingStats(
            processed=self.processed + other.processed,
            rejected=self.rejected + other.rejected,
            ignored=self.ignored + other.ignored,
            clients=self.clients + other.clients,
        )
