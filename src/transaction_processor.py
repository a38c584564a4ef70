import logging
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from amounts import ZERO, round_amount
from exceptions import (
    AccountError,
    AccountLocked,
    InsufficientFunds,
    InvalidAmount,
    InvalidHeld,
    PossibleFraud,
    ReferenceNotFound,
)
from models import ClientAccount, ProcessingResult, ProcessingStats, Transaction, TransactionType

logger = logging.getLogger(__name__)


def find_original(history: Sequence[Transaction], transaction_id: int) -> Optional[Transaction]:
    """
    First amount-bearing record with the given id. Ids are expected to be
    unique per client; if one is reused, the earliest record wins.
    """
    for record in history:
        if record.transaction_id == transaction_id and record.has_amount:
            return record
    return None


def find_dispute(history: Sequence[Transaction], transaction_id: int) -> Optional[Transaction]:
    for record in history:
        if record.transaction_id == transaction_id and record.kind == TransactionType.DISPUTE:
            return record
    return None


def _disputed_amount(transaction: Transaction, history: Sequence[Transaction]) -> Tuple[Transaction, Decimal]:
    """Locate the dispute and its originating record for resolve/chargeback."""
    if find_dispute(history, transaction.transaction_id) is None:
        raise ReferenceNotFound()

    original = find_original(history, transaction.transaction_id)
    if original is None:
        raise ReferenceNotFound()

    return original, round_amount(original.amount)


def deposit(account: ClientAccount, transaction: Transaction) -> str:
    if account.locked:
        raise AccountLocked()

    value = round_amount(transaction.amount)
    if not value > ZERO:
        raise InvalidAmount()

    account.credit(value)
    return f"Deposit sent, value: {value}"


def withdraw(account: ClientAccount, transaction: Transaction) -> str:
    if account.locked:
        raise AccountLocked()

    value = round_amount(transaction.amount)
    if not (value > ZERO and account.available >= value):
        raise InsufficientFunds()

    account.debit(value)
    return f"Withdraw received, value: {value}"


def dispute(account: ClientAccount, transaction: Transaction, history: Sequence[Transaction]) -> str:
    """
    Hold the amount of the referenced deposit or withdrawal. Available funds
    may go negative here; the caller flags that as possible fraud.
    """
    if account.locked:
        raise AccountLocked()

    original = find_original(history, transaction.transaction_id)
    if original is None:
        raise ReferenceNotFound()

    account.hold(round_amount(original.amount))
    return f"Open dispute for operation: {original.transaction_type}"


def resolve(account: ClientAccount, transaction: Transaction, history: Sequence[Transaction]) -> str:
    if account.locked:
        raise AccountLocked()

    original, value = _disputed_amount(transaction, history)
    if account.held - value < ZERO:
        raise InvalidHeld()

    account.release_hold(value)
    return f"Resolve dispute for operation: {original.transaction_type}"


def chargeback(account: ClientAccount, transaction: Transaction, history: Sequence[Transaction]) -> str:
    """
    Settle a dispute against the client and lock the account for good.

    Available funds are rebuilt from the total rather than from the held
    delta: a charged back withdrawal is paid back to the client, a charged
    back deposit is taken away.
    """
    if account.locked:
        raise AccountLocked()

    original, value = _disputed_amount(transaction, history)
    if account.held - value < ZERO:
        raise InvalidHeld()

    account.charge_back(value, refund=original.kind == TransactionType.WITHDRAW)
    return f"Chargeback dispute for operation: {original.transaction_type}"


class TransactionProcessor:
    """
    Applies a client's transactions to its account, one at a time.
    Handler errors are logged and never stop the replay.
    """

    def process_transaction(
        self,
        account: ClientAccount,
        transactions: Sequence[Transaction],
        index: int,
    ) -> ProcessingResult:
        """
        Process transactions[index]. The whole client list is the history
        that disputes, resolves and chargebacks search, later records
        included.

        Returns:
            SUCCESS: Applied to the account
            REJECTED: A handler refused it; the account is unchanged
            IGNORED: Unknown operation
        """
        transaction = transactions[index]

        try:
            match transaction.kind:
                case TransactionType.DEPOSIT:
                    message = deposit(account, transaction)
                case TransactionType.WITHDRAW:
                    message = withdraw(account, transaction)
                case TransactionType.DISPUTE:
                    message = dispute(account, transaction, transactions)
                case TransactionType.RESOLVE:
                    message = resolve(account, transaction, transactions)
                case TransactionType.CHARGEBACK:
                    message = chargeback(account, transaction, transactions)
                case _:
                    logger.debug(f"Ignoring unknown operation {transaction.transaction_type!r} - Client: {account.client_id}")
                    return ProcessingResult.IGNORED
        except AccountError as e:
            logger.warning(f"{e} - Client: {account.client_id}")
            return ProcessingResult.REJECTED

        logger.info(f"{message} - Client: {account.client_id}")

        if transaction.kind == TransactionType.DISPUTE and account.available < ZERO:
            logger.warning(f"{PossibleFraud()} (available {account.available}) - Client: {account.client_id}")

        return ProcessingResult.SUCCESS

    def replay(self, client_id: int, transactions: Sequence[Transaction]) -> Tuple[ClientAccount, ProcessingStats]:
        """Build a fresh account and apply every transaction in arrival order."""
        account = ClientAccount(client_id=client_id)
        stats = ProcessingStats(clients=1)

        for index in range(len(transactions)):
            stats.record(self.process_transaction(account, transactions, index))

        return account, stats
