import csv
import logging
from typing import Dict, Iterable, List, Optional, TextIO

from amounts import format_amount, parse_amount
from exceptions import InvalidTransaction, MalformedTransactionError
from models import ClientAccount, Transaction

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def read_transactions(filepath: str) -> List[Transaction]:
    """
    Read every row of a CSV file into a Transaction.
    The first malformed row aborts the whole read.
    """
    transactions = []
    with open(filepath, "r", newline="") as f:
        reader = csv.DictReader(f)
        try:
            for row in reader:
                transactions.append(parse_csv_row(row, reader.line_num))
        except csv.Error as e:
            raise MalformedTransactionError(reader.line_num, f"unreadable row: {e}", cause=e)

    logger.debug(f"Read {len(transactions)} transactions from {filepath}")
    return transactions


def parse_csv_row(row: Dict[Optional[str], Optional[str]], line_number: int) -> Transaction:
    """Parse CSV row into Transaction."""
    normalized = {
        k.strip(): v.strip()
        for k, v in row.items()
        if isinstance(k, str) and isinstance(v, str)
    }

    try:
        return Transaction(
            transaction_type=normalized["type"].lower(),
            client_id=int(normalized["client"]),
            transaction_id=int(normalized["tx"]),
            amount=parse_amount(normalized.get("amount")),
        )
    except KeyError as e:
        raise MalformedTransactionError(line_number, f"missing column {e}", cause=e)
    except InvalidTransaction as e:
        raise MalformedTransactionError(line_number, e.message, cause=e)
    except ValueError as e:
        raise MalformedTransactionError(line_number, f"invalid row {row}", cause=e)


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow([
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
