from typing import Dict, Iterable, List

from models import Transaction


def group_by_client(transactions: Iterable[Transaction]) -> Dict[int, List[Transaction]]:
    """
    Group the stream by client id. Each client's list keeps arrival order;
    clients appear in the order they were first seen.
    """
    transactions_by_client: Dict[int, List[Transaction]] = {}
    for transaction in transactions:
        transactions_by_client.setdefault(transaction.client_id, []).append(transaction)
    return transactions_by_client


def split_partitions(
    transactions_by_client: Dict[int, List[Transaction]],
    num_partitions: int,
) -> List[Dict[int, List[Transaction]]]:
    """
    Split clients into at most num_partitions disjoint, contiguous chunks.
    A client's transactions always stay together in one chunk.
    """
    if num_partitions < 1:
        raise ValueError(f"num_partitions must be positive, got {num_partitions}")

    clients = list(transactions_by_client.items())
    chunk_len = len(clients) // num_partitions + 1

    return [
        dict(clients[start:start + chunk_len])
        for start in range(0, len(clients), chunk_len)
    ]
