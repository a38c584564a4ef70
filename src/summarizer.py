import logging
import threading
from typing import Dict, List, Optional, Tuple

from exceptions import SummarizeError
from models import ClientAccount, ProcessingStats, Transaction
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


def summarize_partition(
    partition: Dict[int, List[Transaction]],
    processor: Optional[TransactionProcessor] = None,
) -> Tuple[List[ClientAccount], ProcessingStats]:
    """Replay every client of one partition sequentially."""
    processor = processor or TransactionProcessor()
    accounts = []
    stats = ProcessingStats()

    for client_id, transactions in partition.items():
        account, client_stats = processor.replay(client_id, transactions)
        accounts.append(account)
        stats = stats.merge(client_stats)

    logger.debug(f"Summarized {len(accounts)} accounts: {accounts}")
    return accounts, stats


class ParallelSummarizer:
    """
    Runs one worker thread per partition.

    Each worker owns its partition and its result slot exclusively, so no
    locks are taken; the join below is the only synchronization point.
    """

    def __init__(self, processor: Optional[TransactionProcessor] = None):
        self._processor = processor or TransactionProcessor()

    def summarize(self, partitions: List[Dict[int, List[Transaction]]]) -> Tuple[List[ClientAccount], ProcessingStats]:
        results: List[Optional[Tuple[List[ClientAccount], ProcessingStats]]] = [None] * len(partitions)
        errors: List[Optional[BaseException]] = [None] * len(partitions)

        workers = []
        for slot, partition in enumerate(partitions):
            worker = threading.Thread(
                target=self._run_worker,
                args=(slot, partition, results, errors),
                name=f"summarizer-{slot}",
            )
            worker.start()
            workers.append(worker)

        for worker in workers:
            worker.join()

        for slot, error in enumerate(errors):
            if error is not None:
                raise SummarizeError(f"Summarize worker {slot} failed", cause=error)

        accounts: List[ClientAccount] = []
        stats = ProcessingStats()
        for worker_accounts, worker_stats in results:
            accounts.extend(worker_accounts)
            stats = stats.merge(worker_stats)

        return accounts, stats

    def _run_worker(self, slot, partition, results, errors) -> None:
        try:
            results[slot] = summarize_partition(partition, self._processor)
        except Exception as e:
            logger.error(f"Summarize worker {slot} failed: {e}")
            errors[slot] = e
