import logging
import sys
from typing import Dict, Iterable

from csv_io import read_transactions
from models import ClientAccount, ProcessingStats, Transaction
from partitioner import group_by_client, split_partitions
from summarizer import ParallelSummarizer

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Orchestrates a batch run: read, group by client, fan client groups
    out to worker threads, merge the resulting accounts.
    """

    def __init__(self, num_workers: int = 4):
        if num_workers < 1:
            raise ValueError(f"num_workers must be positive, got {num_workers}")
        self._num_workers = num_workers
        self._summarizer = ParallelSummarizer()
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Reading transactions from {filepath}")
        transactions = read_transactions(filepath)
        return self.process_transactions(transactions)

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        transactions_by_client = group_by_client(transactions)
        logger.debug(f"Total of clients: {len(transactions_by_client)}")

        partitions = split_partitions(transactions_by_client, self._num_workers)

        logger.info(f"Starting summarize phase with {len(partitions)} workers")
        accounts, self.stats = self._summarizer.summarize(partitions)
        logger.info("Summarize phase complete")

        # Print final processing report to stderr
        print(
            f"Processed: {self.stats.processed}, "
            f"Rejected: {self.stats.rejected}, "
            f"Ignored: {self.stats.ignored}, "
            f"Clients: {self.stats.clients}",
            file=sys.stderr
        )

        return {account.client_id: account for account in accounts}
