import logging
import threading
from typing import Dict, Iterable, Optional

from client_account import ClientAccount
from config import EngineConfig
from csv_io import read_transactions
from exceptions import EngineError, QueueClosedError
from message_queue import TransactionQueue
from models import Transaction, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Orchestrates transaction processing with publisher-consumer pattern.

    The caller's thread publishes into a bounded queue and a single consumer
    thread applies transactions in arrival order. An engine runs one stream.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._queue = TransactionQueue(capacity=self._config.queue_capacity)
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()
        self._started = False
        self._consumer_error: Optional[BaseException] = None

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states sorted by client id."""
        return self.process_transactions(read_transactions(filepath, self._stats))

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """
        Feed transactions through the queue and return final account states.

        If iterating the source raises, the queue is still closed and drained
        before the error propagates. If the consumer thread fails, publishing
        stops and EngineError is raised with the consumer's exception as cause.
        """
        if self._started:
            raise EngineError("PaymentsEngine instances process a single stream")
        self._started = True

        logger.info("Starting processing")
        consumer_thread = threading.Thread(target=self._consume_transactions, name="payments-consumer")
        consumer_thread.start()

        try:
            self._publish_transactions(transactions)
        except QueueClosedError:
            if self._consumer_error is None:
                raise
        finally:
            self._queue.close()
            consumer_thread.join()

        if self._consumer_error is not None:
            raise EngineError(f"Consumer failed: {self._consumer_error!r}") from self._consumer_error

        logger.info("Processing complete")
        self._stats.log_summary()
        return self._state.get_all_accounts()

    def _publish_transactions(self, transactions: Iterable[Transaction]) -> None:
        """Publish transactions to queue, waiting whenever it is full."""
        for transaction in transactions:
            self._queue.publish(transaction)

    def _consume_transactions(self) -> None:
        """Consumer loop: pull from queue until it is closed and drained."""
        try:
            while True:
                transaction = self._queue.consume()
                if transaction is None:
                    break

                result = self._processor.process(transaction)
                if result.is_success:
                    self._stats.record_success()
                else:
                    self._stats.record_failure()
        except Exception as e:
            # Re-raised as EngineError on the caller's thread.
            logger.error(f"Consumer stopped: {e!r}")
            self._consumer_error = e
            self._queue.abort()
