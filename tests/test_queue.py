import sys
import os
import threading

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from exceptions import QueueClosedError
from fixed_decimal import FixedDecimal
from message_queue import TransactionQueue, DEFAULT_CAPACITY
from models import Transaction, TransactionType


def make_transaction(client_id: int, transaction_id: int) -> Transaction:
    return Transaction(
        transaction_type=TransactionType.DEPOSIT,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=FixedDecimal.parse("100"),
    )


class TestTransactionQueue:
    def test_default_capacity(self):
        assert TransactionQueue().capacity == DEFAULT_CAPACITY == 100

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            TransactionQueue(capacity=0)

    def test_publish_consume(self):
        queue = TransactionQueue()
        transaction = make_transaction(1, 1)
        queue.publish(transaction)
        assert queue.consume() == transaction

    def test_fifo_order(self):
        queue = TransactionQueue()
        transactions = [make_transaction(1, i) for i in range(10)]
        for transaction in transactions:
            queue.publish(transaction)
        queue.close()

        consumed = []
        while (transaction := queue.consume()) is not None:
            consumed.append(transaction)
        assert consumed == transactions

    def test_close_drains_before_end_of_stream(self):
        queue = TransactionQueue()
        queue.publish(make_transaction(1, 1))
        queue.publish(make_transaction(1, 2))
        queue.close()

        assert queue.consume().transaction_id == 1
        assert queue.consume().transaction_id == 2
        assert queue.consume() is None
        assert queue.consume() is None

    def test_close_is_idempotent(self):
        queue = TransactionQueue()
        queue.close()
        queue.close()
        with pytest.raises(QueueClosedError):
            queue.publish(make_transaction(1, 1))
        assert queue.consume() is None

    def test_publish_after_close_raises(self):
        queue = TransactionQueue()
        queue.close()
        with pytest.raises(QueueClosedError):
            queue.publish(make_transaction(1, 1))

    def test_consumer_waits_for_publisher(self):
        queue = TransactionQueue()
        received = []

        def consume():
            received.append(queue.consume())

        consumer = threading.Thread(target=consume)
        consumer.start()
        consumer.join(timeout=0.1)
        assert consumer.is_alive()

        queue.publish(make_transaction(1, 1))
        consumer.join(timeout=5)
        assert not consumer.is_alive()
        assert received[0].transaction_id == 1

    def test_publisher_blocks_when_full(self):
        queue = TransactionQueue(capacity=2)
        queue.publish(make_transaction(1, 1))
        queue.publish(make_transaction(1, 2))
        published = threading.Event()

        def publish():
            queue.publish(make_transaction(1, 3))
            published.set()

        publisher = threading.Thread(target=publish)
        publisher.start()
        assert not published.wait(timeout=0.1)

        assert queue.consume().transaction_id == 1
        assert published.wait(timeout=5)
        publisher.join(timeout=5)
        assert queue.consume().transaction_id == 2
        assert queue.consume().transaction_id == 3

    def test_close_on_full_queue_waits_for_consumer(self):
        queue = TransactionQueue(capacity=1)
        queue.publish(make_transaction(1, 1))
        closer = threading.Thread(target=queue.close)
        closer.start()

        assert queue.consume().transaction_id == 1
        closer.join(timeout=5)
        assert not closer.is_alive()
        assert queue.consume() is None

    def test_abort_releases_blocked_publisher(self):
        queue = TransactionQueue(capacity=1)
        queue.publish(make_transaction(1, 1))
        errors = []

        def publish():
            try:
                queue.publish(make_transaction(1, 2))
            except QueueClosedError as e:
                errors.append(e)

        publisher = threading.Thread(target=publish)
        publisher.start()
        publisher.join(timeout=0.1)
        assert publisher.is_alive()

        queue.abort()
        publisher.join(timeout=5)
        assert not publisher.is_alive()
        assert len(errors) == 1

    def test_close_after_abort_does_not_wait(self):
        queue = TransactionQueue(capacity=1)
        queue.publish(make_transaction(1, 1))
        queue.abort()

        closer = threading.Thread(target=queue.close)
        closer.start()
        closer.join(timeout=5)
        assert not closer.is_alive()
