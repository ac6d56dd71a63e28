import threading
from queue import Queue, Full
from typing import Optional

from exceptions import QueueClosedError
from models import Transaction

DEFAULT_CAPACITY = 100

# Marks end of stream. Queued behind every real message, so the consumer drains first.
_CLOSED = object()


class TransactionQueue:
    """
    Bounded FIFO between one publisher and one consumer.
    Publishing blocks while the queue is full; consuming blocks while it is empty.
    All synchronization is internal - callers never need to lock.
    """

    DEFAULT_TIMEOUT = 0.1

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"Queue capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._queue: Queue = Queue(maxsize=capacity)
        self._close_lock = threading.Lock()
        self._closed = threading.Event()
        self._drained = threading.Event()
        self._aborted = threading.Event()

    @property
    def capacity(self) -> int:
        return self._capacity

    def publish(self, message: Transaction) -> None:
        """
        Add message to the queue, waiting for space if it is full.
        Raises QueueClosedError if the queue is closed, or aborted while waiting.
        """
        if self._closed.is_set():
            raise QueueClosedError("Cannot publish to a closed queue")
        if not self._put(message):
            raise QueueClosedError("Consumer stopped; queue aborted")

    def consume(self) -> Optional[Transaction]:
        """
        Get the next message, waiting until one arrives.
        Returns None once the queue is closed and every earlier message was consumed.
        """
        if self._drained.is_set():
            return None
        message = self._queue.get()
        if message is _CLOSED:
            self._drained.set()
            return None
        return message

    def close(self) -> None:
        """Signal no more messages will be published. Safe to call more than once."""
        with self._close_lock:
            if self._closed.is_set():
                return
            self._closed.set()
        # May wait for space, like any other publish, unless the consumer is gone.
        self._put(_CLOSED)

    def abort(self) -> None:
        """Called by a failed consumer so a blocked publisher or close() stops waiting."""
        self._aborted.set()

    def _put(self, message) -> bool:
        while not self._aborted.is_set():
            try:
                self._queue.put(message, timeout=self.DEFAULT_TIMEOUT)
                return True
            except Full:
                continue
        return False
