"""
Hand-off channel between a corpus producer and the trainer.

The producer runs in its own thread and pushes instances into a queue; the
trainer consumes them one at a time, in the order they were produced.
"""
import queue
import threading
from typing import Iterable, Iterator, TypeVar

from loguru import logger

from .config import CHANNEL_MAXSIZE

T = TypeVar("T")

_DONE = object()


class InstanceChannel(Iterable[T]):
    """
    Iterable fed by a background producer thread.

    Usage:
        channel = InstanceChannel(read_corpus(path), maxsize=256)
        model.train(channel)

    An exception raised by the producer is re-raised in the consumer once
    the items produced before it have been consumed. If the consumer stops
    early, the producer is told to stop at its next put.
    """

    PUT_TIMEOUT = 0.1
    JOIN_TIMEOUT = 1.0

    def __init__(self, source: Iterable[T], maxsize: int = CHANNEL_MAXSIZE):
        self._source = source
        self._queue: "queue.Queue" = queue.Queue(maxsize=maxsize)
        self._closed = threading.Event()
        self._error = None
        self._thread = threading.Thread(target=self._produce, name="instance-producer", daemon=True)
        self._started = False

    def _put(self, item) -> bool:
        while not self._closed.is_set():
            try:
                self._queue.put(item, timeout=self.PUT_TIMEOUT)
                return True
            except queue.Full:
                continue
        return False

    def _produce(self) -> None:
        count = 0
        try:
            for item in self._source:
                if not self._put(item):
                    logger.debug("Channel closed by consumer after {} items", count)
                    return
                count += 1
        except BaseException as e:
            # SystemExit from a corpus reader must reach the consumer too.
            logger.error("Instance producer failed after {} items: {!r}", count, e)
            self._error = e
        finally:
            self._put(_DONE)

    def __iter__(self) -> Iterator[T]:
        if self._started:
            raise RuntimeError("InstanceChannel can only be iterated once")
        self._started = True
        self._thread.start()
        try:
            while True:
                item = self._queue.get()
                if item is _DONE:
                    break
                yield item
        finally:
            self.close()
        if self._error is not None:
            raise self._error

    def close(self) -> None:
        """Stop the producer at its next put and wait for it to exit."""
        self._closed.set()
        if self._started and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.JOIN_TIMEOUT)
            if self._thread.is_alive():
                logger.warning("Instance producer still running after {}s", self.JOIN_TIMEOUT)
