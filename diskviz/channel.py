"""
Unbounded FIFO mailbox between a scan thread and its consumer.
The consumer side never blocks; the sender fails once the consumer has closed it.
"""
from __future__ import annotations
import queue
import threading
from typing import Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised by Sender.send when the receiving end was closed."""


class _Shared:
    def __init__(self):
        self.queue: "queue.SimpleQueue" = queue.SimpleQueue()
        self.closed = threading.Event()


class Sender(Generic[T]):
    def __init__(self, shared: _Shared):
        self._shared = shared

    def send(self, item: T) -> None:
        if self._shared.closed.is_set():
            raise ChannelClosed("receiver closed")
        self._shared.queue.put(item)


class Receiver(Generic[T]):
    def __init__(self, shared: _Shared):
        self._shared = shared

    def try_receive(self) -> Optional[T]:
        if self._shared.closed.is_set():
            return None
        try:
            return self._shared.queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> List[T]:
        out: List[T] = []
        while True:
            item = self.try_receive()
            if item is None:
                return out
            out.append(item)

    def close(self) -> None:
        self._shared.closed.set()
        # drop whatever was buffered, nobody reads it any more
        while True:
            try:
                self._shared.queue.get_nowait()
            except queue.Empty:
                break

    @property
    def closed(self) -> bool:
        return self._shared.closed.is_set()


def unbounded() -> Tuple[Sender, Receiver]:
    shared = _Shared()
    return Sender(shared), Receiver(shared)
