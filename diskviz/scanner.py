"""
Background scan: walk + aggregate on a thread, results delivered through a mailbox.
Every scan publishes exactly one Progress followed by one Finished.
"""
from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import Executor
from typing import List, Optional

from .aggregate import aggregate, display_name
from .channel import ChannelClosed, Receiver, Sender, unbounded
from .config import ScanConfig
from .models import Finished, Message, Node, Progress, ScanProgress
from .walker import walk_entries

logger = logging.getLogger(__name__)


class CancelFlag:
    def __init__(self):
        self._cancel = threading.Event()

    def cancel(self):
        self._cancel.set()

    def __call__(self):
        return self._cancel.is_set()


class ScanHandle:
    """Consumer side of one scan."""

    def __init__(self, root: str, receiver: Receiver, thread: threading.Thread, cancel_flag: CancelFlag):
        self.root = root
        self._receiver = receiver
        self._thread = thread
        self._cancel_flag = cancel_flag

    def try_receive(self) -> Optional[Message]:
        return self._receiver.try_receive()

    def drain(self) -> List[Message]:
        return self._receiver.drain()

    def close(self):
        self._receiver.close()

    def cancel(self):
        self._cancel_flag.cancel()

    def wait(self, timeout: Optional[float] = None) -> bool:
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_running(self) -> bool:
        return self._thread.is_alive()


def run_scan(root: str,
             sender: Sender,
             pool: Optional[Executor] = None,
             config: Optional[ScanConfig] = None,
             cancel_flag: Optional[CancelFlag] = None):
    """Body of the scan thread. Never raises."""
    config = config or ScanConfig()
    root = os.path.abspath(root)
    t0 = time.time()
    logger.info("Start scanning: %s", root)
    try:
        entries = walk_entries(root, pool=pool,
                               follow_symlinks=config.follow_symlinks,
                               skip_unreadable=config.skip_unreadable,
                               cancel_flag=cancel_flag)
        tree, progress = aggregate(root, entries, pool=pool, max_depth=config.tree_depth)
    except Exception:
        logger.exception("scan of %s failed", root)
        tree = Node(name=display_name(root), path=root, is_dir=True, size=0, children=[])
        progress = ScanProgress()

    try:
        sender.send(Progress(progress))
        sender.send(Finished(tree))
    except ChannelClosed:
        logger.debug("consumer gone, dropping results for %s", root)
    logger.info("Scan finished: %s (%d dirs, %d bytes, %.2fs)",
                root, progress.total_dirs, progress.total_bytes, time.time() - t0)


class ScanCoordinator:
    def __init__(self, pool: Optional[Executor] = None, config: Optional[ScanConfig] = None):
        self.pool = pool
        self.config = config or ScanConfig()

    def begin_scan(self, root_path: str) -> ScanHandle:
        root = os.path.abspath(root_path)
        sender, receiver = unbounded()
        cancel_flag = CancelFlag()
        t = threading.Thread(target=run_scan,
                             args=(root, sender, self.pool, self.config, cancel_flag),
                             name=f"diskviz-scan:{display_name(root)}",
                             daemon=True)
        t.start()
        return ScanHandle(root, receiver, t, cancel_flag)


def begin_scan(root_path: str,
               pool: Optional[Executor] = None,
               config: Optional[ScanConfig] = None) -> ScanHandle:
    return ScanCoordinator(pool, config).begin_scan(root_path)
