from __future__ import annotations
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Mapping, Optional

import psutil

from .aggregate import DEFAULT_TREE_DEPTH

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 16

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")
_UNLIMITED = ("all", "none", "unlimited")


def default_workers() -> int:
    return max(1, psutil.cpu_count(logical=True) or 1)


def make_worker_pool(workers: int) -> ThreadPoolExecutor:
    """Process-wide pool for directory listings; create once at startup."""
    return ThreadPoolExecutor(max_workers=max(1, int(workers)), thread_name_prefix="diskviz-walk")


@dataclass
class ScanConfig:
    workers: int = field(default_factory=default_workers)
    tree_depth: Optional[int] = DEFAULT_TREE_DEPTH
    follow_symlinks: bool = False
    skip_unreadable: bool = True
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScanConfig":
        env = os.environ if environ is None else environ
        cfg = cls()

        raw = env.get("DISKVIZ_WORKERS")
        if raw:
            try:
                n = int(raw)
                if n < 1:
                    raise ValueError(raw)
                cfg.workers = n
            except ValueError:
                logger.warning("ignoring DISKVIZ_WORKERS=%r, using %d", raw, cfg.workers)

        raw = env.get("DISKVIZ_TREE_DEPTH")
        if raw:
            if raw.strip().lower() in _UNLIMITED:
                cfg.tree_depth = None
            else:
                try:
                    d = int(raw)
                    if d < 0:
                        raise ValueError(raw)
                    cfg.tree_depth = d
                except ValueError:
                    logger.warning("ignoring DISKVIZ_TREE_DEPTH=%r, using %s", raw, cfg.tree_depth)

        cfg.follow_symlinks = _flag(env, "DISKVIZ_FOLLOW_SYMLINKS", cfg.follow_symlinks)
        cfg.skip_unreadable = _flag(env, "DISKVIZ_SKIP_UNREADABLE", cfg.skip_unreadable)
        return cfg


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if not raw:
        return default
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    logger.warning("ignoring %s=%r, using %s", name, raw, default)
    return default
