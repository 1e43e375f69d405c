from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import List

import psutil

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Drive:
    mountpoint: str
    fstype: str
    total: int
    used: int
    free: int

    @property
    def label(self) -> str:
        return f"{self.mountpoint} ({self.fstype})" if self.fstype else self.mountpoint

def list_drives() -> List[Drive]:
    """Physical mounts that can be offered as scan roots, one per mount point."""
    found = {}
    for part in psutil.disk_partitions(all=False):
        if not part.mountpoint:
            continue
        mp = os.path.abspath(part.mountpoint)
        if mp in found:
            continue
        try:
            usage = psutil.disk_usage(mp)
        except OSError as e:
            logger.debug("no usage for %s: %s", mp, e)
            continue
        found[mp] = Drive(mp, part.fstype, int(usage.total), int(usage.used), int(usage.free))
    return sorted(found.values(), key=lambda d: d.mountpoint.lower())
