from __future__ import annotations
import logging
import os
import subprocess
import sys

logger = logging.getLogger(__name__)

def format_bytes(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}" if u != "B" else f"{int(x)} {u}"
        x /= 1024.0
    return f"{x:.2f} PB"

def percent_of(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part * 100.0 / whole


def reveal_in_file_manager(path: str) -> bool:
    """Open the system file manager at the given path.

    Files are selected where the platform supports it, otherwise their folder
    is opened. Returns False when nothing could be launched.
    """
    if not path:
        return False
    ap = os.path.abspath(path)
    try:
        if sys.platform.startswith('win'):
            if os.path.isdir(ap):
                os.startfile(ap)
            else:
                subprocess.Popen(['explorer', '/select,', ap])
            return True
        if sys.platform == 'darwin':
            subprocess.Popen(['open', '-R', ap])
            return True
        folder = ap if os.path.isdir(ap) else os.path.dirname(ap)
        subprocess.Popen(['xdg-open', folder])
        return True
    except OSError as e:
        logger.warning("cannot reveal %s: %s", ap, e)
        return False
