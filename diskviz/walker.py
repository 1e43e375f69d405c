"""
Traversal of a directory subtree into a flat list of entries.
Directory listings are fanned out over a worker pool; bad entries are skipped.
"""
from __future__ import annotations
import logging
import os
import stat as statmod
from concurrent.futures import Executor, Future, FIRST_COMPLETED, wait
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

CancelCb = Callable[[], bool]

@dataclass(frozen=True)
class Entry:
    path: str
    is_dir: bool
    size: int = 0

Listing = Tuple[List[Entry], List[Tuple[str, Tuple[int, int]]]]

def _list_dir(dir_path: str, follow_symlinks: bool, skip_unreadable: bool) -> Listing:
    """List one directory.

    Returns the file and directory entries found directly inside it, plus the
    subdirectories (path, (st_dev, st_ino)) that still have to be walked.
    """
    found: List[Entry] = []
    subdirs: List[Tuple[str, Tuple[int, int]]] = []
    try:
        with os.scandir(dir_path) as it:
            for entry in it:
                try:
                    if entry.is_symlink() and not follow_symlinks:
                        continue
                    st = entry.stat(follow_symlinks=follow_symlinks)
                except OSError as e:
                    logger.debug("skip %s: %s", entry.path, e)
                    continue

                mode = st.st_mode
                if statmod.S_ISDIR(mode):
                    found.append(Entry(entry.path, True, 0))
                    subdirs.append((entry.path, (st.st_dev, st.st_ino)))
                elif statmod.S_ISREG(mode):
                    if skip_unreadable and not os.access(entry.path, os.R_OK):
                        logger.debug("skip unreadable %s", entry.path)
                        continue
                    found.append(Entry(entry.path, False, int(st.st_size)))
    except OSError as e:
        # directory itself stays in the result, its contents do not
        logger.debug("cannot list %s: %s", dir_path, e)
    return found, subdirs

def walk_entries(root: str,
                 pool: Optional[Executor] = None,
                 follow_symlinks: bool = False,
                 skip_unreadable: bool = True,
                 cancel_flag: Optional[CancelCb] = None) -> List[Entry]:
    root = os.path.abspath(root)
    try:
        st = os.stat(root)  # the root itself is always followed
    except OSError as e:
        logger.debug("root %s not accessible: %s", root, e)
        return []

    if statmod.S_ISREG(st.st_mode):
        if skip_unreadable and not os.access(root, os.R_OK):
            return []
        return [Entry(root, False, int(st.st_size))]
    if not statmod.S_ISDIR(st.st_mode):
        return []

    entries: List[Entry] = [Entry(root, True, 0)]
    seen: Set[Tuple[int, int]] = {(st.st_dev, st.st_ino)}

    def accept(subdirs: List[Tuple[str, Tuple[int, int]]]) -> List[str]:
        todo = []
        for path, key in subdirs:
            if follow_symlinks:
                if key in seen:
                    logger.debug("already visited %s", path)
                    continue
                seen.add(key)
            todo.append(path)
        return todo

    def cancelled() -> bool:
        return bool(cancel_flag and cancel_flag())

    if pool is None:
        stack = [root]
        while stack:
            found, subdirs = _list_dir(stack.pop(), follow_symlinks, skip_unreadable)
            entries.extend(found)
            if cancelled():
                break
            stack.extend(accept(subdirs))
        return entries

    pending: Set[Future] = {pool.submit(_list_dir, root, follow_symlinks, skip_unreadable)}
    while pending:
        done, pending = wait(pending, return_when=FIRST_COMPLETED)
        for fut in done:
            found, subdirs = fut.result()
            entries.extend(found)
            if cancelled():
                continue
            for path in accept(subdirs):
                pending.add(pool.submit(_list_dir, path, follow_symlinks, skip_unreadable))
    return entries
