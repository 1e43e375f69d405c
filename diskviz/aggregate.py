from __future__ import annotations
import os
from concurrent.futures import Executor
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Node, ScanProgress
from .walker import Entry

DEFAULT_TREE_DEPTH = 1
REDUCE_CHUNK = 4096

def display_name(path: str) -> str:
    return os.path.basename(path.rstrip("\\/")) or path

def _partial_totals(chunk: Sequence[Entry]) -> Tuple[int, int]:
    dirs = 0
    size = 0
    for e in chunk:
        if e.is_dir:
            dirs += 1
        else:
            size += e.size
    return dirs, size

def count_totals(entries: Sequence[Entry], pool: Optional[Executor] = None) -> Tuple[int, int]:
    """(directory count, file bytes) over all entries.

    Integer sums, so the result does not depend on chunking or pool size.
    """
    if pool is None or len(entries) <= REDUCE_CHUNK:
        return _partial_totals(entries)
    chunks = [entries[i:i + REDUCE_CHUNK] for i in range(0, len(entries), REDUCE_CHUNK)]
    dirs = 0
    size = 0
    for d, s in pool.map(_partial_totals, chunks):
        dirs += d
        size += s
    return dirs, size

def _depth_below(root: str, path: str) -> Optional[int]:
    if path == root:
        return 0
    rel = os.path.relpath(path, root)
    parts = rel.split(os.sep)
    if parts[0] == os.pardir:
        return None
    return len(parts)

def aggregate(root: str,
              entries: Sequence[Entry],
              pool: Optional[Executor] = None,
              max_depth: Optional[int] = DEFAULT_TREE_DEPTH) -> Tuple[Node, ScanProgress]:
    """Fold a flat entry list into a size tree.

    Files are grouped by parent directory. Groups whose parent lies at most
    ``max_depth`` levels below the root are attached (intermediate directories
    are synthesised); deeper groups are left out of the tree but still count
    toward ``root.size``. ``max_depth=None`` keeps every level.
    """
    root = os.path.abspath(root)
    total_dirs, total_bytes = count_totals(entries, pool)
    progress = ScanProgress(total_dirs=total_dirs, total_bytes=total_bytes,
                            scanned_dirs=total_dirs, scanned_bytes=total_bytes)

    root_is_file = any(e.path == root and not e.is_dir for e in entries)
    root_node = Node(name=display_name(root), path=root, is_dir=not root_is_file,
                     size=total_bytes, children=[])
    if root_is_file:
        return root_node, progress

    groups: Dict[str, List[Entry]] = {}
    for e in entries:
        if not e.is_dir:
            groups.setdefault(os.path.dirname(e.path), []).append(e)

    dirs: Dict[str, Node] = {root: root_node}

    def dir_node(path: str) -> Node:
        missing: List[str] = []
        while path not in dirs:
            missing.append(path)
            path = os.path.dirname(path)
        parent = dirs[path]
        for p in reversed(missing):
            node = Node(name=display_name(p), path=p, is_dir=True, size=0, children=[])
            parent.children.append(node)
            dirs[p] = node
            parent = node
        return parent

    for parent_path, files in groups.items():
        depth = _depth_below(root, parent_path)
        if depth is None:
            continue
        if max_depth is not None and depth > max_depth:
            continue
        node = dir_node(parent_path)
        node.children.extend(
            Node(name=os.path.basename(f.path), path=f.path, is_dir=False, size=f.size)
            for f in files
        )

    # deepest first so every subdirectory is summed before its parent
    for path in sorted(dirs, key=lambda p: p.count(os.sep), reverse=True):
        if path == root:
            continue
        node = dirs[path]
        node.size = sum(c.size for c in node.children)

    return root_node, progress
