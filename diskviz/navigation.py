"""
Drill-down state as an index path: child indices from the root, in display order.
Paths are resolved against whatever tree is current, so a replaced tree never
leaves a dangling selection behind.
"""
from __future__ import annotations
from typing import List, Sequence, Tuple

from .models import Node

IndexPath = Tuple[int, ...]

def sorted_children(node: Node) -> List[Node]:
    """Largest first, ties broken by name."""
    return sorted(node.children, key=lambda n: (-n.size, n.name, n.path))

def _walk(root: Node, index_path: Sequence[int]) -> List[Node]:
    chain = [root]
    node = root
    for i in index_path:
        kids = sorted_children(node)
        if i < 0 or i >= len(kids) or not kids[i].is_dir:
            return [root]
        node = kids[i]
        chain.append(node)
    return chain

def is_valid(root: Node, index_path: Sequence[int]) -> bool:
    return len(_walk(root, index_path)) == len(index_path) + 1

def resolve(root: Node, index_path: Sequence[int]) -> Node:
    """Node at ``index_path``; the root when the path no longer resolves."""
    return _walk(root, index_path)[-1]

def breadcrumb(root: Node, index_path: Sequence[int]) -> List[str]:
    return [n.name for n in _walk(root, index_path)]

def child_path(index_path: Sequence[int], i: int) -> IndexPath:
    return tuple(index_path) + (i,)

def parent_path(index_path: Sequence[int]) -> IndexPath:
    return tuple(index_path[:-1])
