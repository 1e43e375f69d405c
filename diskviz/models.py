from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Union

@dataclass
class Node:
    name: str
    path: str
    is_dir: bool
    size: int = 0
    children: List["Node"] = field(default_factory=list)

@dataclass
class ScanProgress:
    total_dirs: int = 0
    total_bytes: int = 0
    scanned_dirs: int = 0
    scanned_bytes: int = 0

    @property
    def fraction(self) -> float:
        return self.scanned_bytes / max(self.total_bytes, 1)

@dataclass
class Progress:
    progress: ScanProgress

@dataclass
class Finished:
    root: Node

Message = Union[Progress, Finished]
