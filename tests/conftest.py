"""Shared fixtures: a small on-disk tree and a worker pool."""

from pathlib import Path

import pytest

from diskviz.config import make_worker_pool


def write_bytes(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def sample_root(tmp_path: Path) -> Path:
    """R/a.txt (10), R/B/b.txt (20), R/B/C/c.txt (30)."""
    root = tmp_path / "R"
    write_bytes(root / "a.txt", 10)
    write_bytes(root / "B" / "b.txt", 20)
    write_bytes(root / "B" / "C" / "c.txt", 30)
    return root


@pytest.fixture
def wide_root(tmp_path: Path) -> Path:
    """Several levels and many files, for conservation checks."""
    root = tmp_path / "W"
    for d in range(6):
        for sub in range(3):
            for f in range(7):
                write_bytes(root / f"d{d}" / f"s{sub}" / f"f{f}.bin", d * 100 + sub * 10 + f)
        write_bytes(root / f"d{d}" / "top.bin", 1000 + d)
    write_bytes(root / "root.bin", 4242)
    (root / "empty_dir").mkdir()
    return root


@pytest.fixture
def pool():
    p = make_worker_pool(4)
    yield p
    p.shutdown(wait=True)


def expected_bytes(root: Path) -> int:
    return sum(p.stat().st_size for p in root.rglob("*") if p.is_file() and not p.is_symlink())
