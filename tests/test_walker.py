"""Tests for the traversal enumerator."""

import os
from pathlib import Path

import pytest

from conftest import expected_bytes, write_bytes
from diskviz.walker import Entry, walk_entries


def _by_path(entries):
    return {e.path: e for e in entries}


class TestWalkEntries:
    def test_lists_files_and_dirs_including_root(self, sample_root: Path):
        entries = _by_path(walk_entries(str(sample_root)))

        root = str(sample_root)
        assert entries[root] == Entry(root, True, 0)
        assert entries[str(sample_root / "B")].is_dir
        assert entries[str(sample_root / "B" / "C")].is_dir
        assert entries[str(sample_root / "a.txt")] == Entry(str(sample_root / "a.txt"), False, 10)
        assert entries[str(sample_root / "B" / "C" / "c.txt")].size == 30
        assert len(entries) == 6

    def test_pool_and_inline_walks_agree(self, wide_root: Path, pool):
        inline = sorted(walk_entries(str(wide_root)), key=lambda e: e.path)
        fanned = sorted(walk_entries(str(wide_root), pool=pool), key=lambda e: e.path)

        assert inline == fanned
        assert sum(e.size for e in fanned if not e.is_dir) == expected_bytes(wide_root)

    def test_missing_root_is_empty(self, tmp_path: Path, pool):
        assert walk_entries(str(tmp_path / "nope")) == []
        assert walk_entries(str(tmp_path / "nope"), pool=pool) == []

    def test_empty_dir_yields_only_root(self, tmp_path: Path):
        assert walk_entries(str(tmp_path)) == [Entry(str(tmp_path), True, 0)]

    def test_file_root(self, sample_root: Path):
        path = str(sample_root / "a.txt")
        assert walk_entries(path) == [Entry(path, False, 10)]

    def test_relative_root_is_made_absolute(self, sample_root: Path, monkeypatch):
        monkeypatch.chdir(sample_root.parent)
        paths = {e.path for e in walk_entries("R")}
        assert str(sample_root / "a.txt") in paths

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="no symlinks")
    def test_symlinks_not_followed_by_default(self, sample_root: Path, tmp_path: Path):
        outside = write_bytes(tmp_path / "outside" / "big.bin", 500)
        os.symlink(outside.parent, sample_root / "link_dir")
        os.symlink(outside, sample_root / "link_file")

        entries = walk_entries(str(sample_root))

        assert sum(e.size for e in entries if not e.is_dir) == 60
        assert not any("link_" in e.path for e in entries)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="no symlinks")
    def test_follow_symlinks_does_not_loop(self, sample_root: Path):
        os.symlink(sample_root, sample_root / "B" / "back_to_root")

        entries = walk_entries(str(sample_root), follow_symlinks=True)

        assert sum(e.size for e in entries if not e.is_dir) == 60

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="no symlinks")
    def test_broken_symlink_is_skipped(self, sample_root: Path):
        os.symlink(sample_root / "gone", sample_root / "dangling")

        entries = walk_entries(str(sample_root), follow_symlinks=True)

        assert str(sample_root / "dangling") not in _by_path(entries)

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions, non-root")
    def test_unreadable_file_is_skipped(self, sample_root: Path):
        locked = write_bytes(sample_root / "locked.bin", 99)
        locked.chmod(0)
        try:
            entries = walk_entries(str(sample_root))
        finally:
            locked.chmod(0o644)

        assert str(locked) not in _by_path(entries)
        assert sum(e.size for e in entries if not e.is_dir) == 60

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions, non-root")
    def test_unlistable_dir_keeps_itself_but_not_contents(self, sample_root: Path, pool):
        locked = sample_root / "B"
        locked.chmod(0)
        try:
            entries = _by_path(walk_entries(str(sample_root), pool=pool))
        finally:
            locked.chmod(0o755)

        assert entries[str(locked)].is_dir
        assert str(locked / "b.txt") not in entries
        assert sum(e.size for e in entries.values() if not e.is_dir) == 10

    def test_cancel_stops_fan_out(self, wide_root: Path, pool):
        entries = walk_entries(str(wide_root), pool=pool, cancel_flag=lambda: True)

        # only the root listing ran
        paths = {e.path for e in entries}
        assert str(wide_root / "root.bin") in paths
        assert str(wide_root / "d0" / "top.bin") not in paths
