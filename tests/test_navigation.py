"""Tests for index-path drill-down helpers."""

import pytest

from diskviz.models import Node
from diskviz.navigation import (
    breadcrumb,
    child_path,
    is_valid,
    parent_path,
    resolve,
    sorted_children,
)


def f(name, size):
    return Node(name=name, path=f"/r/{name}", is_dir=False, size=size)


@pytest.fixture
def tree():
    big = Node(name="big", path="/r/big", is_dir=True, size=50, children=[f("x", 20), f("y", 30)])
    small = Node(name="small", path="/r/small", is_dir=True, size=5, children=[f("z", 5)])
    return Node(name="r", path="/r", is_dir=True, size=65, children=[small, f("a", 10), big])


def test_sorted_children_by_size_then_name():
    node = Node(name="r", path="/r", is_dir=True, children=[f("b", 5), f("a", 5), f("c", 9)])
    assert [c.name for c in sorted_children(node)] == ["c", "a", "b"]


def test_sorted_children_leaves_tree_order_alone(tree):
    sorted_children(tree)
    assert [c.name for c in tree.children] == ["small", "a", "big"]


def test_resolve_follows_display_order(tree):
    assert resolve(tree, ()) is tree
    assert resolve(tree, (0,)).name == "big"
    assert resolve(tree, (2,)).name == "small"


def test_breadcrumb(tree):
    assert breadcrumb(tree, (0,)) == ["r", "big"]


def test_stale_path_falls_back_to_root(tree):
    assert resolve(tree, (7,)) is tree
    assert not is_valid(tree, (7,))
    # index 1 is the file "a", which cannot be entered
    assert resolve(tree, (1,)) is tree
    assert not is_valid(tree, (0, 0))


def test_path_arithmetic():
    assert child_path((), 3) == (3,)
    assert child_path((3,), 1) == (3, 1)
    assert parent_path((3, 1)) == (3,)
    assert parent_path(()) == ()
