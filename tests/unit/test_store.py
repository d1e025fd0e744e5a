"""Tests for the pure forest operations."""

from dataclasses import replace

import pytest

from docshelf.core.tree.store import (
    add_child,
    add_root,
    find_by_id,
    iter_nodes,
    remove_by_id,
    update_by_id,
)
from docshelf.errors import InvalidParentError
from docshelf.models.node import Category, Document, Forest

DEEP_FOREST: Forest = (
    Category(
        id="a",
        name="A",
        children=(
            Category(
                id="a1",
                name="A1",
                children=(
                    Category(id="a1x", name="A1X", children=(Document(id="leaf", name="Leaf"),)),
                ),
            ),
            Document(id="a2", name="A2", content="<p>a2</p>"),
        ),
    ),
    Category(id="b", name="B", children=(Document(id="b1", name="B1"),)),
    Document(id="c", name="C", file_path="/documents/c.md"),
)


def test_iter_nodes_is_pre_order() -> None:
    ids = [node.id for node in iter_nodes(DEEP_FOREST)]
    assert ids == ["a", "a1", "a1x", "leaf", "a2", "b", "b1", "c"]


@pytest.mark.parametrize("node_id", ["a", "a1", "a1x", "leaf", "a2", "b1", "c"])
def test_find_by_id_returns_node_at_any_depth(node_id: str) -> None:
    node = find_by_id(DEEP_FOREST, node_id)
    assert node is not None
    assert node.id == node_id


def test_find_by_id_returns_the_stored_object() -> None:
    leaf = DEEP_FOREST[0].children[0].children[0].children[0]
    assert find_by_id(DEEP_FOREST, "leaf") is leaf


def test_find_by_id_absent_returns_none() -> None:
    assert find_by_id(DEEP_FOREST, "nope") is None
    assert find_by_id((), "a") is None


def test_update_by_id_replaces_nested_node_only() -> None:
    updated = update_by_id(DEEP_FOREST, "leaf", lambda n: replace(n, name="Renamed"))

    assert find_by_id(updated, "leaf").name == "Renamed"  # type: ignore[union-attr]
    # Input forest is untouched
    assert find_by_id(DEEP_FOREST, "leaf").name == "Leaf"  # type: ignore[union-attr]
    # Subtrees off the changed path are shared, not copied
    assert updated[1] is DEEP_FOREST[1]
    assert updated[2] is DEEP_FOREST[2]
    assert updated[0].children[1] is DEEP_FOREST[0].children[1]


def test_update_by_id_absent_returns_same_forest() -> None:
    assert update_by_id(DEEP_FOREST, "nope", lambda n: replace(n, name="x")) is DEEP_FOREST


def test_remove_by_id_removes_subtree_and_descendants() -> None:
    removed = remove_by_id(DEEP_FOREST, "a1")
    for gone in ("a1", "a1x", "leaf"):
        assert find_by_id(removed, gone) is None
    assert find_by_id(removed, "a2") is not None
    assert find_by_id(removed, "a") is not None


@pytest.mark.parametrize("node_id", [node.id for node in iter_nodes(DEEP_FOREST)])
def test_remove_then_find_yields_none(node_id: str) -> None:
    assert find_by_id(remove_by_id(DEEP_FOREST, node_id), node_id) is None


def test_remove_by_id_root() -> None:
    removed = remove_by_id(DEEP_FOREST, "c")
    assert [n.id for n in removed] == ["a", "b"]


def test_remove_by_id_absent_returns_same_forest() -> None:
    assert remove_by_id(DEEP_FOREST, "nope") is DEEP_FOREST


def test_add_child_appends_to_category() -> None:
    new = Document(id="new", name="New")
    result = add_child(DEEP_FOREST, "a1x", new)

    parent = find_by_id(result, "a1x")
    assert isinstance(parent, Category)
    assert parent.children[-1] is new
    assert find_by_id(result, "new") is new


def test_add_child_to_empty_category() -> None:
    forest: Forest = (Category(id="empty", name="Empty"),)
    result = add_child(forest, "empty", Category(id="sub", name="Sub"))
    assert [c.id for c in result[0].children] == ["sub"]


def test_add_child_under_document_raises_and_leaves_forest() -> None:
    snapshot = DEEP_FOREST
    with pytest.raises(InvalidParentError) as exc_info:
        add_child(DEEP_FOREST, "a2", Document(id="new", name="New"))
    assert exc_info.value.parent_id == "a2"
    assert DEEP_FOREST == snapshot
    assert find_by_id(DEEP_FOREST, "new") is None


def test_add_child_absent_parent_is_noop() -> None:
    assert add_child(DEEP_FOREST, "nope", Document(id="new", name="New")) is DEEP_FOREST


def test_add_root_appends_at_top_level() -> None:
    new = Category(id="d", name="D")
    result = add_root(DEEP_FOREST, new)
    assert result[-1] is new
    assert len(result) == len(DEEP_FOREST) + 1
