"""Pure operations on the category/document forest.

Every function takes a forest and returns a new one. Nodes are never
mutated; only the chain of ancestors above a changed node is rebuilt and all
other subtrees are shared with the input.
"""

from collections.abc import Callable, Iterator
from dataclasses import replace

from docshelf.errors import InvalidParentError
from docshelf.models.node import Category, Document, Forest, Node


def iter_nodes(forest: Forest) -> Iterator[Node]:
    """Yield every node in pre-order (parent before children)."""
    for node in forest:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_by_id(forest: Forest, node_id: str) -> Node | None:
    """Return the first node with ``node_id`` in depth-first order, or None."""
    for node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def _update(nodes: Forest, node_id: str, update_fn: Callable[[Node], Node]) -> Forest | None:
    for index, node in enumerate(nodes):
        if node.id == node_id:
            return (*nodes[:index], update_fn(node), *nodes[index + 1 :])
        if isinstance(node, Category) and node.children:
            children = _update(node.children, node_id, update_fn)
            if children is not None:
                return (*nodes[:index], replace(node, children=children), *nodes[index + 1 :])
    return None


def update_by_id(forest: Forest, node_id: str, update_fn: Callable[[Node], Node]) -> Forest:
    """Replace the node with ``node_id`` by ``update_fn(node)``.

    Returns the input forest object itself when the id is absent.
    """
    updated = _update(forest, node_id, update_fn)
    return forest if updated is None else updated


def _remove(nodes: Forest, node_id: str) -> Forest | None:
    for index, node in enumerate(nodes):
        if node.id == node_id:
            return (*nodes[:index], *nodes[index + 1 :])
        if isinstance(node, Category) and node.children:
            children = _remove(node.children, node_id)
            if children is not None:
                return (*nodes[:index], replace(node, children=children), *nodes[index + 1 :])
    return None


def remove_by_id(forest: Forest, node_id: str) -> Forest:
    """Remove the node with ``node_id`` together with its whole subtree.

    Returns the input forest object itself when the id is absent.
    """
    removed = _remove(forest, node_id)
    return forest if removed is None else removed


def add_child(forest: Forest, parent_id: str, new_node: Node) -> Forest:
    """Append ``new_node`` to the children of category ``parent_id``.

    An absent parent leaves the forest unchanged.

    Raises:
        InvalidParentError: if ``parent_id`` names a document.
    """
    parent = find_by_id(forest, parent_id)
    if parent is None:
        return forest
    if isinstance(parent, Document):
        raise InvalidParentError(parent_id)
    return update_by_id(
        forest,
        parent_id,
        lambda category: replace(category, children=(*category.children, new_node)),
    )


def add_root(forest: Forest, new_node: Node) -> Forest:
    """Append ``new_node`` at the top level."""
    return (*forest, new_node)


def contains(forest: Forest, node_id: str) -> bool:
    return find_by_id(forest, node_id) is not None
