"""Sibling ordering for display."""

import unicodedata
from dataclasses import replace

from docshelf.models.node import Category, Forest, Node


def collation_key(name: str) -> tuple[str, str, str]:
    """Locale-style collation key for a display name.

    Compares accent- and case-insensitively first, then by accents, then puts
    lowercase before uppercase.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), decomposed.casefold(), decomposed.swapcase()


def sort_key(node: Node) -> tuple[str, str, str, str]:
    # Equal names fall back to id so the order is deterministic.
    return (*collation_key(node.name), node.id)


def sorted_siblings(nodes: Forest) -> Forest:
    return tuple(sorted(nodes, key=sort_key))


def sorted_forest(forest: Forest) -> Forest:
    """Return a copy of the forest with every sibling list sorted by name."""
    result: list[Node] = []
    for node in sorted_siblings(forest):
        if isinstance(node, Category) and node.children:
            node = replace(node, children=sorted_forest(node.children))
        result.append(node)
    return tuple(result)
