"""Render the documentation tree as an indented markdown outline."""

import io

from docshelf.core.tree.sorting import sorted_forest
from docshelf.models.node import Category, Document, Forest, Node


def _describe(node: Node) -> str:
    if isinstance(node, Category):
        return f"[category] {node.name}"
    if node.has_inline_content:
        return f"[document] {node.name} (inline)"
    if node.file_path:
        return f"[document] {node.name} -> {node.file_path}"
    return f"[document] {node.name} (empty)"


def render_outline(
    forest: Forest,
    *,
    max_depth: int | None = None,
    active_id: str | None = None,
    show_ids: bool = True,
) -> str:
    """Render the forest, sorted, as a bullet-list hierarchy.

    Args:
        forest: Root nodes to render.
        max_depth: Max levels below the roots to include (None = unlimited).
        active_id: Node to mark with ``*`` as the current selection.
        show_ids: Whether to append ``id=...`` to each line.

    Returns:
        Markdown string, one line per node.
    """
    out = io.StringIO()

    def walk(nodes: Forest, depth: int) -> None:
        for node in nodes:
            indent = "    " * depth
            marker = "* " if node.id == active_id else "- "
            line = f"{indent}{marker}{_describe(node)}"
            if show_ids:
                line += f"  id={node.id}"
            if isinstance(node, Document) and node.last_updated:
                line += f"  (updated {node.last_updated})"
            out.write(line + "\n")

            if not node.children:
                continue
            if max_depth is not None and depth >= max_depth:
                # Truncation indicator when children are cut off by max_depth
                count = len(node.children)
                noun = "child" if count == 1 else "children"
                out.write(f"{indent}    - ... ({count} more {noun}, id={node.id})\n")
                continue
            walk(node.children, depth + 1)

    walk(sorted_forest(forest), 0)
    return out.getvalue()
