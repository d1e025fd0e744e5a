"""MCP server exposing the documentation viewer session as tools."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from docshelf.core.drafts import DocumentDraft
from docshelf.core.tree.outline import render_outline
from docshelf.core.tree.store import find_by_id, iter_nodes
from docshelf.errors import DocshelfError
from docshelf.models.node import Document, Node
from docshelf.session import ViewerSession, create_session


def _serialize_node(node: Node, *, max_depth: int | None = None, depth: int = 0) -> dict[str, Any]:
    entry: dict[str, Any] = {"id": node.id, "name": node.name, "kind": node.kind}
    if isinstance(node, Document):
        entry["file_path"] = node.file_path
        entry["has_inline_content"] = node.has_inline_content
        entry["last_updated"] = node.last_updated
    elif max_depth is None or depth < max_depth:
        entry["children"] = [
            _serialize_node(child, max_depth=max_depth, depth=depth + 1) for child in node.children
        ]
    else:
        entry["child_count"] = len(node.children)
    return entry


def _pane(session: ViewerSession) -> dict[str, Any]:
    node = session.selected
    output: dict[str, Any] = {
        "active_id": session.active_id,
        "state": session.selection_state,
        "loading": session.loading,
        "content": session.displayed_html,
    }
    if node is not None:
        output["name"] = node.name
        if isinstance(node, Document):
            output["last_updated"] = node.last_updated
    return output


def _failure(e: DocshelfError) -> dict[str, Any]:
    return {"success": False, "error": str(e)}


def _draft(name: str, source: str, file_path: str, upload_path: str | None) -> DocumentDraft:
    return DocumentDraft(
        name=name,
        source=source,  # type: ignore[arg-type]
        file_path=file_path,
        upload=Path(upload_path).expanduser() if upload_path else None,
    )


# --- Core functions (testable without MCP context) ---


def docshelf_tree(
    session: ViewerSession,
    *,
    max_depth: int | None = None,
    output_format: str = "markdown",
) -> dict[str, Any]:
    """Return the sorted documentation tree.

    Args:
        max_depth: Max levels below the roots (None = unlimited).
        output_format: "markdown" (outline) or "json" (nested structure).
    """
    count = sum(1 for _ in iter_nodes(session.forest))
    output: dict[str, Any] = {"active_id": session.active_id, "count": count}
    if output_format == "json":
        output["tree"] = [_serialize_node(node, max_depth=max_depth) for node in session.tree()]
    else:
        output["outline"] = render_outline(
            session.forest, max_depth=max_depth, active_id=session.active_id
        )
    return output


def docshelf_view(session: ViewerSession) -> dict[str, Any]:
    """Return what the content pane currently shows."""
    return _pane(session)


async def docshelf_select(session: ViewerSession, *, node_id: str) -> dict[str, Any]:
    """Select a node and return the resolved content pane."""
    try:
        await session.select(node_id)
    except DocshelfError as e:
        return _failure(e)
    return {"success": True, **_pane(session)}


def docshelf_add_category(
    session: ViewerSession,
    *,
    name: str,
    parent_id: str | None = None,
) -> dict[str, Any]:
    """Add a category at the root or under a parent category."""
    try:
        category = session.add_category(name, parent_id=parent_id)
    except DocshelfError as e:
        return _failure(e)
    return {"success": True, "node_id": category.id}


async def docshelf_add_document(
    session: ViewerSession,
    *,
    name: str,
    source: str = "blank",
    file_path: str = "",
    upload_path: str | None = None,
    parent_id: str | None = None,
) -> dict[str, Any]:
    """Add a document and select it.

    Args:
        name: Display name.
        source: "blank", "link" (server file at file_path) or "upload" (local file).
        file_path: Application-relative path ending in .md or .html, for "link".
        upload_path: Local file to read, for "upload".
        parent_id: Parent category (None = root).
    """
    draft = _draft(name, source, file_path, upload_path)
    try:
        document = await session.add_document(draft, parent_id=parent_id)
    except DocshelfError as e:
        return _failure(e)
    return {"success": True, "node_id": document.id, **_pane(session)}


def docshelf_rename(session: ViewerSession, *, node_id: str, name: str) -> dict[str, Any]:
    """Rename a category or document."""
    try:
        node = session.rename(node_id, name)
    except DocshelfError as e:
        return _failure(e)
    return {"success": True, "node_id": node.id, "name": node.name}


def docshelf_delete(session: ViewerSession, *, node_id: str) -> dict[str, Any]:
    """Delete a node together with all of its children."""
    node = find_by_id(session.forest, node_id)
    try:
        session.delete(node_id)
    except DocshelfError as e:
        return _failure(e)
    removed = sum(1 for _ in iter_nodes((node,))) if node is not None else 0
    return {"success": True, "removed": removed, "active_id": session.active_id}


async def docshelf_open_editor(session: ViewerSession) -> dict[str, Any]:
    """Open the editor on the selected document and return its raw source."""
    editor = await session.open_editor()
    if editor is None:
        return {"success": False, "error": "Select a document to edit."}
    output: dict[str, Any] = {
        "success": True,
        "node_id": editor.document_id,
        "name": editor.document_name,
        "content": editor.content,
    }
    if editor.warning:
        output["warning"] = editor.warning
    return output


def docshelf_save_edit(session: ViewerSession, *, content: str) -> dict[str, Any]:
    """Save the open editor's text as the document's inline content."""
    try:
        document = session.save_edit(content)
    except DocshelfError as e:
        return _failure(e)
    if document is None:
        return {"success": False, "error": "No document is being edited."}
    return {"success": True, "node_id": document.id, "last_updated": document.last_updated}


def docshelf_close_editor(session: ViewerSession) -> dict[str, Any]:
    """Discard the open editor without saving."""
    was_open = session.editor is not None
    session.close_editor()
    return {"success": True, "closed": was_open}


def docshelf_context_menu(
    session: ViewerSession,
    *,
    node_id: str | None = None,
    x: int = 0,
    y: int = 0,
) -> dict[str, Any]:
    """Open the context menu on a node, or dismiss it when node_id is None."""
    if node_id is None:
        session.hide_context_menu()
        return {"success": True, "visible": False, "actions": []}
    try:
        menu = session.show_context_menu(node_id, x=x, y=y)
    except DocshelfError as e:
        return _failure(e)
    return {
        "success": True,
        "visible": True,
        "target_id": menu.target_id,
        "kind": menu.target_kind,
        "actions": list(session.menu_actions()),
    }


def docshelf_menu_action(
    session: ViewerSession,
    *,
    action: str,
    name: str = "",
) -> dict[str, Any]:
    """Run an action from the open context menu.

    Args:
        action: "rename", "add_subcategory", "add_document" or "delete".
        name: New name for "rename", category name for "add_subcategory".
    """
    try:
        if action == "rename":
            node = session.rename_target(name)
            return {"success": True, "node_id": node.id, "name": node.name}
        if action == "add_subcategory":
            category = session.add_category_to_target(name)
            return {"success": True, "node_id": category.id}
        if action == "add_document":
            target = session.add_document_to_target()
            return {
                "success": True,
                "parent_id": target.parent_id,
                "parent_name": target.parent_name,
            }
        if action == "delete":
            session.delete_target()
            return {"success": True, "active_id": session.active_id}
        msg = f"Unknown context menu action {action!r}"
        raise DocshelfError(msg)
    except DocshelfError as e:
        return _failure(e)


def docshelf_open_add_document(
    session: ViewerSession,
    *,
    parent_id: str | None = None,
) -> dict[str, Any]:
    """Open the add-document dialog for the root or a parent category."""
    try:
        target = session.open_add_document(parent_id)
    except DocshelfError as e:
        return _failure(e)
    return {"success": True, "parent_id": target.parent_id, "parent_name": target.parent_name}


async def docshelf_submit_add_document(
    session: ViewerSession,
    *,
    name: str,
    source: str = "blank",
    file_path: str = "",
    upload_path: str | None = None,
) -> dict[str, Any]:
    """Save the open add-document dialog. It stays open if the draft is rejected."""
    if session.add_document_target is None:
        return {"success": False, "error": "The add-document dialog is not open."}
    try:
        document = await session.submit_add_document(_draft(name, source, file_path, upload_path))
    except DocshelfError as e:
        return _failure(e)
    return {"success": True, "node_id": document.id, **_pane(session)}


def docshelf_close_add_document(session: ViewerSession) -> dict[str, Any]:
    """Cancel the add-document dialog."""
    session.close_add_document()
    return {"success": True}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    session: ViewerSession


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Load the seed tree and apply the initial selection."""
    session = create_session()
    await session.start()
    logger.info("Viewer session ready, selected {!r}", session.active_id)
    yield ServerContext(session=session)


mcp_server = FastMCP(
    "docshelf",
    instructions="""\
docshelf is an in-memory documentation tree of categories and documents.
Nothing is saved: every server start begins from the seed dataset.

## Typical flow
1. Call docshelf_tree_tool to see the sorted tree and node ids.
2. Call docshelf_select_tool with a node id to read its content. Linked .md
   files come back rendered as HTML.
3. To change a document, call docshelf_open_editor_tool, then
   docshelf_save_edit_tool. Saving turns a linked document into an inline one.
4. docshelf_context_menu_tool lists the actions for a node; run one with
   docshelf_menu_action_tool. "add_document" opens the add-document dialog,
   which docshelf_submit_add_document_tool saves.

Documents can only be added under categories, never under other documents.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def docshelf_tree_tool(
    ctx: Context,
    max_depth: int | None = None,
    output_format: str = "markdown",
) -> dict[str, Any]:
    """Show the documentation tree, sorted by name at every level.

    Args:
        max_depth: Max levels below the roots (None = unlimited).
        output_format: "markdown" (outline) or "json" (nested structure).
    """
    return docshelf_tree(_ctx(ctx).session, max_depth=max_depth, output_format=output_format)


@mcp_server.tool()
async def docshelf_view_tool(ctx: Context) -> dict[str, Any]:
    """Show the current selection and content pane."""
    return docshelf_view(_ctx(ctx).session)


@mcp_server.tool()
async def docshelf_select_tool(ctx: Context, node_id: str) -> dict[str, Any]:
    """Select a category or document and return its content.

    Args:
        node_id: Node ID from docshelf_tree_tool.
    """
    return await docshelf_select(_ctx(ctx).session, node_id=node_id)


@mcp_server.tool()
async def docshelf_add_category_tool(
    ctx: Context,
    name: str,
    parent_id: str | None = None,
) -> dict[str, Any]:
    """Add a category.

    Args:
        name: Category name.
        parent_id: Parent category ID (None = top level).
    """
    return docshelf_add_category(_ctx(ctx).session, name=name, parent_id=parent_id)


@mcp_server.tool()
async def docshelf_add_document_tool(
    ctx: Context,
    name: str,
    source: str = "blank",
    file_path: str = "",
    upload_path: str | None = None,
    parent_id: str | None = None,
) -> dict[str, Any]:
    """Add a document and select it.

    Args:
        name: Document name.
        source: "blank", "link" or "upload".
        file_path: Server path ending in .md or .html (source="link").
        upload_path: Local .md or .html file to copy in (source="upload").
        parent_id: Parent category ID (None = top level).
    """
    return await docshelf_add_document(
        _ctx(ctx).session,
        name=name,
        source=source,
        file_path=file_path,
        upload_path=upload_path,
        parent_id=parent_id,
    )


@mcp_server.tool()
async def docshelf_rename_tool(ctx: Context, node_id: str, name: str) -> dict[str, Any]:
    """Rename a category or document.

    Args:
        node_id: Node to rename.
        name: New name.
    """
    return docshelf_rename(_ctx(ctx).session, node_id=node_id, name=name)


@mcp_server.tool()
async def docshelf_delete_tool(ctx: Context, node_id: str) -> dict[str, Any]:
    """Delete a node and all of its children.

    Args:
        node_id: Node to delete.
    """
    return docshelf_delete(_ctx(ctx).session, node_id=node_id)


@mcp_server.tool()
async def docshelf_open_editor_tool(ctx: Context) -> dict[str, Any]:
    """Open the editor on the selected document and return its raw source."""
    return await docshelf_open_editor(_ctx(ctx).session)


@mcp_server.tool()
async def docshelf_save_edit_tool(ctx: Context, content: str) -> dict[str, Any]:
    """Save new content for the document open in the editor.

    Args:
        content: Full replacement HTML.
    """
    return docshelf_save_edit(_ctx(ctx).session, content=content)


@mcp_server.tool()
async def docshelf_close_editor_tool(ctx: Context) -> dict[str, Any]:
    """Close the editor without saving."""
    return docshelf_close_editor(_ctx(ctx).session)


@mcp_server.tool()
async def docshelf_context_menu_tool(
    ctx: Context,
    node_id: str | None = None,
    x: int = 0,
    y: int = 0,
) -> dict[str, Any]:
    """Open the context menu on a node and list its actions.

    Args:
        node_id: Node to open the menu on (None = dismiss the menu).
        x: Horizontal position of the menu.
        y: Vertical position of the menu.
    """
    return docshelf_context_menu(_ctx(ctx).session, node_id=node_id, x=x, y=y)


@mcp_server.tool()
async def docshelf_menu_action_tool(ctx: Context, action: str, name: str = "") -> dict[str, Any]:
    """Run an action from the open context menu.

    Args:
        action: "rename", "add_subcategory", "add_document" or "delete".
        name: New name ("rename") or category name ("add_subcategory").
    """
    return docshelf_menu_action(_ctx(ctx).session, action=action, name=name)


@mcp_server.tool()
async def docshelf_open_add_document_tool(
    ctx: Context,
    parent_id: str | None = None,
) -> dict[str, Any]:
    """Open the add-document dialog.

    Args:
        parent_id: Parent category ID (None = top level).
    """
    return docshelf_open_add_document(_ctx(ctx).session, parent_id=parent_id)


@mcp_server.tool()
async def docshelf_submit_add_document_tool(
    ctx: Context,
    name: str,
    source: str = "blank",
    file_path: str = "",
    upload_path: str | None = None,
) -> dict[str, Any]:
    """Save the open add-document dialog and select the new document.

    Args:
        name: Document name.
        source: "blank", "link" or "upload".
        file_path: Server path ending in .md or .html (source="link").
        upload_path: Local .md or .html file to copy in (source="upload").
    """
    return await docshelf_submit_add_document(
        _ctx(ctx).session,
        name=name,
        source=source,
        file_path=file_path,
        upload_path=upload_path,
    )


@mcp_server.tool()
async def docshelf_close_add_document_tool(ctx: Context) -> dict[str, Any]:
    """Cancel the add-document dialog."""
    return docshelf_close_add_document(_ctx(ctx).session)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from docshelf.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
