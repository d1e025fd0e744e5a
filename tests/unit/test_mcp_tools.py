"""Tests for MCP tool core functions."""

import asyncio

from docshelf.mcp.server import (
    docshelf_add_category,
    docshelf_add_document,
    docshelf_close_add_document,
    docshelf_close_editor,
    docshelf_context_menu,
    docshelf_delete,
    docshelf_menu_action,
    docshelf_open_add_document,
    docshelf_open_editor,
    docshelf_rename,
    docshelf_save_edit,
    docshelf_select,
    docshelf_submit_add_document,
    docshelf_tree,
    docshelf_view,
)
from docshelf.session import ViewerSession


def test_docshelf_tree_markdown(session: ViewerSession) -> None:
    result = docshelf_tree(session)
    assert result["count"] == 6
    assert result["outline"].startswith("- [category] EC2 Instances")


def test_docshelf_tree_json_is_sorted_and_nested(session: ViewerSession) -> None:
    result = docshelf_tree(session, output_format="json")
    names = [entry["name"] for entry in result["tree"]]
    assert names == ["EC2 Instances", "Introduction", "My New Doc (Inline)", "S3 Buckets"]
    ec2 = result["tree"][0]
    assert [c["name"] for c in ec2["children"]] == ["Getting Started", "Overview"]


def test_docshelf_tree_json_depth_limit(session: ViewerSession) -> None:
    result = docshelf_tree(session, output_format="json", max_depth=0)
    ec2 = result["tree"][0]
    assert "children" not in ec2
    assert ec2["child_count"] == 2


def test_docshelf_select_returns_pane(session: ViewerSession) -> None:
    result = asyncio.run(docshelf_select(session, node_id="1"))
    assert result["success"] is True
    assert result["state"] == "document"
    assert result["loading"] is False
    assert "<h1>Introduction</h1>" in result["content"]
    assert docshelf_view(session)["active_id"] == "1"


def test_docshelf_select_unknown_node(session: ViewerSession) -> None:
    result = asyncio.run(docshelf_select(session, node_id="nope"))
    assert result["success"] is False
    assert "not found" in result["error"]


def test_docshelf_add_category_errors_are_reported(session: ViewerSession) -> None:
    assert docshelf_add_category(session, name="")["success"] is False
    result = docshelf_add_category(session, name="Sub", parent_id="1")
    assert result["success"] is False
    assert "not a category" in result["error"]
    assert docshelf_add_category(session, name="Sub", parent_id="2") == {
        "success": True,
        "node_id": "4",
    }


def test_docshelf_add_document_selects_it(session: ViewerSession) -> None:
    result = asyncio.run(docshelf_add_document(session, name="Guide", parent_id="2"))
    assert result["success"] is True
    assert result["active_id"] == result["node_id"]
    assert "New Document" in result["content"]


def test_docshelf_add_document_rejects_bad_link(session: ViewerSession) -> None:
    result = asyncio.run(
        docshelf_add_document(session, name="Bad", source="link", file_path="/a.txt")
    )
    assert result["success"] is False


def test_docshelf_rename_and_delete(session: ViewerSession) -> None:
    assert docshelf_rename(session, node_id="2", name="Compute")["name"] == "Compute"
    result = docshelf_delete(session, node_id="2")
    assert result == {"success": True, "removed": 3, "active_id": None}
    assert docshelf_delete(session, node_id="2")["success"] is False


def test_docshelf_edit_roundtrip(session: ViewerSession) -> None:
    asyncio.run(docshelf_select(session, node_id="2.2"))
    opened = asyncio.run(docshelf_open_editor(session))
    assert opened["content"].startswith("## Getting Started")

    saved = docshelf_save_edit(session, content="<p>new</p>")
    assert saved == {"success": True, "node_id": "2.2", "last_updated": "10/19/2026"}
    assert docshelf_view(session)["content"] == "<p>new</p>"


def test_docshelf_open_editor_without_document(session: ViewerSession) -> None:
    assert asyncio.run(docshelf_open_editor(session))["success"] is False
    assert docshelf_save_edit(session, content="x")["success"] is False


def test_docshelf_close_editor(session: ViewerSession) -> None:
    asyncio.run(docshelf_select(session, node_id="new_doc"))
    asyncio.run(docshelf_open_editor(session))
    assert docshelf_close_editor(session) == {"success": True, "closed": True}
    assert session.editor is None
    assert docshelf_close_editor(session)["closed"] is False


def test_docshelf_context_menu_lists_actions(session: ViewerSession) -> None:
    result = docshelf_context_menu(session, node_id="2", x=5, y=6)
    assert result["kind"] == "category"
    assert result["actions"] == ["rename", "add_subcategory", "add_document", "delete"]
    assert docshelf_context_menu(session, node_id="1")["actions"] == ["rename", "delete"]

    assert docshelf_context_menu(session)["visible"] is False
    assert session.context_menu.visible is False
    assert docshelf_context_menu(session, node_id="nope")["success"] is False


def test_docshelf_menu_action_rename_and_subcategory(session: ViewerSession) -> None:
    docshelf_context_menu(session, node_id="2")
    assert docshelf_menu_action(session, action="rename", name="Compute")["name"] == "Compute"

    docshelf_context_menu(session, node_id="2")
    result = docshelf_menu_action(session, action="add_subcategory", name="Networking")
    assert result == {"success": True, "node_id": "4"}
    assert session.context_menu.visible is False


def test_docshelf_menu_action_errors(session: ViewerSession) -> None:
    result = docshelf_menu_action(session, action="delete")
    assert result["success"] is False
    assert "No context menu" in result["error"]

    docshelf_context_menu(session, node_id="1")
    assert "not available" in docshelf_menu_action(session, action="add_document")["error"]
    assert docshelf_menu_action(session, action="explode")["success"] is False


def test_docshelf_menu_action_delete_resets_selection(session: ViewerSession) -> None:
    asyncio.run(docshelf_select(session, node_id="2.1"))
    docshelf_context_menu(session, node_id="2")
    assert docshelf_menu_action(session, action="delete") == {"success": True, "active_id": None}


def test_docshelf_add_document_dialog_from_menu(session: ViewerSession) -> None:
    docshelf_context_menu(session, node_id="2")
    opened = docshelf_menu_action(session, action="add_document")
    assert opened == {"success": True, "parent_id": "2", "parent_name": "EC2 Instances"}

    rejected = asyncio.run(docshelf_submit_add_document(session, name="  "))
    assert rejected["success"] is False
    assert session.add_document_target is not None

    saved = asyncio.run(docshelf_submit_add_document(session, name="Pricing"))
    assert saved["success"] is True
    assert saved["active_id"] == saved["node_id"]
    assert session.add_document_target is None


def test_docshelf_add_document_dialog_open_and_cancel(session: ViewerSession) -> None:
    assert docshelf_open_add_document(session)["parent_id"] is None
    assert docshelf_close_add_document(session) == {"success": True}
    result = asyncio.run(docshelf_submit_add_document(session, name="Late"))
    assert result["success"] is False
    assert docshelf_open_add_document(session, parent_id="1")["success"] is False
