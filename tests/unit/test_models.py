"""Tests for domain models."""

import pytest

from docshelf.models.node import Category, Document


def test_document_is_frozen() -> None:
    doc = Document(id="1", name="Test")
    with pytest.raises(AttributeError):
        doc.name = "changed"  # type: ignore[misc]


def test_document_cannot_have_content_and_file_path() -> None:
    with pytest.raises(ValueError, match="both inline content and a file path"):
        Document(id="1", name="Test", content="<p/>", file_path="/a.md")


def test_document_never_has_children() -> None:
    assert Document(id="1", name="Test").children == ()


def test_category_children_default_empty() -> None:
    category = Category(id="1", name="Test")
    assert category.children == ()
    assert category.kind == "category"
    assert Document.kind == "document"
