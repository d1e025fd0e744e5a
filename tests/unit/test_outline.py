"""Tests for outline rendering of the tree."""

from docshelf.core.tree.outline import render_outline
from docshelf.models.node import Forest


def test_outline_lists_nodes_sorted(forest: Forest) -> None:
    md = render_outline(forest)
    lines = md.splitlines()
    assert lines[0].startswith("- [category] EC2 Instances")
    assert lines[1] == "    - [document] Getting Started -> /documents/getting-started-ec2.md  id=2.2"
    assert lines[2].startswith("    - [document] Overview")
    assert lines[3].startswith("- [document] Introduction")
    assert "(inline)" in lines[4]
    assert "(updated 10/19/2026)" in lines[4]


def test_outline_depth_limit_shows_truncation(forest: Forest) -> None:
    md = render_outline(forest, max_depth=0)
    assert "Overview" not in md
    assert "... (2 more children, id=2)" in md


def test_outline_marks_active_node(forest: Forest) -> None:
    md = render_outline(forest, active_id="3", show_ids=False)
    assert "* [document] S3 Buckets -> /documents/s3-storage.html\n" in md
    assert "id=" not in md
