"""Seed dataset loaded on every start."""

from datetime import date

from docshelf.core.drafts import format_display_date
from docshelf.models.node import Category, Document, Forest


def seed_forest(today: date | None = None) -> Forest:
    """Return the initial documentation tree."""
    stamp = format_display_date(today or date.today())
    return (
        Document(id="1", name="Introduction", file_path="/documents/introduction.md"),
        Category(
            id="2",
            name="EC2 Instances",
            children=(
                Document(id="2.1", name="Overview", file_path="/documents/ec2-overview.html"),
                Document(
                    id="2.2",
                    name="Getting Started",
                    file_path="/documents/getting-started-ec2.md",
                ),
            ),
        ),
        Document(id="3", name="S3 Buckets", file_path="/documents/s3-storage.html"),
        Document(
            id="new_doc",
            name="My New Doc (Inline)",
            content="<h1>Inline Content</h1><p>This content is directly in the data.</p>",
            last_updated=stamp,
        ),
    )
