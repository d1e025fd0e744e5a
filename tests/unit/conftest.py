"""Shared test fixtures."""

from datetime import date

import pytest

from docshelf.core.content.resolver import ContentResolver
from docshelf.models.node import Forest
from docshelf.seed import seed_forest
from docshelf.session import ViewerSession
from tests.unit.fakes import FakeFetcher

TODAY = date(2026, 10, 19)

SEED_FILES = {
    "/documents/introduction.md": "# Introduction\n\nWelcome to the **docs**.\n",
    "/documents/ec2-overview.html": "<h2>EC2 Overview</h2><p>Virtual servers.</p>",
    "/documents/getting-started-ec2.md": "## Getting Started\n\n1. Launch an instance\n",
    "/documents/s3-storage.html": "<h2>S3</h2><p>Object storage.</p>",
}


@pytest.fixture
def forest() -> Forest:
    """Return the seed forest stamped with a fixed date."""
    return seed_forest(TODAY)


@pytest.fixture
def fetcher() -> FakeFetcher:
    """Return a fetcher serving every linked file of the seed forest."""
    fake = FakeFetcher()
    for path, text in SEED_FILES.items():
        fake.add_file(path, text)
    return fake


@pytest.fixture
def session(forest: Forest, fetcher: FakeFetcher) -> ViewerSession:
    """Return a session over the seed forest, nothing selected yet."""
    return ViewerSession(forest, resolver=ContentResolver(fetcher), today=lambda: TODAY)
