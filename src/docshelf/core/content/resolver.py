"""Decide what the content pane shows for a selected node."""

import html
from collections.abc import Callable
from typing import cast

from loguru import logger

from docshelf.core.content.markdown import is_markdown_path, render_markdown
from docshelf.errors import FetchError
from docshelf.models.node import Category, Document, Node
from docshelf.protocols import FetcherProtocol

SELECT_PLACEHOLDER = "<p>Select an item from the sidebar.</p>"
NO_CONTENT_PLACEHOLDER = "<p>No content or file path defined for this document.</p>"


def category_placeholder(name: str) -> str:
    return (
        f"<p>This is the '<strong>{html.escape(name)}</strong>' category. "
        "Select a document or add a sub-item.</p>"
    )


def fetch_error_placeholder(path: str) -> str:
    return (
        f'<p style="color:red;">Error loading content from {html.escape(path)}. '
        "Check the log.</p>"
    )


class ContentResolver:
    """Turn a node into displayable HTML.

    Everything except linked documents resolves synchronously through
    ``resolve_now``; linked documents go through ``fetch_rendered``.
    """

    def __init__(
        self,
        fetcher: FetcherProtocol,
        *,
        render: Callable[[str], str] = render_markdown,
    ) -> None:
        self.fetcher = fetcher
        self.render = render

    @staticmethod
    def needs_fetch(node: Node | None) -> bool:
        return isinstance(node, Document) and not node.has_inline_content and bool(node.file_path)

    def resolve_now(self, node: Node | None) -> str | None:
        """Return content for every case that needs no I/O, else None."""
        if node is None:
            return SELECT_PLACEHOLDER
        if isinstance(node, Category):
            return category_placeholder(node.name)
        if node.has_inline_content:
            return node.content
        if node.file_path:
            return None
        return NO_CONTENT_PLACEHOLDER

    async def fetch_rendered(self, document: Document) -> str:
        """Fetch a linked document and render it; failures become an error placeholder."""
        path = document.file_path or ""
        try:
            text = await self.fetcher.fetch_text(path)
        except FetchError as e:
            logger.warning("Error fetching document {!r}: {}", document.id, e)
            return fetch_error_placeholder(path)
        if is_markdown_path(path):
            return self.render(text)
        return text

    async def resolve(self, node: Node | None) -> str:
        """Full resolution policy for one node."""
        immediate = self.resolve_now(node)
        if immediate is not None:
            return immediate
        return await self.fetch_rendered(cast(Document, node))

    async def load_raw(self, document: Document) -> str:
        """Return the unrendered source of a document for editing.

        Raises:
            FetchError: if the linked file cannot be fetched.
        """
        if document.has_inline_content or not document.file_path:
            return document.content or ""
        return await self.fetcher.fetch_text(document.file_path)
