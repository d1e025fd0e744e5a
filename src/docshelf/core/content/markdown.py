"""Markdown to HTML rendering for linked documents."""

import markdown

from docshelf.config import MARKDOWN_EXTENSIONS


def render_markdown(text: str) -> str:
    """Render Markdown text to an HTML fragment with the default extensions."""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def is_markdown_path(path: str) -> bool:
    return path.endswith(".md")
