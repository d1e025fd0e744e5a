"""Configuration constants for docshelf."""

import os
from pathlib import Path

# Linked and uploaded documents must use one of these extensions.
DOCUMENT_EXTENSIONS: tuple[str, ...] = (".md", ".html")

# Where application-relative file paths are fetched from.
DEFAULT_BASE_URL: str = "http://localhost:5173"

# Extensions passed to Python-Markdown when rendering linked .md files.
MARKDOWN_EXTENSIONS: list[str] = ["fenced_code", "tables", "sane_lists"]

# Inline content of a newly created blank document.
BLANK_DOCUMENT_HTML: str = "<h1>New Document</h1><p>Start editing your content here.</p>"

_TRUTHY = {"1", "true", "yes", "on"}


def resolve_base_url() -> str:
    """Return the base URL for document fetches, honouring DOCSHELF_BASE_URL."""
    return os.environ.get("DOCSHELF_BASE_URL", "").strip() or DEFAULT_BASE_URL


def resolve_docs_dir() -> Path | None:
    """Return the local documents directory from DOCSHELF_DOCS_DIR, if set."""
    raw = os.environ.get("DOCSHELF_DOCS_DIR", "").strip()
    return Path(raw).expanduser() if raw else None


def resolve_fetch_timeout() -> float | None:
    """Return the fetch timeout in seconds. Unset means requests wait forever."""
    raw = os.environ.get("DOCSHELF_FETCH_TIMEOUT", "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        msg = f"DOCSHELF_FETCH_TIMEOUT must be a number, got {raw!r}"
        raise ValueError(msg) from None


def resolve_allow_unsafe_html() -> bool:
    """Whether displayed HTML skips sanitizing (DOCSHELF_ALLOW_UNSAFE_HTML)."""
    return os.environ.get("DOCSHELF_ALLOW_UNSAFE_HTML", "").strip().lower() in _TRUTHY


def has_document_extension(name: str) -> bool:
    return name.endswith(DOCUMENT_EXTENSIONS)
