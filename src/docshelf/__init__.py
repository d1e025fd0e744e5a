"""In-memory documentation viewer and editor."""

from docshelf.core.content.resolver import ContentResolver
from docshelf.core.drafts import DocumentDraft
from docshelf.models.node import Category, Document
from docshelf.protocols import FetcherProtocol
from docshelf.session import ViewerSession, create_session

__all__ = [
    "Category",
    "ContentResolver",
    "Document",
    "DocumentDraft",
    "FetcherProtocol",
    "ViewerSession",
    "create_session",
]
