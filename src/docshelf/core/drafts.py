"""Validation and construction of new documents from the add-document dialog."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Literal

from loguru import logger

from docshelf.config import BLANK_DOCUMENT_HTML, DOCUMENT_EXTENSIONS, has_document_extension
from docshelf.errors import ValidationError
from docshelf.models.node import Document

DraftSource = Literal["blank", "link", "upload"]


@dataclass(frozen=True)
class DocumentDraft:
    """What the user filled in on the add-document dialog.

    ``source`` picks one of: a blank document with template content, a link to
    an existing server file (``file_path``), or the text of a local file
    (``upload``).
    """

    name: str
    source: DraftSource = "blank"
    file_path: str = ""
    upload: Path | None = None


def format_display_date(day: date) -> str:
    """Format a date as M/D/YYYY, without zero padding."""
    return f"{day.month}/{day.day}/{day.year}"


def validate_name(name: str, *, what: str = "Document") -> str:
    """Return the trimmed name, rejecting empty or whitespace-only input."""
    trimmed = name.strip()
    if not trimmed:
        msg = f"{what} name is required."
        raise ValidationError(msg)
    return trimmed


def read_local_file(path: Path | None) -> str:
    """Read the full text of a user-selected local file.

    The extension is checked before anything is read.
    """
    if path is None:
        msg = "Please select a file to upload."
        raise ValidationError(msg)
    if not has_document_extension(path.name):
        msg = f"Please select a {' or '.join(DOCUMENT_EXTENSIONS)} file."
        raise ValidationError(msg)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error reading file {}: {}", path, e)
        msg = "Error reading file content."
        raise ValidationError(msg) from e


def document_from_draft(
    draft: DocumentDraft,
    *,
    new_id: Callable[[], str],
    today: date,
) -> Document:
    """Validate a draft and build the new document.

    ``new_id`` is only called once validation has passed, so rejected drafts
    never consume an id.

    Raises:
        ValidationError: empty name, bad link path, or unusable upload.
    """
    name = validate_name(draft.name)
    stamp = format_display_date(today)

    if draft.source == "blank":
        return Document(id=new_id(), name=name, content=BLANK_DOCUMENT_HTML, last_updated=stamp)

    if draft.source == "link":
        file_path = draft.file_path.strip()
        if not file_path or not has_document_extension(file_path):
            msg = (
                "Valid file path (ending in .md or .html) is required for linking. "
                "Example: /documents/myfile.md"
            )
            raise ValidationError(msg)
        # last_updated is only stamped when inline content is written
        return Document(id=new_id(), name=name, file_path=file_path)

    if draft.source == "upload":
        content = read_local_file(draft.upload)
        return Document(id=new_id(), name=name, content=content, last_updated=stamp)

    msg = f"Unknown document source: {draft.source!r}"
    raise ValidationError(msg)
