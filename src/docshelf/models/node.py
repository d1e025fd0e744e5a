"""Domain models for the documentation tree and viewer state."""

from dataclasses import dataclass
from typing import ClassVar, TypeAlias


@dataclass(frozen=True)
class Category:
    """A container node in the documentation tree."""

    id: str
    name: str
    children: tuple["Node", ...] = ()

    kind: ClassVar[str] = "category"


@dataclass(frozen=True)
class Document:
    """A leaf node holding inline HTML or a pointer to a linked file."""

    id: str
    name: str
    content: str | None = None
    file_path: str | None = None
    last_updated: str | None = None

    kind: ClassVar[str] = "document"

    def __post_init__(self) -> None:
        if self.content is not None and self.file_path is not None:
            msg = f"Document {self.id!r} cannot have both inline content and a file path"
            raise ValueError(msg)

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    @property
    def has_inline_content(self) -> bool:
        return bool(self.content)


Node: TypeAlias = Category | Document
Forest: TypeAlias = tuple[Node, ...]


@dataclass(frozen=True)
class ContextMenu:
    """Transient per-node options menu, rebuilt on every open."""

    visible: bool = False
    x: int = 0
    y: int = 0
    target_id: str | None = None
    target_kind: str | None = None


@dataclass(frozen=True)
class EditorState:
    """An open edit dialog for one document."""

    document_id: str
    document_name: str
    content: str
    warning: str | None = None


@dataclass(frozen=True)
class AddDocumentTarget:
    """Where the open add-document dialog will insert. Empty parent means root."""

    parent_id: str | None = None
    parent_name: str = ""
