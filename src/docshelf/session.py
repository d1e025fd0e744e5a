"""Viewer session: the in-memory tree plus selection, dialogs and content pane state."""

from collections.abc import Callable
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import cast

from loguru import logger

from docshelf.config import (
    resolve_allow_unsafe_html,
    resolve_base_url,
    resolve_docs_dir,
    resolve_fetch_timeout,
)
from docshelf.core.content.fetcher import DirectoryFetcher, HttpFetcher
from docshelf.core.content.resolver import SELECT_PLACEHOLDER, ContentResolver
from docshelf.core.content.sanitize import to_display
from docshelf.core.drafts import (
    DocumentDraft,
    document_from_draft,
    format_display_date,
    validate_name,
)
from docshelf.core.ids import IdGenerator
from docshelf.core.tree.sorting import sorted_forest, sorted_siblings
from docshelf.core.tree.store import (
    add_child,
    add_root,
    contains,
    find_by_id,
    remove_by_id,
    update_by_id,
)
from docshelf.errors import DocshelfError, FetchError, InvalidParentError, NodeNotFoundError
from docshelf.models.node import (
    AddDocumentTarget,
    Category,
    ContextMenu,
    Document,
    EditorState,
    Forest,
    Node,
)
from docshelf.protocols import FetcherProtocol
from docshelf.seed import seed_forest

CATEGORY_ACTIONS = ("rename", "add_subcategory", "add_document", "delete")
DOCUMENT_ACTIONS = ("rename", "delete")


def pick_initial_selection(forest: Forest) -> Node | None:
    """Choose the node selected on first load.

    The first top-level document wins; failing that, the first document directly
    under the first top-level category; failing that, the first root of any
    kind. Deeper documents are never considered.
    """
    roots = sorted_siblings(forest)
    if not roots:
        return None
    for node in roots:
        if isinstance(node, Document):
            return node
    first = roots[0]
    if isinstance(first, Category):
        for child in sorted_siblings(first.children):
            if isinstance(child, Document):
                return child
    return first


class ViewerSession:
    """All state of one running viewer.

    Tree mutations go through the pure store functions and replace
    ``self.forest`` wholesale. Content resolution is tagged with a generation
    number; a fetch that completes after a newer resolution started is
    discarded.
    """

    def __init__(
        self,
        forest: Forest,
        *,
        resolver: ContentResolver,
        ids: IdGenerator | None = None,
        allow_unsafe_html: bool = False,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.forest = forest
        self.resolver = resolver
        self.ids = ids or IdGenerator.seeded_above(forest)
        self.allow_unsafe_html = allow_unsafe_html
        self._today = today

        self.active_id: str | None = None
        self.loading = False
        self.display_content = SELECT_PLACEHOLDER
        self.context_menu = ContextMenu()
        self.editor: EditorState | None = None
        self.add_document_target: AddDocumentTarget | None = None

        self._generation = 0

    # --- Read side ---

    @property
    def selected(self) -> Node | None:
        if self.active_id is None:
            return None
        return find_by_id(self.forest, self.active_id)

    @property
    def selection_state(self) -> str:
        """One of ``"none"``, ``"category"`` or ``"document"``."""
        node = self.selected
        return "none" if node is None else node.kind

    @property
    def displayed_html(self) -> str:
        """Content pane HTML, sanitized unless the session opted out."""
        return to_display(self.display_content, allow_unsafe_html=self.allow_unsafe_html)

    def tree(self) -> Forest:
        """The forest as displayed: every sibling list sorted by name."""
        return sorted_forest(self.forest)

    def _require(self, node_id: str) -> Node:
        node = find_by_id(self.forest, node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def _require_category(self, parent_id: str) -> Category:
        parent = find_by_id(self.forest, parent_id)
        if parent is None:
            raise InvalidParentError(parent_id, reason="parent not found")
        if not isinstance(parent, Category):
            raise InvalidParentError(parent_id)
        return parent

    def _insert(self, parent_id: str | None, node: Node) -> None:
        if parent_id is None:
            self.forest = add_root(self.forest, node)
        else:
            self.forest = add_child(self.forest, parent_id, node)

    # --- Selection and content ---

    async def start(self) -> Node | None:
        """Apply the initial auto-selection if nothing is selected yet."""
        if self.active_id is None:
            node = pick_initial_selection(self.forest)
            if node is not None:
                await self.select(node.id)
            else:
                self._begin_resolution()
        return self.selected

    async def select(self, node_id: str | None) -> None:
        """Make ``node_id`` active, close the editor and menu, and resolve its content."""
        if node_id is not None:
            self._require(node_id)
        self.active_id = node_id
        self.close_editor()
        self.hide_context_menu()
        await self.refresh()

    async def refresh(self) -> None:
        """Re-resolve content for the active node."""
        pending = self._begin_resolution()
        if pending is not None:
            await self._complete_resolution(*pending)

    def _begin_resolution(self) -> tuple[int, Document] | None:
        """Start a new resolution. Returns the fetch still to run, if any."""
        self._generation += 1
        node = self.selected
        self.loading = True
        immediate = self.resolver.resolve_now(node)
        if immediate is not None:
            self.display_content = immediate
            self.loading = False
            return None
        self.display_content = ""
        return self._generation, cast(Document, node)

    async def _complete_resolution(self, generation: int, document: Document) -> None:
        try:
            content = await self.resolver.fetch_rendered(document)
        finally:
            if generation == self._generation:
                self.loading = False
        if generation != self._generation:
            logger.debug("Discarding stale content for {!r}", document.id)
            return
        self.display_content = content

    # --- Tree mutations ---

    def add_category(self, name: str, parent_id: str | None = None) -> Category:
        """Create a category at the root or under ``parent_id``.

        Raises:
            ValidationError: empty name.
            InvalidParentError: parent missing or not a category.
        """
        name = validate_name(name, what="Category")
        if parent_id is not None:
            self._require_category(parent_id)
        category = Category(id=self.ids.next_id(), name=name)
        self._insert(parent_id, category)
        self.hide_context_menu()
        logger.info("Added category {!r} ({})", category.name, category.id)
        return category

    async def add_document(self, draft: DocumentDraft, parent_id: str | None = None) -> Document:
        """Create a document from a dialog draft and select it.

        Raises:
            ValidationError: the draft was rejected.
            InvalidParentError: parent missing or not a category.
        """
        if parent_id is not None:
            self._require_category(parent_id)
        document = document_from_draft(draft, new_id=self.ids.next_id, today=self._today())
        self._insert(parent_id, document)
        logger.info("Added document {!r} ({})", document.name, document.id)
        await self.select(document.id)
        return document

    def rename(self, node_id: str, new_name: str) -> Node:
        node = self._require(node_id)
        name = validate_name(new_name, what=node.kind.capitalize())
        if name != node.name:
            self.forest = update_by_id(self.forest, node_id, lambda n: replace(n, name=name))
            logger.info("Renamed {} {!r} -> {!r}", node_id, node.name, name)
            if self.editor is not None and self.editor.document_id == node_id:
                self.editor = replace(self.editor, document_name=name)
            if node_id == self.active_id and isinstance(node, Category):
                self._begin_resolution()
        self.hide_context_menu()
        return self._require(node_id)

    def delete(self, node_id: str) -> None:
        """Delete a node and its subtree; resets the selection if it went with it."""
        self._require(node_id)
        self.forest = remove_by_id(self.forest, node_id)
        logger.info("Deleted {}", node_id)
        if self.editor is not None and not contains(self.forest, self.editor.document_id):
            self.editor = None
        if self.active_id is not None and not contains(self.forest, self.active_id):
            self.active_id = None
            self._begin_resolution()
        self.hide_context_menu()

    # --- Add-document dialog ---

    def open_add_document(self, parent_id: str | None = None) -> AddDocumentTarget:
        parent_name = ""
        if parent_id is not None:
            parent_name = self._require_category(parent_id).name
        self.add_document_target = AddDocumentTarget(parent_id=parent_id, parent_name=parent_name)
        self.hide_context_menu()
        return self.add_document_target

    async def submit_add_document(self, draft: DocumentDraft) -> Document:
        """Save the open dialog. It stays open if the draft is rejected."""
        target = self.add_document_target or AddDocumentTarget()
        document = await self.add_document(draft, parent_id=target.parent_id)
        self.add_document_target = None
        return document

    def close_add_document(self) -> None:
        self.add_document_target = None

    # --- Editor ---

    async def open_editor(self) -> EditorState | None:
        """Open the editor for the selected document.

        Linked documents are edited from their raw source, never the rendered
        Markdown. If the raw fetch fails, the currently displayed HTML is used
        instead and the editor carries a warning.
        """
        node = self.selected
        if not isinstance(node, Document):
            return None

        content = node.content or ""
        warning: str | None = None
        if self.resolver.needs_fetch(node):
            generation = self._generation
            # A content fetch still in flight owns the flag.
            owns_loading = not self.loading
            self.loading = True
            try:
                content = await self.resolver.load_raw(node)
            except FetchError as e:
                logger.warning("Error fetching raw document {!r} for edit: {}", node.id, e)
                warning = (
                    f"Could not load the original file content for editing: {e}. "
                    "You'll edit the last known version or a blank slate."
                )
                content = self.display_content or ""
            finally:
                if owns_loading and generation == self._generation:
                    self.loading = False
            if generation != self._generation or self.active_id != node.id:
                logger.debug("Selection changed while loading {!r} for editing", node.id)
                return None

        self.editor = EditorState(
            document_id=node.id,
            document_name=node.name,
            content=content,
            warning=warning,
        )
        return self.editor

    def save_edit(self, new_content: str) -> Document | None:
        """Write the edited text as inline content and close the editor.

        The document loses its file link and gets a fresh ``last_updated``.
        """
        editor = self.editor
        if editor is None:
            return None
        self.editor = None
        self._require(editor.document_id)

        stamp = format_display_date(self._today())
        self.forest = update_by_id(
            self.forest,
            editor.document_id,
            lambda n: replace(n, content=new_content, file_path=None, last_updated=stamp),
        )
        logger.info("Saved edit of {!r}", editor.document_id)
        if editor.document_id == self.active_id:
            self._begin_resolution()
        return cast(Document, self._require(editor.document_id))

    def close_editor(self) -> None:
        self.editor = None

    # --- Context menu ---

    def show_context_menu(self, node_id: str, x: int = 0, y: int = 0) -> ContextMenu:
        node = self._require(node_id)
        self.context_menu = ContextMenu(
            visible=True, x=x, y=y, target_id=node.id, target_kind=node.kind
        )
        return self.context_menu

    def hide_context_menu(self) -> None:
        self.context_menu = ContextMenu()

    def menu_actions(self) -> tuple[str, ...]:
        """Actions offered by the open context menu."""
        menu = self.context_menu
        if not menu.visible:
            return ()
        return CATEGORY_ACTIONS if menu.target_kind == Category.kind else DOCUMENT_ACTIONS

    def _menu_target(self, action: str) -> str:
        menu = self.context_menu
        if not menu.visible or menu.target_id is None:
            msg = "No context menu is open"
            raise DocshelfError(msg)
        if action not in self.menu_actions():
            msg = f"Action {action!r} is not available for a {menu.target_kind}"
            raise DocshelfError(msg)
        return menu.target_id

    def rename_target(self, new_name: str) -> Node:
        target_id = self._menu_target("rename")
        try:
            return self.rename(target_id, new_name)
        finally:
            self.hide_context_menu()

    def delete_target(self) -> None:
        self.delete(self._menu_target("delete"))

    def add_category_to_target(self, name: str) -> Category:
        return self.add_category(name, parent_id=self._menu_target("add_subcategory"))

    def add_document_to_target(self) -> AddDocumentTarget:
        return self.open_add_document(parent_id=self._menu_target("add_document"))


def build_fetcher(
    *,
    base_url: str | None = None,
    docs_dir: Path | None = None,
) -> FetcherProtocol:
    """Pick the document source: a local directory if one is configured, else HTTP."""
    docs_dir = docs_dir or resolve_docs_dir()
    if docs_dir is not None:
        return DirectoryFetcher(docs_dir)
    return HttpFetcher(base_url or resolve_base_url(), timeout=resolve_fetch_timeout())


def create_session(
    *,
    forest: Forest | None = None,
    fetcher: FetcherProtocol | None = None,
    allow_unsafe_html: bool | None = None,
) -> ViewerSession:
    """Build a session over the seed dataset with configuration from the environment."""
    if allow_unsafe_html is None:
        allow_unsafe_html = resolve_allow_unsafe_html()
    return ViewerSession(
        seed_forest() if forest is None else forest,
        resolver=ContentResolver(fetcher or build_fetcher()),
        allow_unsafe_html=allow_unsafe_html,
    )
