"""Error taxonomy for the documentation viewer."""


class DocshelfError(Exception):
    """Base class for all recoverable viewer errors."""


class ValidationError(DocshelfError):
    """User input was rejected before any state changed."""


class FetchError(DocshelfError):
    """A linked document could not be fetched."""

    def __init__(self, path: str, *, status: int | None = None, reason: str | None = None) -> None:
        self.path = path
        self.status = status
        self.reason = reason
        detail = f"status {status}" if status is not None else (reason or "network error")
        super().__init__(f"Failed to fetch {path!r}: {detail}")


class InvalidParentError(DocshelfError):
    """A node cannot be added under the given parent."""

    def __init__(self, parent_id: str, *, reason: str = "parent is not a category") -> None:
        self.parent_id = parent_id
        super().__init__(f"Cannot add to {parent_id!r}: {reason}")


class NodeNotFoundError(DocshelfError):
    """No node with the given id exists in the forest."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node {node_id!r} not found")
