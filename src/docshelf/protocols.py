"""Protocols for dependency injection in the viewer session."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class FetcherProtocol(Protocol):
    """Protocol for sources of linked document text."""

    async def fetch_text(self, path: str) -> str:
        """Return the full text body for an application-relative path.

        Raises:
            FetchError: on a non-2xx response or a network failure.
        """
        ...
