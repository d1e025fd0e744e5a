"""Sources for linked document text: HTTP and a local documents directory."""

import asyncio
from pathlib import Path
from urllib.parse import urljoin

import requests
from loguru import logger

from docshelf.errors import FetchError


class HttpFetcher:
    """Fetch application-relative paths from a web server with a plain GET."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.sess = session or requests.Session()
        logger.debug("HTTP fetcher ready: base_url {!r}, timeout {!r}", self.base_url, timeout)

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def get_text(self, path: str) -> str:
        """Blocking GET of ``path``; returns the body text."""
        url = self.url_for(path)
        logger.debug("Fetching {!r}", url)
        try:
            r = self.sess.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(path, reason=str(e)) from e
        if not r.ok:
            raise FetchError(path, status=r.status_code)
        return r.text

    async def fetch_text(self, path: str) -> str:
        return await asyncio.to_thread(self.get_text, path)


class DirectoryFetcher:
    """Serve application-relative paths from a local documents directory.

    ``/documents/intro.md`` maps to ``<root>/documents/intro.md``.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            msg = f"Documents directory {str(self.root)!r} not found"
            raise ValueError(msg)
        logger.debug("Directory fetcher ready: root {!r}", str(self.root))

    def resolve(self, path: str) -> Path:
        target = (self.root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self.root):
            raise FetchError(path, status=403, reason="path escapes documents directory")
        return target

    def read_text(self, path: str) -> str:
        target = self.resolve(path)
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FetchError(path, status=404) from None
        except UnicodeDecodeError as e:
            raise FetchError(path, reason=f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise FetchError(path, reason=str(e)) from e

    async def fetch_text(self, path: str) -> str:
        return await asyncio.to_thread(self.read_text, path)
