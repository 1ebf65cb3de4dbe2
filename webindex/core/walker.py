"""
Depth-first walker for autoindex directory listings.

The walker fetches one listing page, classifies each anchor and hands the
resulting entries to a visitor, one at a time and in document order.  It
never descends by itself: a visitor that wants the children of a directory
calls :meth:`WebIndexClient.walk` again with the child URL.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

import requests

from webindex.config import REQUEST_TIMEOUT, STREAM_CHUNK, Credential, TraversalOptions
from webindex.core.entry import Entry, classify
from webindex.core.visitors import DownloadVisitor, PrintVisitor
from webindex.errors import HttpError
from webindex.extraction.listing import parse_listing
from webindex.session import build_session
from webindex.utils.log import log


@dataclass(frozen=True)
class WalkContext:
    """Per-page state handed to the visitor with every entry."""

    listing_url: str
    base_url: str
    depth: int = 0


Visit = Callable[[WalkContext, Entry], None]


class WebIndexClient:
    """
    Client for Apache/nginx style autoindex listings.

    All requests share one ``requests.Session``; the optional credential is
    sent as HTTP basic authentication with every request.
    """

    def __init__(
        self,
        credential: Credential | None = None,
        verify_ssl: bool = True,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.credential = credential
        self.timeout = timeout
        self.session = session or build_session(credential, verify_ssl=verify_ssl)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _get(self, url: str, stream: bool = False) -> requests.Response:
        """GET *url*; anything but a 200 response raises :class:`HttpError`."""
        try:
            resp = self.session.get(url, timeout=self.timeout, stream=stream)
        except requests.RequestException as exc:
            raise HttpError(url, reason=str(exc)) from exc

        if resp.status_code != 200:
            resp.close()
            raise HttpError(url, resp.status_code, resp.reason or "")
        return resp

    def list_entries(self, url: str) -> list[str]:
        """Return the raw hrefs of the listing at *url* in document order."""
        resp = self._get(url)
        content = resp.content
        log.debug("  ← HTTP %s  %d bytes", resp.status_code, len(content))
        return parse_listing(content, url)

    def fetch_file(self, url: str) -> requests.Response:
        """Start a streaming download of *url*.

        The status is checked before any byte is read; the caller owns the
        returned response and must close it.
        """
        return self._get(url, stream=True)

    @staticmethod
    def iter_content(resp: requests.Response, chunk_size: int = STREAM_CHUNK) -> Iterator[bytes]:
        """Yield the body of *resp*, reporting transport failures as :class:`HttpError`."""
        try:
            yield from resp.iter_content(chunk_size=chunk_size)
        except requests.RequestException as exc:
            raise HttpError(resp.url, reason=str(exc)) from exc

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def walk(
        self,
        url: str,
        visit: Visit,
        base_url: str | None = None,
        depth: int = 0,
    ) -> None:
        """
        Visit every entry of the listing at *url*.

        *base_url* is the root the whole walk started from (defaults to
        *url*).  The first exception raised by *visit* stops the page and
        propagates; entries already visited are left as they are.
        """
        if base_url is None:
            base_url = url
        ctx = WalkContext(listing_url=url, base_url=base_url, depth=depth)

        log.debug("[LIST] %s", url)
        for href in self.list_entries(url):
            entry = classify(href)
            if entry is None:
                log.debug("  skip href %r", href)
                continue
            visit(ctx, entry)

    def print_entries(
        self,
        url: str,
        options: TraversalOptions = TraversalOptions(),
        out=None,
    ) -> PrintVisitor:
        """Print the tree below *url*."""
        printer = PrintVisitor(self, url, options, out=out)
        self.walk(url, printer)
        return printer

    def download_entries(
        self,
        url: str,
        output_dir: Path,
        options: TraversalOptions = TraversalOptions(),
        progress: bool = False,
    ) -> DownloadVisitor:
        """Mirror the tree below *url* into *output_dir*."""
        downloader = DownloadVisitor(self, url, Path(output_dir), options, progress=progress)
        self.walk(url, downloader)
        return downloader
