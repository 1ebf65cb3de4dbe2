"""
Relative path reconstruction.

The same relative path extends the remote URL and places the entry under
the output directory, so the local tree mirrors the URL tree exactly.
"""

import posixpath
from typing import TYPE_CHECKING

from webindex.errors import InvariantViolation

if TYPE_CHECKING:
    from webindex.core.entry import Entry
    from webindex.core.walker import WalkContext


def relative_directory(listing_url: str, base_url: str) -> str:
    """Return the directory part of *listing_url* below *base_url*
    (``""`` for the root listing)."""
    if listing_url == base_url:
        return ""
    prefix = base_url + "/"
    if listing_url.startswith(prefix):
        return listing_url[len(prefix):]
    raise InvariantViolation(
        f'entry url "{listing_url}" must start with "{prefix}"'
    )


def relative_path(ctx: "WalkContext", base_url: str, entry: "Entry") -> str:
    """
    Relative path of *entry* listed at ``ctx.listing_url``.

    Raises :class:`InvariantViolation` when the listing URL drifted outside
    the tree rooted at *base_url*.
    """
    directory = relative_directory(ctx.listing_url, base_url)
    if not directory:
        return entry.name
    return posixpath.join(directory, entry.name)


def join_url(listing_url: str, name: str) -> str:
    """URL of the child *name* of the page at *listing_url*."""
    return listing_url + "/" + name
