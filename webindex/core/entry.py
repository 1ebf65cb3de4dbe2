"""
Entry classification for autoindex hrefs.

A listing anchor whose href ends in ``/`` names a subdirectory, anything
else names a file.  Hrefs are passed through byte for byte: no
percent-decoding and no URL normalisation beyond the trailing slash.
"""

from dataclasses import dataclass
from enum import Enum

from webindex.config import IGNORED_HREFS


class EntryKind(Enum):
    """Kind of an item found in a listing."""

    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class Entry:
    """One item of a single listing page."""

    kind: EntryKind
    name: str

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def _has_usable_name(href: str) -> bool:
    # Sort links (?C=N;O=D), fragments, absolute paths and full URLs do not
    # name a child of the page being listed.
    if href.startswith(("?", "#", "/")):
        return False
    if "://" in href:
        return False
    # Dot segments would leave the listed directory.
    return not any(part in (".", "..") for part in href.split("/"))


def classify(raw_href: str | None) -> Entry | None:
    """
    Turn the literal *raw_href* of one listing anchor into an :class:`Entry`.

    Returns ``None`` for the parent reference (``../``) and for hrefs that
    carry no usable relative name.
    """
    if not raw_href or raw_href in IGNORED_HREFS:
        return None
    if not _has_usable_name(raw_href):
        return None

    if raw_href.endswith("/"):
        name = raw_href.rstrip("/")
        if not name or name in IGNORED_HREFS:
            return None
        return Entry(EntryKind.DIRECTORY, name)

    return Entry(EntryKind.FILE, raw_href)
