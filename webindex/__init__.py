"""
webindex
========
List and mirror Apache/nginx "autoindex" directory listings.

Quick start
-----------
    from pathlib import Path
    from webindex import WebIndexClient, TraversalOptions, parse_credential

    client = WebIndexClient(credential=parse_credential("alice:s3cr3t"))
    client.print_entries("http://example.com/pub", TraversalOptions(recursive=True))
    client.download_entries(
        "http://example.com/pub",
        Path("mirror"),
        TraversalOptions(recursive=True, ignore_error=True),
    )
"""

from webindex.config import Credential, TraversalOptions, parse_credential
from webindex.core import (
    DownloadVisitor,
    Entry,
    EntryKind,
    PrintVisitor,
    WalkContext,
    WebIndexClient,
    classify,
    relative_path,
)
from webindex.errors import (
    FilesystemError,
    HttpError,
    InvariantViolation,
    ParseError,
    WebIndexError,
)

__version__ = "1.0.0"

__all__ = [
    "Credential",
    "TraversalOptions",
    "parse_credential",
    "DownloadVisitor",
    "Entry",
    "EntryKind",
    "PrintVisitor",
    "WalkContext",
    "WebIndexClient",
    "classify",
    "relative_path",
    "FilesystemError",
    "HttpError",
    "InvariantViolation",
    "ParseError",
    "WebIndexError",
]
