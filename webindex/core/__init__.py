"""Core walker logic – entry classification, traversal and visitors."""

from webindex.core.entry import Entry, EntryKind, classify
from webindex.core.paths import join_url, relative_path
from webindex.core.visitors import DownloadVisitor, PrintVisitor, Visitor
from webindex.core.walker import WalkContext, WebIndexClient

__all__ = [
    "Entry",
    "EntryKind",
    "classify",
    "join_url",
    "relative_path",
    "Visitor",
    "PrintVisitor",
    "DownloadVisitor",
    "WalkContext",
    "WebIndexClient",
]
