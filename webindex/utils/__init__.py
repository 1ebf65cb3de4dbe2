"""Utility helpers for URL normalisation and logging."""

from webindex.utils.url import normalise_root_url
from webindex.utils.log import setup_logging, log

__all__ = [
    "normalise_root_url",
    "setup_logging",
    "log",
]
