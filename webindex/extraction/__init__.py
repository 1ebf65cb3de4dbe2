"""Listing-page extraction."""

from webindex.extraction.listing import parse_listing

__all__ = ["parse_listing"]
