"""
Autoindex listing extraction via BeautifulSoup.
"""

from bs4 import BeautifulSoup

from webindex.config import LISTING_SELECTOR
from webindex.errors import ParseError

try:
    import lxml  # noqa: F401
    _BS4_PARSER = "lxml"
except ImportError:
    _BS4_PARSER = "html.parser"


def parse_listing(html: str | bytes, url: str = "") -> list[str]:
    """
    Return the ``href`` of every anchor in the ``<pre>`` block of an
    autoindex page, in document order.

    Anchors without an ``href`` attribute are skipped.  Raises
    :class:`ParseError` when the document cannot be parsed.
    """
    try:
        soup = BeautifulSoup(html, _BS4_PARSER)
        anchors = soup.select(LISTING_SELECTOR)
    except Exception as exc:
        raise ParseError(url, str(exc)) from exc

    hrefs: list[str] = []
    for anchor in anchors:
        href = anchor.get("href")
        if href is not None:
            hrefs.append(href)
    return hrefs
