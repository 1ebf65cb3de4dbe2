"""
URL helpers for the command-line entry point.
"""

import urllib.parse


def normalise_root_url(raw: str) -> str:
    """
    Canonicalise the root URL a walk starts from.

    Adds ``http://`` when no scheme is given and removes trailing slashes
    from the path, so child URLs can be built as ``root + "/" + name``.
    """
    raw = raw.strip()
    # Schemes are case-insensitive (RFC 3986 §3.1).
    if not raw.lower().startswith(("http://", "https://")):
        raw = "http://" + raw

    parsed = urllib.parse.urlparse(raw)
    path = parsed.path.rstrip("/")
    return urllib.parse.urlunparse(
        (parsed.scheme.lower(), parsed.netloc, path, parsed.params, parsed.query, "")
    )
