"""
Configuration constants and per-run settings for webindex.
"""

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_OUTPUT = "."
DEFAULT_MAX_DEPTH = 0          # 0 = unlimited

# Credentials can also be supplied as USER:PASS via this env var
AUTH_ENV_VAR = "WEBINDEX_AUTH"
DEFAULT_AUTH = os.environ.get(AUTH_ENV_VAR, "")

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
REQUEST_TIMEOUT = 30           # seconds per HTTP request
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Chunk size for streaming file bodies to disk (512 KiB)
STREAM_CHUNK = 524288

# ---------------------------------------------------------------------------
# Listing format
# ---------------------------------------------------------------------------
# Anchors of an autoindex page live directly in the <pre> block of the body.
LISTING_SELECTOR = "body > pre > a"
PARENT_REFERENCE = "../"

# Hrefs that never name a child of the listed directory
IGNORED_HREFS = frozenset({PARENT_REFERENCE, "..", "./", "."})


@dataclass(frozen=True)
class Credential:
    """HTTP basic-authentication credential, fixed for the process lifetime."""

    username: str
    password: str = ""

    def as_auth(self) -> tuple[str, str]:
        """Return the ``(user, password)`` tuple understood by ``requests``."""
        return (self.username, self.password)


@dataclass(frozen=True)
class TraversalOptions:
    """Options fixed for a whole top-level invocation."""

    recursive: bool = False
    ignore_error: bool = False       # only meaningful for downloads
    max_depth: int = DEFAULT_MAX_DEPTH


def parse_credential(value: str | None) -> Credential | None:
    """
    Parse ``user:pass`` (or a bare ``user``) into a :class:`Credential`.

    Splits on the first colon only, so passwords may contain colons.
    An empty value means no authentication.
    """
    if not value:
        return None
    username, sep, password = value.partition(":")
    if not sep:
        return Credential(username=username)
    return Credential(username=username, password=password)
