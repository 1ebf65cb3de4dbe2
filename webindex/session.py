"""
HTTP session creation for webindex.

Provides sessions with:
* HTTP basic authentication attached to every request
* Keep-alive and a browser-like User-Agent
* No automatic retries: a failed request is reported as-is
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from webindex.config import USER_AGENT, Credential


def build_session(
    credential: Credential | None = None,
    verify_ssl: bool = True,
) -> requests.Session:
    """Return a ``requests.Session`` with keep-alive, a fixed User-Agent
    and, when *credential* is given, basic authentication."""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=Retry(total=0))
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl
    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,*/*;q=0.8",
        "Connection": "keep-alive",
    })
    if credential is not None:
        session.auth = credential.as_auth()
    return session
