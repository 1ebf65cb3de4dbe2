"""Exception hierarchy raised while walking an autoindex tree."""


class WebIndexError(Exception):
    """Base class for every error webindex raises."""


class HttpError(WebIndexError):
    """A request failed in transport or returned a status other than 200."""

    def __init__(self, url: str, status: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        if status is None:
            message = f"request failed for {url}: {reason}"
        elif reason:
            message = f"status code error: {status} {reason} ({url})"
        else:
            message = f"status code error: {status} ({url})"
        super().__init__(message)


class ParseError(WebIndexError):
    """A listing page could not be parsed."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        super().__init__(f"cannot parse listing {url}: {reason}")


class FilesystemError(WebIndexError):
    """Creating a directory or writing a file failed."""

    def __init__(self, path, reason: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {reason}")


class InvariantViolation(WebIndexError):
    """A listing URL fell outside the tree rooted at the base URL."""
