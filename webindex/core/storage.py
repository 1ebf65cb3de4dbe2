"""
File storage helpers – creating mirror directories and writing downloads.
"""

import logging
from pathlib import Path
from typing import Iterator

from webindex.errors import FilesystemError

log = logging.getLogger("webindex")

PART_SUFFIX = ".part"


def ensure_directory(local_path: Path) -> bool:
    """Create *local_path* unless something already exists there.

    Only the last path component is created; a missing parent is an error.
    Returns ``True`` when the directory was created.
    """
    if local_path.exists():
        return False
    try:
        local_path.mkdir()
    except OSError as exc:
        raise FilesystemError(local_path, exc.strerror or str(exc)) from exc
    return True


def stream_to_file(local_path: Path, chunks: Iterator[bytes]) -> int:
    """Write streaming *chunks* to *local_path*, replacing any existing file.

    Bytes go to a ``.part`` sibling that is renamed over *local_path* only
    once the stream is complete, so a failed download leaves an existing
    file untouched.  Returns the total number of bytes written.  The parent
    directory must already exist.
    """
    part_path = local_path.with_name(local_path.name + PART_SUFFIX)
    try:
        fh = part_path.open("wb")
    except OSError as exc:
        raise FilesystemError(local_path, exc.strerror or str(exc)) from exc

    total = 0
    try:
        with fh:
            for chunk in chunks:
                if chunk:
                    fh.write(chunk)
                    total += len(chunk)
        part_path.replace(local_path)
    except BaseException as exc:
        part_path.unlink(missing_ok=True)
        if isinstance(exc, OSError):
            raise FilesystemError(local_path, exc.strerror or str(exc)) from exc
        raise
    log.debug("Streamed → %s (%d bytes)", local_path, total)
    return total
