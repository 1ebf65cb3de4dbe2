"""
Visitors invoked by the walker once per listing entry.

* :class:`PrintVisitor` renders the tree as text and never touches disk.
* :class:`DownloadVisitor` mirrors the tree below an output directory.

Both descend into subdirectories by calling back into the client's
``walk`` with the child URL, so recursion depth follows the remote tree.
"""

import sys
from pathlib import Path, PurePosixPath
from typing import Iterator

try:
    from tqdm import tqdm as _tqdm
    _TQDM_AVAILABLE = True
except ImportError:
    _TQDM_AVAILABLE = False

from webindex.config import TraversalOptions
from webindex.core.entry import Entry
from webindex.core.paths import join_url, relative_path
from webindex.core.storage import ensure_directory, stream_to_file
from webindex.errors import FilesystemError, HttpError, InvariantViolation
from webindex.utils.log import log


class Visitor:
    """Common state of the built-in visitors."""

    def __init__(self, client, base_url: str, options: TraversalOptions) -> None:
        self.client = client
        self.base_url = base_url
        self.options = options

    def __call__(self, ctx, entry: Entry) -> None:
        raise NotImplementedError

    def descend(self, ctx, entry: Entry, path: str) -> None:
        """Walk the listing of directory *entry* unless the depth guard
        forbids it."""
        max_depth = self.options.max_depth
        if max_depth and ctx.depth + 1 >= max_depth:
            log.warning("[DEPTH] not descending into %s/ (max depth %d)", path, max_depth)
            return
        self.client.walk(
            join_url(ctx.listing_url, entry.name),
            self,
            base_url=self.base_url,
            depth=ctx.depth + 1,
        )


class PrintVisitor(Visitor):
    """Write one line per entry: directories end in ``/``, files do not."""

    def __init__(self, client, base_url: str, options: TraversalOptions, out=None) -> None:
        super().__init__(client, base_url, options)
        self.out = out if out is not None else sys.stdout

    def __call__(self, ctx, entry: Entry) -> None:
        path = relative_path(ctx, self.base_url, entry)
        if entry.is_dir:
            print(path + "/", file=self.out)
            if self.options.recursive:
                self.descend(ctx, entry, path)
        else:
            print(path, file=self.out)


class DownloadVisitor(Visitor):
    """
    Mirror the remote tree below *output_root*.

    Directories are created one level at a time (parents are always
    visited first).  Files are streamed to disk, replacing existing ones.
    With ``ignore_error`` a failed file fetch or write is recorded in
    :attr:`failures` and the walk continues; every other error aborts it.
    """

    def __init__(
        self,
        client,
        base_url: str,
        output_root: Path,
        options: TraversalOptions,
        progress: bool = False,
    ) -> None:
        super().__init__(client, base_url, options)
        self.output_root = Path(output_root)
        self.progress = progress
        self.stats = {"dirs": 0, "files": 0, "err": 0}
        self.failures: list[tuple[str, Exception]] = []

    def __call__(self, ctx, entry: Entry) -> None:
        path = relative_path(ctx, self.base_url, entry)
        local = self._local_path(path)

        if entry.is_dir:
            if ensure_directory(local):
                log.info("[MKDIR] %s/", path)
            else:
                log.debug("Directory exists: %s/", path)
            self.stats["dirs"] += 1
            if self.options.recursive:
                self.descend(ctx, entry, path)
            return

        log.info("[GET] %s", path)
        try:
            size = self._download(join_url(ctx.listing_url, entry.name), local, path)
        except (HttpError, FilesystemError) as exc:
            if not self.options.ignore_error:
                raise
            self.stats["err"] += 1
            self.failures.append((path, exc))
            log.warning("[ERR] %s – %s", path, exc)
            return
        self.stats["files"] += 1
        log.debug("[SAVE] %s (%d bytes)", path, size)

    def _local_path(self, path: str) -> Path:
        """Map relative *path* below :attr:`output_root`, refusing escapes."""
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts:
            raise InvariantViolation(
                f'entry path "{path}" leaves output directory "{self.output_root}"'
            )
        return self.output_root / rel

    def _download(self, url: str, local: Path, path: str) -> int:
        resp = self.client.fetch_file(url)
        with resp:
            chunks = self.client.iter_content(resp)
            if self.progress and _TQDM_AVAILABLE:
                total = _content_length(resp.headers.get("Content-Length"))
                chunks = _with_progress(chunks, total, path)
            return stream_to_file(local, chunks)

    def summary(self) -> None:
        """Log the totals of the run and every suppressed failure."""
        log.info(
            "Download complete. dirs=%d  files=%d  err=%d",
            self.stats["dirs"], self.stats["files"], self.stats["err"],
        )
        for path, exc in self.failures:
            log.warning("  failed: %s (%s)", path, exc)


def _content_length(value: str | None) -> int | None:
    """Byte total for the progress bar, or ``None`` when the header is
    missing or not a plain decimal number."""
    if value is None:
        return None
    value = value.strip()
    return int(value) if value.isascii() and value.isdigit() else None


def _with_progress(chunks: Iterator[bytes], total: int | None, desc: str) -> Iterator[bytes]:
    """Pass *chunks* through while advancing a tqdm byte counter."""
    with _tqdm(
        total=total,
        desc=desc,
        unit="B",
        unit_scale=True,
        unit_divisor=1024,
        leave=False,
        dynamic_ncols=True,
    ) as bar:
        for chunk in chunks:
            bar.update(len(chunk))
            yield chunk
