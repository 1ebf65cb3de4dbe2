"""
Tests for the print and download visitors.
"""

import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import requests

from tests.fakes import FakeServer, listing_page, make_response
from webindex.config import TraversalOptions
from webindex.core.entry import Entry, EntryKind
from webindex.core.visitors import DownloadVisitor, PrintVisitor
from webindex.core.walker import WalkContext, WebIndexClient
from webindex.errors import FilesystemError, HttpError, InvariantViolation

ROOT = "http://h/x"

# http://h/x
# ├── a/
# │   ├── c.txt
# │   └── d/
# │       └── e.bin
# └── b.txt
TREE = {
    ROOT: listing_page("../", "a/", "b.txt"),
    ROOT + "/a": listing_page("../", "c.txt", "d/"),
    ROOT + "/a/d": listing_page("../", "e.bin"),
    ROOT + "/b.txt": b"bee",
    ROOT + "/a/c.txt": b"sea",
    ROOT + "/a/d/e.bin": b"\x00\x01\x02" * 1000,
}


def _client(pages):
    server = FakeServer(pages)
    return WebIndexClient(session=server.session), server


class TestPrintVisitor(unittest.TestCase):
    def _print(self, pages, options):
        client, server = _client(pages)
        out = io.StringIO()
        client.print_entries(ROOT, options, out=out)
        return out.getvalue().splitlines(), server

    def test_non_recursive_lists_immediate_children_only(self):
        lines, server = self._print(TREE, TraversalOptions())
        self.assertEqual(lines, ["a/", "b.txt"])
        self.assertEqual(server.requested, [ROOT])

    def test_recursive_depth_first(self):
        lines, server = self._print(TREE, TraversalOptions(recursive=True))
        self.assertEqual(lines, ["a/", "a/c.txt", "a/d/", "a/d/e.bin", "b.txt"])
        self.assertEqual(server.requested, [ROOT, ROOT + "/a", ROOT + "/a/d"])

    def test_recursive_scenario_issues_nested_fetch(self):
        pages = {ROOT: listing_page("a/", "b.txt", "../"), ROOT + "/a": listing_page()}
        lines, server = self._print(pages, TraversalOptions(recursive=True))
        self.assertEqual(lines, ["a/", "b.txt"])
        self.assertIn(ROOT + "/a", server.requested)

    def test_printing_is_read_only(self):
        cwd = os.getcwd()
        with tempfile.TemporaryDirectory() as tmpdir:
            os.chdir(tmpdir)
            try:
                with patch("webindex.core.visitors.ensure_directory") as mkdir:
                    self._print(TREE, TraversalOptions(recursive=True))
                mkdir.assert_not_called()
                self.assertEqual(os.listdir(tmpdir), [])
            finally:
                os.chdir(cwd)

    def test_max_depth_stops_descent(self):
        with self.assertLogs("webindex", level="WARNING") as cm:
            lines, server = self._print(TREE, TraversalOptions(recursive=True, max_depth=2))
        self.assertEqual(lines, ["a/", "a/c.txt", "a/d/", "b.txt"])
        self.assertNotIn(ROOT + "/a/d", server.requested)
        self.assertTrue(any("[DEPTH]" in line for line in cm.output))

    def test_listing_error_in_subdirectory_propagates(self):
        pages = dict(TREE)
        pages[ROOT + "/a"] = (401, b"")
        with self.assertRaises(HttpError):
            self._print(pages, TraversalOptions(recursive=True))

    def test_invariant_violation_propagates(self):
        client, _ = _client({})
        printer = PrintVisitor(client, ROOT, TraversalOptions(), out=io.StringIO())
        ctx = WalkContext(listing_url="http://h/elsewhere", base_url=ROOT)
        with self.assertRaises(InvariantViolation):
            printer(ctx, Entry(EntryKind.FILE, "f"))


class TestDownloadVisitor(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.out = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _download(self, pages, options, output_root=None):
        client, server = _client(pages)
        visitor = client.download_entries(ROOT, output_root or self.out, options)
        return visitor, server

    def _tree(self) -> dict[str, bytes | None]:
        found = {}
        for path in sorted(self.out.rglob("*")):
            rel = path.relative_to(self.out).as_posix()
            found[rel] = None if path.is_dir() else path.read_bytes()
        return found

    def test_recursive_mirror(self):
        with self.assertLogs("webindex", level="INFO") as cm:
            visitor, _ = self._download(TREE, TraversalOptions(recursive=True))
        self.assertEqual(self._tree(), {
            "a": None,
            "a/c.txt": b"sea",
            "a/d": None,
            "a/d/e.bin": b"\x00\x01\x02" * 1000,
            "b.txt": b"bee",
        })
        self.assertEqual(visitor.stats, {"dirs": 2, "files": 3, "err": 0})
        self.assertIn("INFO:webindex:[MKDIR] a/", cm.output)
        self.assertIn("INFO:webindex:[MKDIR] a/d/", cm.output)
        self.assertIn("INFO:webindex:[GET] a/d/e.bin", cm.output)

    def test_non_recursive_creates_top_level_only(self):
        visitor, server = self._download(TREE, TraversalOptions())
        self.assertEqual(self._tree(), {"a": None, "b.txt": b"bee"})
        self.assertEqual(server.requested, [ROOT, ROOT + "/b.txt"])

    def test_second_run_is_idempotent(self):
        self._download(TREE, TraversalOptions(recursive=True))
        first = self._tree()
        with self.assertLogs("webindex", level="INFO") as cm:
            visitor, _ = self._download(TREE, TraversalOptions(recursive=True))
        self.assertEqual(self._tree(), first)
        self.assertFalse(any("[MKDIR]" in line for line in cm.output))
        self.assertEqual(visitor.stats["err"], 0)

    def test_existing_file_overwritten(self):
        (self.out / "b.txt").write_bytes(b"stale content that is longer")
        self._download(TREE, TraversalOptions())
        self.assertEqual((self.out / "b.txt").read_bytes(), b"bee")

    def test_file_error_aborts_without_ignore_error(self):
        pages = {
            ROOT: listing_page("ok1.txt", "broken.txt", "ok2.txt"),
            ROOT + "/ok1.txt": b"1",
            ROOT + "/broken.txt": (500, b""),
            ROOT + "/ok2.txt": b"2",
        }
        with self.assertRaises(HttpError):
            self._download(pages, TraversalOptions(recursive=True))
        self.assertEqual(self._tree(), {"ok1.txt": b"1"})

    def test_ignore_error_records_and_continues(self):
        pages = {
            ROOT: listing_page("ok1.txt", "broken.txt", "ok2.txt", "sub/"),
            ROOT + "/ok1.txt": b"1",
            ROOT + "/broken.txt": (500, b""),
            ROOT + "/ok2.txt": b"2",
            ROOT + "/sub": listing_page("ok3.txt"),
            ROOT + "/sub/ok3.txt": b"3",
        }
        with self.assertLogs("webindex", level="WARNING") as cm:
            visitor, _ = self._download(
                pages, TraversalOptions(recursive=True, ignore_error=True)
            )
        self.assertEqual(self._tree(), {
            "ok1.txt": b"1",
            "ok2.txt": b"2",
            "sub": None,
            "sub/ok3.txt": b"3",
        })
        self.assertEqual(visitor.stats, {"dirs": 1, "files": 3, "err": 1})
        self.assertEqual(len(visitor.failures), 1)
        path, exc = visitor.failures[0]
        self.assertEqual(path, "broken.txt")
        self.assertIsInstance(exc, HttpError)
        self.assertTrue(any("[ERR] broken.txt" in line for line in cm.output))

    def test_ignore_error_covers_write_failures(self):
        (self.out / "b.txt").mkdir()
        visitor, _ = self._download(
            TREE, TraversalOptions(ignore_error=True)
        )
        self.assertEqual(visitor.stats["err"], 1)
        self.assertIsInstance(visitor.failures[0][1], FilesystemError)

    def test_write_failure_fatal_without_ignore_error(self):
        (self.out / "b.txt").mkdir()
        with self.assertRaises(FilesystemError):
            self._download(TREE, TraversalOptions())

    def test_directory_creation_failure_fatal_with_ignore_error(self):
        missing = self.out / "missing" / "root"
        with self.assertRaises(FilesystemError):
            self._download(
                TREE, TraversalOptions(recursive=True, ignore_error=True),
                output_root=missing,
            )

    def test_listing_failure_fatal_with_ignore_error(self):
        pages = dict(TREE)
        pages[ROOT + "/a"] = (403, b"")
        with self.assertRaises(HttpError):
            self._download(pages, TraversalOptions(recursive=True, ignore_error=True))

    def test_transport_failure_mid_file_removes_partial(self):

        client, server = _client({ROOT: listing_page("big.bin")})
        resp = make_response(ROOT + "/big.bin", body=b"")

        def _broken(chunk_size=1):
            yield b"part"
            raise requests.exceptions.ChunkedEncodingError("cut")

        resp.iter_content.side_effect = _broken
        with patch.object(client, "fetch_file", return_value=resp):
            with self.assertRaises(HttpError):
                client.download_entries(ROOT, self.out, TraversalOptions())
        self.assertFalse((self.out / "big.bin").exists())

    def test_failed_download_keeps_existing_file(self):
        (self.out / "big.bin").write_bytes(b"good copy")
        client, _ = _client({ROOT: listing_page("big.bin")})
        resp = make_response(ROOT + "/big.bin", body=b"")

        def _broken(chunk_size=1):
            yield b"new"
            raise requests.exceptions.ChunkedEncodingError("cut")

        resp.iter_content.side_effect = _broken
        with patch.object(client, "fetch_file", return_value=resp):
            with self.assertRaises(HttpError):
                client.download_entries(ROOT, self.out, TraversalOptions())
        self.assertEqual((self.out / "big.bin").read_bytes(), b"good copy")
        self.assertEqual(sorted(p.name for p in self.out.iterdir()), ["big.bin"])

    def test_parent_segments_stay_inside_output_root(self):
        mirror = self.out / "mirror"
        mirror.mkdir()
        pages = {
            ROOT: listing_page("../evil.txt", "../x/", "ok.txt"),
            ROOT + "/../evil.txt": b"evil",
            ROOT + "/../x": listing_page("../x/"),
            ROOT + "/ok.txt": b"ok",
        }
        visitor, server = self._download(
            pages, TraversalOptions(recursive=True), output_root=mirror
        )
        self.assertFalse((self.out / "evil.txt").exists())
        self.assertFalse((self.out / "x").exists())
        self.assertEqual((mirror / "ok.txt").read_bytes(), b"ok")
        self.assertEqual(server.requested, [ROOT, ROOT + "/ok.txt"])
        self.assertEqual(visitor.stats, {"dirs": 0, "files": 1, "err": 0})

    def test_escaping_entry_raises_invariant_violation(self):
        client, _ = _client({})
        visitor = DownloadVisitor(client, ROOT, self.out, TraversalOptions(ignore_error=True))
        ctx = WalkContext(listing_url=ROOT, base_url=ROOT)
        with self.assertRaises(InvariantViolation):
            visitor(ctx, Entry(EntryKind.FILE, "../evil.txt"))
        self.assertEqual(list(self.out.parent.glob("evil.txt")), [])

    def test_progress_tolerates_malformed_content_length(self):
        client, _ = _client({ROOT: listing_page("f.bin")})
        resp = make_response(ROOT + "/f.bin", body=b"abc")
        resp.headers = {"Content-Length": "abc, 3"}
        with patch("webindex.core.visitors._TQDM_AVAILABLE", True), \
                patch("webindex.core.visitors._tqdm", create=True) as bar, \
                patch.object(client, "fetch_file", return_value=resp):
            visitor = client.download_entries(
                ROOT, self.out, TraversalOptions(), progress=True
            )
        self.assertEqual((self.out / "f.bin").read_bytes(), b"abc")
        self.assertEqual(visitor.stats["files"], 1)
        self.assertIsNone(bar.call_args.kwargs["total"])

    def test_progress_uses_numeric_content_length(self):
        client, _ = _client({ROOT: listing_page("f.bin")})
        resp = make_response(ROOT + "/f.bin", body=b"abc")
        with patch("webindex.core.visitors._TQDM_AVAILABLE", True), \
                patch("webindex.core.visitors._tqdm", create=True) as bar, \
                patch.object(client, "fetch_file", return_value=resp):
            client.download_entries(ROOT, self.out, TraversalOptions(), progress=True)
        self.assertEqual(bar.call_args.kwargs["total"], 3)

    def test_summary_logs_totals_and_failures(self):
        pages = {ROOT: listing_page("gone.txt")}
        visitor, _ = self._download(pages, TraversalOptions(ignore_error=True))
        with self.assertLogs("webindex", level="INFO") as cm:
            visitor.summary()
        self.assertIn("Download complete. dirs=0  files=0  err=1", cm.output[0])
        self.assertIn("gone.txt", cm.output[1])


if __name__ == "__main__":
    unittest.main()
