"""
Command-line interface for webindex.

Two subcommands share one HTTP client setup:

* ``list``     – print the tree of an autoindex listing
* ``download`` – mirror it to a local directory (alias ``dl``)
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from webindex.config import (
    AUTH_ENV_VAR, DEFAULT_AUTH, DEFAULT_MAX_DEPTH, DEFAULT_OUTPUT,
    TraversalOptions, parse_credential,
)
from webindex.core.walker import WebIndexClient
from webindex.errors import FilesystemError, WebIndexError
from webindex.utils.log import setup_logging, log
from webindex.utils.url import normalise_root_url

try:
    from tqdm import tqdm as _tqdm  # noqa: F401
    _TQDM_AVAILABLE = True
except ImportError:
    _TQDM_AVAILABLE = False


def _run_list(client: WebIndexClient, url: str, args: argparse.Namespace) -> None:
    options = TraversalOptions(recursive=args.recursive, max_depth=args.max_depth)
    client.print_entries(url, options)


def _run_download(client: WebIndexClient, url: str, args: argparse.Namespace) -> None:
    options = TraversalOptions(
        recursive=args.recursive,
        ignore_error=args.ignore_error,
        max_depth=args.max_depth,
    )
    output_dir = Path(args.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(output_dir, exc.strerror or str(exc)) from exc

    log.info("Target URL       : %s", url)
    log.info("Output directory : %s", output_dir.resolve())
    downloader = client.download_entries(url, output_dir, options, progress=args.progress)
    downloader.summary()


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("url", help="URL of the autoindex listing (e.g. http://host/pub)")
    common.add_argument(
        "-a", "--auth", default=DEFAULT_AUTH, metavar="USER:PASS",
        help=f"Basic authentication credential (default: ${AUTH_ENV_VAR})",
    )
    common.add_argument(
        "-r", "--recursive", action="store_true", default=False,
        help="Descend into subdirectories",
    )
    common.add_argument(
        "--max-depth", type=_non_negative_int, default=DEFAULT_MAX_DEPTH, metavar="N",
        help="Maximum number of listing levels to walk (0 = unlimited, "
             f"default: {DEFAULT_MAX_DEPTH})",
    )

    parser = argparse.ArgumentParser(
        prog="webindex",
        description="List or download the contents of Apache/nginx "
                    "autoindex directory listings.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  webindex list http://example.com/pub -r\n"
            "  webindex download http://example.com/pub -r -o mirror\n"
            "  webindex dl http://example.com/private -a alice:s3cr3t --ignore-error\n"
        ),
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Write detailed logs to this file (always at DEBUG level)",
    )
    parser.add_argument(
        "--no-verify-ssl", dest="verify_ssl", action="store_false", default=True,
        help="Disable TLS certificate verification",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    list_cmd = sub.add_parser("list", parents=[common], help="Print the entries of a listing")
    list_cmd.set_defaults(handler=_run_list)

    dl_cmd = sub.add_parser(
        "download", aliases=["dl"], parents=[common],
        help="Download the entries of a listing",
    )
    dl_cmd.add_argument(
        "-o", "--output-dir", default=DEFAULT_OUTPUT,
        help=f"Output directory (default: {DEFAULT_OUTPUT})",
    )
    dl_cmd.add_argument(
        "--ignore-error", action="store_true", default=False,
        help="Keep going when a single file cannot be downloaded",
    )
    dl_cmd.add_argument(
        "--progress", action="store_true", default=False,
        help="Show a byte progress bar per file (requires tqdm)",
    )
    dl_cmd.set_defaults(handler=_run_download)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI.  Returns the process exit code.
    """
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_file=args.log_file)

    if args.debug:
        logging.getLogger("urllib3").setLevel(logging.DEBUG)

    if not args.verify_ssl:
        import urllib3
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        log.warning("TLS certificate verification is DISABLED (--no-verify-ssl)")

    if getattr(args, "progress", False) and not _TQDM_AVAILABLE:
        log.info("Tip: install tqdm for a live progress bar  (pip install tqdm)")

    url = normalise_root_url(args.url)
    client = WebIndexClient(
        credential=parse_credential(args.auth),
        verify_ssl=args.verify_ssl,
    )

    t0 = time.monotonic()
    try:
        args.handler(client, url, args)
    except WebIndexError as exc:
        log.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        log.warning("Interrupted")
        return 130
    finally:
        client.session.close()
    log.debug("Total elapsed time: %.1f s", time.monotonic() - t0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
