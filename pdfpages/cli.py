"""Command line interface for selecting, reordering and reading PDF pages."""

import argparse
import json
import logging
import re
import sys
from dataclasses import asdict
from typing import List, Optional

from .config import get_config
from .document.assembly import materialize
from .document.cache import get_cached_document
from .document.labels import page_label_map, resolve_label
from .document.text import extract_selection_text, grep_document
from .ranges.errors import PageRangeError, ParseError
from .ranges.expander import select_pages

logger = logging.getLogger(__name__)

EXIT_USAGE_ERROR = 2

SPEC_HELP = """\
page range syntax:
  5            a single page
  1-10         pages 1 to 10
  10-1         pages 10 down to 1
  5-end        page 5 to the last page
  1-5R         pages 1 to 5 rotated 90 degrees clockwise (L = 270, F = 180)
  1-3,7,10-end tokens are joined in the order written; repeats are kept
"""


def _report_range_error(spec: str, error: PageRangeError) -> None:
    print(f"error: {error}", file=sys.stderr)
    if isinstance(error, ParseError):
        print(f"  {spec}", file=sys.stderr)
        print(f"  {' ' * error.offset}^", file=sys.stderr)


def cmd_select(args: argparse.Namespace) -> int:
    cached = get_cached_document(args.input)
    selection = select_pages(args.pages, cached.page_count)

    out = materialize(cached.doc, selection)
    try:
        out.save(args.output, garbage=3, deflate=True)
    finally:
        out.close()

    print(f"Wrote {len(selection)} page(s) to {args.output}")
    return 0


def cmd_text(args: argparse.Namespace) -> int:
    cached = get_cached_document(args.input)
    pages = extract_selection_text(cached, args.pages)

    if args.json:
        print(json.dumps([asdict(p) for p in pages], indent=2, ensure_ascii=False))
    else:
        for page in pages:
            print(f"--- page {page.page} ---")
            print(page.text.rstrip("\n"))
    return 0


def cmd_grep(args: argparse.Namespace) -> int:
    flags = re.IGNORECASE if args.ignore_case else 0
    try:
        pattern = re.compile(args.pattern, flags)
    except re.error as e:
        print(f"error: invalid pattern: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    max_results = args.max_results
    if max_results is None:
        max_results = get_config().selection.grep_max_results

    cached = get_cached_document(args.input)
    matches = grep_document(cached, pattern, max_results)
    for m in matches:
        print(f"{m.page}:{m.line_number}: {m.text}")
    return 0 if matches else 1


def cmd_labels(args: argparse.Namespace) -> int:
    cached = get_cached_document(args.input)
    labels = page_label_map(cached.doc)

    if args.label:
        try:
            print(resolve_label(labels, args.label))
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        return 0

    for label, page in labels.items():
        print(f"{page}\t{label}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from .http_server import run_server
    run_server()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfpages",
        description="Select, reorder and rotate PDF pages, or read their text.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=SPEC_HELP,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("select", help="Write selected pages to a new PDF")
    p.add_argument("input", help="Input PDF file")
    p.add_argument("output", help="Output PDF file")
    p.add_argument("pages", help="Page range, e.g. 1-3,7R,10-end")
    p.set_defaults(func=cmd_select)

    p = sub.add_parser("text", help="Print text of selected pages")
    p.add_argument("input", help="Input PDF file")
    p.add_argument("pages", nargs="?", default="", help="Page range (default: all pages)")
    p.add_argument("--json", action="store_true", help="Print JSON instead of plain text")
    p.set_defaults(func=cmd_text)

    p = sub.add_parser("grep", help="Search page text for a regular expression")
    p.add_argument("input", help="Input PDF file")
    p.add_argument("pattern", help="Regular expression")
    p.add_argument("-m", "--max-results", type=int, default=None, help="Stop after N matches")
    p.add_argument("-i", "--ignore-case", action="store_true", help="Case-insensitive search")
    p.set_defaults(func=cmd_grep)

    p = sub.add_parser("labels", help="List page labels or resolve one to a page number")
    p.add_argument("input", help="Input PDF file")
    p.add_argument("label", nargs="?", default="", help="Label to resolve")
    p.set_defaults(func=cmd_labels)

    p = sub.add_parser("serve", help="Run the HTTP server")
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else get_config().server.log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        return args.func(args)
    except PageRangeError as e:
        _report_range_error(getattr(args, "pages", ""), e)
        return EXIT_USAGE_ERROR
    except (OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
