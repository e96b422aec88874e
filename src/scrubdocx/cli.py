import argparse
import logging
import sys
from pathlib import Path

import structlog

from scrubdocx import __version__
from scrubdocx.audit import audit_docx
from scrubdocx.errors import SanitizeError
from scrubdocx.models import SanitizeResult
from scrubdocx.sanitizer import sanitize_docx

def configure_logging(verbose: bool = False):
    # Logs go to stderr; stdout is reserved for the summary.
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

def print_summary(result: SanitizeResult):
    stats = result.stats
    print(f"✅ Sanitized document saved to: {result.output_path}")
    print(f"   SVG extensions removed:     {stats.svg_extensions_removed}")
    print(f"   Deletions removed:          {stats.deletions_removed}")
    print(f"   Insertions accepted:        {stats.insertions_accepted}")
    print(f"   Comment markers removed:    {stats.comment_markers_removed}")
    print(f"   Text boxes simplified:      {stats.alternate_content_simplified}")

def print_audit(path: Path) -> bool:
    report = audit_docx(path)
    if report.is_clean:
        print("🔍 Check passed: no tracked changes, comments or alternate content left.")
        return True

    print("⚠️  Check found leftovers:", file=sys.stderr)
    for field, value in report.model_dump(exclude={"path"}).items():
        if value:
            print(f"   {field}: {value}", file=sys.stderr)
    return False

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="scrubdocx",
        description="Strip tracked changes, comments, SVG extensions and alternate content from a .docx",
    )
    parser.add_argument("docx_file", type=Path, help="Path to input .docx file")
    parser.add_argument(
        "output", type=Path, nargs="?", help="Output path (default: <name>_clean.docx next to the input)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every pass to stderr")
    parser.add_argument("--check", action="store_true", help="Re-open the output and report leftovers")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    print(f"📄 Sanitizing: {args.docx_file}")
    try:
        result = sanitize_docx(args.docx_file, args.output)
    except SanitizeError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print_summary(result)

    if args.check:
        try:
            if not print_audit(result.output_path):
                return 2
        except SanitizeError as e:
            print(f"❌ Error: {e}", file=sys.stderr)
            return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
