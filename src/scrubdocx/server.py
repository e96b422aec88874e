import sys
import logging
from pathlib import Path
from typing import Optional

import structlog
from mcp.server.fastmcp import FastMCP

# --- LOGGING CONFIGURATION ---
# Logs must go to stderr; stdout carries the MCP JSON-RPC stream.
logging.basicConfig(stream=sys.stderr, level=logging.INFO, force=True)

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)
# -----------------------------

from scrubdocx.audit import audit_docx
from scrubdocx.errors import SanitizeError
from scrubdocx.sanitizer import sanitize_docx

mcp = FastMCP("Scrubdocx Sanitizing Service")

@mcp.tool()
def sanitize_document(input_path: str, output_path: Optional[str] = None) -> str:
    """
    Removes tracked changes (accepting insertions, dropping deletions), comments,
    SVG picture extensions and mc:AlternateContent choices from a local DOCX file,
    and saves the result to a NEW file, leaving the original unchanged.

    If output_path is omitted, the result is saved next to the input as "<name>_clean.docx".
    An existing file at output_path is overwritten.
    """
    try:
        result = sanitize_docx(input_path, output_path)
    except SanitizeError as e:
        return f"Error sanitizing document: {str(e)}"

    stats = result.stats
    return (
        f"Removed {stats.svg_extensions_removed} SVG extensions, "
        f"{stats.deletions_removed} deletions and {stats.comment_markers_removed} comment markers. "
        f"Accepted {stats.insertions_accepted} insertions. "
        f"Simplified {stats.alternate_content_simplified} text boxes. "
        f"Saved to: {result.output_path}"
    )

@mcp.tool()
def audit_document(file_path: str) -> str:
    """
    Reports tracked changes, comment markers, alternate content and SVG extensions
    still present in a DOCX file. Use it to check a document before or after sanitizing.
    """
    path = Path(file_path)
    if not path.exists():
        return f"Error auditing document: File not found: {file_path}"
    try:
        report = audit_docx(path)
    except SanitizeError as e:
        return f"Error auditing document: {str(e)}"

    if report.is_clean:
        return f"{path.name} is clean."
    found = [f"{k}={v}" for k, v in report.model_dump(exclude={"path"}).items() if v]
    return f"{path.name} still contains: " + ", ".join(found)

if __name__ == "__main__":
    # Runs the server over stdio
    mcp.run()
