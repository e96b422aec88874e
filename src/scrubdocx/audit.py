"""
Opens a .docx with python-docx and counts what a layout import would still
trip over. Used to verify sanitized output.
"""
from pathlib import Path
from zipfile import BadZipFile

import structlog
from docx import Document
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.ns import qn

from scrubdocx.clean.engine import SVG_EXTENSION_URI
from scrubdocx.errors import InvalidArchive
from scrubdocx.models import AuditReport

logger = structlog.get_logger(__name__)

MC_NS = "http://schemas.openxmlformats.org/markup-compatibility/2006"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"

def _count(element, clark_name: str) -> int:
    return sum(1 for _ in element.iter(clark_name))

def audit_docx(path: Path) -> AuditReport:
    try:
        doc = Document(str(path))
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError) as e:
        logger.error(f"python-docx could not open {path}: {e}", exc_info=True)
        raise InvalidArchive(f"Could not open {path} as a Word document: {e}") from e

    body = doc.element
    svg_extensions = sum(
        1 for ext in body.iter(f"{{{A_NS}}}ext") if ext.get("uri") == SVG_EXTENSION_URI
    )
    comment_markers = sum(
        _count(body, qn(tag))
        for tag in ("w:commentRangeStart", "w:commentRangeEnd", "w:commentReference")
    )
    has_comments_part = any(rel.reltype == RT.COMMENTS for rel in doc.part.rels.values())

    report = AuditReport(
        path=path,
        tracked_deletions=_count(body, qn("w:del")),
        tracked_insertions=_count(body, qn("w:ins")),
        comment_markers=comment_markers,
        alternate_content=_count(body, f"{{{MC_NS}}}AlternateContent"),
        svg_extensions=svg_extensions,
        has_comments_part=has_comments_part,
    )
    logger.debug(f"Audit of {path.name}: {report.model_dump(exclude={'path'})}")
    return report
