import re
from pathlib import Path
from typing import Optional

import structlog

from scrubdocx.clean import patterns
from scrubdocx.clean.comments import remove_comment_parts, strip_comment_markers
from scrubdocx.models import SanitizeStats
from scrubdocx.utils.docx import DOCUMENT_PART, part_path, read_part_text, write_part_text

logger = structlog.get_logger(__name__)

# Extension URI Office uses for the SVG original of a picture (asvg:svgBlip)
SVG_EXTENSION_URI = "{96DAC541-7B7A-43D3-8B79-37D633B846F1}"

_SVG_EXTENSION = re.compile(
    r"<(?P<prefix>(?:[\w.-]+:)?)ext\b"
    rf'(?=[^>]*\buri="{re.escape(SVG_EXTENSION_URI)}")'
    r"(?:[^>]*/>|[^>]*(?<!/)>.*?</(?P=prefix)ext>)",
    re.DOTALL,
)
# Whitespace-only containers count as empty
_EMPTY_EXTENSION_LIST = re.compile(
    r"<(?P<prefix>(?:[\w.-]+:)?)extLst\b[^>]*(?<!/)>\s*</(?P=prefix)extLst>"
)

# Paragraph-mark revisions live in w:rPr as self-closing markers
_REVISION_MARKERS = [
    patterns.self_closing(tag) for tag in ("w:del", "w:ins", "w:moveFrom", "w:moveTo")
]
_DELETION = patterns.innermost_block("w:del")
_INSERTION = patterns.innermost_block("w:ins")
_MOVE_FROM = patterns.innermost_block("w:moveFrom")
_MOVE_TO = patterns.innermost_block("w:moveTo")
_MOVE_RANGE_MARKERS = [
    patterns.element(tag)
    for tag in (
        "w:moveFromRangeStart",
        "w:moveFromRangeEnd",
        "w:moveToRangeStart",
        "w:moveToRangeEnd",
    )
]
_PROPERTY_CHANGES = [
    patterns.block(tag)
    for tag in (
        "w:pPrChange",
        "w:rPrChange",
        "w:sectPrChange",
        "w:tblPrChange",
        "w:tblGridChange",
        "w:trPrChange",
        "w:tcPrChange",
    )
]
_DELETION_RSID = patterns.attribute("w:rsidDel")

# mc:AlternateContent with one or more mc:Choice and an mc:Fallback.
# Nested blocks are refused so they get simplified inside-out.
_NO_NESTED_AC = r"(?:(?!<mc:AlternateContent\b).)*?"
_ALTERNATE_CONTENT = re.compile(
    r"<mc:AlternateContent\b[^>]*(?<!/)>\s*"
    rf"(?:<mc:Choice\b[^>]*(?<!/)>{_NO_NESTED_AC}</mc:Choice>\s*|<mc:Choice\b[^>]*/>\s*)+"
    r"<mc:Fallback\b"
    rf"(?:[^>]*/>|[^>]*(?<!/)>(?P<fallback>{_NO_NESTED_AC})</mc:Fallback>)"
    r"\s*</mc:AlternateContent>",
    re.DOTALL,
)

class DocumentCleaner:
    """
    Rewrites the markup of word/document.xml so layout tools that choke on
    newer Word constructs can import it.

    The passes are order-sensitive; `clean` runs them in the required order.
    """

    def __init__(self, xml: str, stats: Optional[SanitizeStats] = None):
        self.xml = xml
        self.stats = stats if stats is not None else SanitizeStats()

    def strip_svg_extensions(self) -> int:
        """
        Drops SVG picture extensions, leaving the raster blip in place,
        then any extension list that became empty.
        """
        self.xml, count = _SVG_EXTENSION.subn("", self.xml)
        self.xml, empty_lists = _EMPTY_EXTENSION_LIST.subn("", self.xml)
        self.stats.svg_extensions_removed += count
        logger.info(f"Removed {count} SVG extension blocks ({empty_lists} empty extension lists).")
        return count

    def resolve_revisions(self) -> None:
        """
        Resolves tracked changes: deleted text goes away, inserted text
        stays without its wrapper, formatting change records are dropped.
        """
        markers = 0
        for pattern in _REVISION_MARKERS:
            self.xml, count = pattern.subn("", self.xml)
            markers += count
        logger.debug(f"Removed {markers} paragraph-mark revision markers.")

        self.xml, deletions = patterns.sub_until_stable(_DELETION, "", self.xml)
        self.xml, moved_from = patterns.sub_until_stable(_MOVE_FROM, "", self.xml)
        self.xml, insertions = patterns.sub_until_stable(_INSERTION, patterns.keep_inner, self.xml)
        self.xml, moved_to = patterns.sub_until_stable(_MOVE_TO, patterns.keep_inner, self.xml)
        for pattern in _MOVE_RANGE_MARKERS:
            self.xml, _ = pattern.subn("", self.xml)

        changes = 0
        for pattern in _PROPERTY_CHANGES:
            self.xml, count = pattern.subn("", self.xml)
            changes += count

        self.xml = _DELETION_RSID.sub("", self.xml)

        self.stats.deletions_removed += deletions
        self.stats.insertions_accepted += insertions
        self.stats.moves_resolved += moved_from + moved_to
        self.stats.property_changes_removed += changes
        logger.info(
            f"Revisions: {deletions} deletions removed, {insertions} insertions accepted, "
            f"{moved_from + moved_to} moves resolved, {changes} change records removed."
        )

    def strip_comment_markers(self) -> int:
        self.xml, count = strip_comment_markers(self.xml)
        self.stats.comment_markers_removed += count
        logger.info(f"Removed {count} comment markers.")
        return count

    def simplify_alternate_content(self) -> int:
        """
        Replaces each mc:AlternateContent with the children of its mc:Fallback.
        """
        self.xml, count = patterns.sub_until_stable(
            _ALTERNATE_CONTENT, lambda m: m.group("fallback") or "", self.xml
        )
        self.stats.alternate_content_simplified += count
        logger.info(f"Simplified {count} alternate content blocks.")
        return count

    def clean(self) -> str:
        self.strip_svg_extensions()
        self.resolve_revisions()
        self.strip_comment_markers()
        self.simplify_alternate_content()
        return self.xml

def clean_document_part(package_root: Path, stats: SanitizeStats) -> None:
    """
    Runs every pass against an unpacked package: rewrites the main document
    and deletes the comment parts that no longer have anchors.
    """
    doc_path = part_path(package_root, DOCUMENT_PART)
    cleaner = DocumentCleaner(read_part_text(doc_path), stats)

    write_part_text(doc_path, cleaner.clean())
    logger.info(f"Rewrote {DOCUMENT_PART}.")

    removed = remove_comment_parts(package_root)
    stats.comment_parts_removed += len(removed)
