"""
Keeps [Content_Types].xml and the document relationships consistent after
the comment parts have been deleted.

Matching is by substring: any override whose part name contains "comments",
and any relationship whose target contains it in any case, is dropped. This
is a heuristic; a non-comment part with "comments" in its name would be
dropped too. External relationships (hyperlinks) are never touched.
"""
import re
from pathlib import Path

import structlog

from scrubdocx.models import SanitizeStats
from scrubdocx.utils.docx import (
    CONTENT_TYPES_PART,
    DOCUMENT_RELS_PART,
    part_path,
    read_part_text,
    write_part_text,
)

logger = structlog.get_logger(__name__)

_COMMENT_OVERRIDE = re.compile(r'<Override\b[^>]*\bPartName="[^"]*comments[^"]*"[^>]*/>')
_COMMENT_RELATIONSHIP = re.compile(
    r'<Relationship\b(?![^>]*\bTargetMode="External")[^>]*\bTarget="[^"]*comments[^"]*"[^>]*/>',
    re.IGNORECASE,
)

def remove_comment_overrides(xml: str) -> tuple:
    return _COMMENT_OVERRIDE.subn("", xml)

def remove_comment_relationships(xml: str) -> tuple:
    return _COMMENT_RELATIONSHIP.subn("", xml)

def _rewrite_manifest(path: Path, rewrite) -> int:
    if not path.is_file():
        logger.debug(f"No {path.name}; skipping.")
        return 0
    xml, count = rewrite(read_part_text(path))
    if count:
        write_part_text(path, xml)
    logger.info(f"Removed {count} comment entries from {path.name}.")
    return count

def sync_manifests(package_root: Path, stats: SanitizeStats) -> None:
    removed = _rewrite_manifest(part_path(package_root, CONTENT_TYPES_PART), remove_comment_overrides)
    removed += _rewrite_manifest(part_path(package_root, DOCUMENT_RELS_PART), remove_comment_relationships)
    stats.manifest_entries_removed += removed
