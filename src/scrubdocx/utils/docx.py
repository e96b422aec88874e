"""
Locations of the package parts we touch, plus text I/O for a single part.
Parts are read and written as UTF-8; a leading byte-order mark is dropped
on read and never written back.
"""
from pathlib import Path

import structlog

from scrubdocx.errors import TransformFailure

logger = structlog.get_logger(__name__)

DOCUMENT_PART = "word/document.xml"
CONTENT_TYPES_PART = "[Content_Types].xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"

# Comment bodies and their Word 2010+/2016+ companions
COMMENT_PARTS = (
    "word/comments.xml",
    "word/commentsExtended.xml",
    "word/commentsIds.xml",
    "word/commentsExtensible.xml",
)

def part_path(package_root: Path, part_name: str) -> Path:
    return package_root.joinpath(*part_name.split("/"))

def read_part_text(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {path.name}: {e}", exc_info=True)
        raise TransformFailure(f"Could not read {path}: {e}") from e

def write_part_text(path: Path, text: str) -> None:
    try:
        # newline="" keeps the original line endings untouched
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        logger.error(f"Failed to write {path.name}: {e}", exc_info=True)
        raise TransformFailure(f"Could not write {path}: {e}") from e
