from pathlib import Path
from typing import List, Tuple

import structlog

from scrubdocx.clean.patterns import element
from scrubdocx.errors import TransformFailure
from scrubdocx.utils.docx import COMMENT_PARTS, part_path

logger = structlog.get_logger(__name__)

# Anchors tying body text to comments. Each matches both the self-closing
# and the explicit open/close form.
COMMENT_MARKERS = [
    element("w:commentRangeStart"),
    element("w:commentRangeEnd"),
    element("w:commentReference"),
]

def strip_comment_markers(xml: str) -> Tuple[str, int]:
    """
    Removes comment range starts, range ends and references from the document.
    Returns the new markup and the number of markers removed.
    """
    total = 0
    for pattern in COMMENT_MARKERS:
        xml, count = pattern.subn("", xml)
        total += count
    return xml, total

def remove_comment_parts(package_root: Path) -> List[str]:
    """
    Deletes the comment body parts that exist under package_root.
    Missing parts are skipped. Returns the part names actually deleted.
    """
    removed = []
    for name in COMMENT_PARTS:
        path = part_path(package_root, name)
        if not path.is_file():
            continue
        try:
            path.unlink()
        except OSError as e:
            raise TransformFailure(f"Could not delete {name}: {e}") from e
        logger.debug(f"Deleted {name}")
        removed.append(name)
    return removed
