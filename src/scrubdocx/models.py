from pathlib import Path
from pydantic import BaseModel

class SanitizeStats(BaseModel):
    """
    Counters collected during a single sanitize run.
    The first five are the headline numbers reported to the user.
    """
    svg_extensions_removed: int = 0
    deletions_removed: int = 0
    insertions_accepted: int = 0
    comment_markers_removed: int = 0
    alternate_content_simplified: int = 0

    # Supplementary bookkeeping
    property_changes_removed: int = 0
    moves_resolved: int = 0
    comment_parts_removed: int = 0
    manifest_entries_removed: int = 0

class SanitizeResult(BaseModel):
    input_path: Path
    output_path: Path
    stats: SanitizeStats

class AuditReport(BaseModel):
    """
    What is left of the constructs we strip, as seen by python-docx.
    """
    path: Path
    tracked_deletions: int = 0
    tracked_insertions: int = 0
    comment_markers: int = 0
    alternate_content: int = 0
    svg_extensions: int = 0
    has_comments_part: bool = False

    @property
    def is_clean(self) -> bool:
        return not (
            self.tracked_deletions
            or self.tracked_insertions
            or self.comment_markers
            or self.alternate_content
            or self.svg_extensions
            or self.has_comments_part
        )
