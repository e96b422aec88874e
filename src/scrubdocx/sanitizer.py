from pathlib import Path
from typing import Optional, Union

import structlog

from scrubdocx.clean.engine import clean_document_part
from scrubdocx.errors import InputNotFound, TransformFailure
from scrubdocx.manifests import sync_manifests
from scrubdocx.models import SanitizeResult, SanitizeStats
from scrubdocx.package import pack_docx, unpack_docx, working_directory

logger = structlog.get_logger(__name__)

DEFAULT_SUFFIX = "_clean"

PathLike = Union[str, Path]

def default_output_path(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}{DEFAULT_SUFFIX}{input_path.suffix}")

def sanitize_docx(input_path: PathLike, output_path: Optional[PathLike] = None) -> SanitizeResult:
    """
    Unpacks a .docx, rewrites the main document and manifests, and writes
    the result to output_path (default: "<name>_clean.docx" beside the input).

    Any failure aborts the run without producing output. The working
    directory is removed either way.
    """
    source = Path(input_path).resolve()
    if not source.is_file():
        raise InputNotFound(f"File not found: {source}")

    target = Path(output_path).resolve() if output_path else default_output_path(source)
    stats = SanitizeStats()

    logger.info(f"Sanitizing {source} -> {target}")
    with working_directory() as workdir:
        unpack_docx(source, workdir)
        clean_document_part(workdir, stats)
        sync_manifests(workdir, stats)
        try:
            pack_docx(workdir, target)
        except OSError as e:
            raise TransformFailure(f"Could not write {target}: {e}") from e

    return SanitizeResult(input_path=source, output_path=target, stats=stats)
