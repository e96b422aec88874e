"""
Unpacking and repacking of the .docx zip container.

The working directory is the only resource a run owns; `working_directory`
guarantees it is removed on every exit path.
"""
import os
import shutil
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog

from scrubdocx.errors import InvalidArchive, MissingCoreFile
from scrubdocx.utils.docx import CONTENT_TYPES_PART, DOCUMENT_PART, part_path

logger = structlog.get_logger(__name__)

COMPRESSION_LEVEL = 9

@contextmanager
def working_directory(prefix: str = "scrubdocx-") -> Iterator[Path]:
    workdir = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug(f"Created working directory {workdir}")
    try:
        yield workdir
    finally:
        try:
            shutil.rmtree(workdir)
            logger.debug(f"Removed working directory {workdir}")
        except OSError as e:
            # Never mask the error that got us here
            logger.warning(f"Could not remove working directory {workdir}: {e}")

def unpack_docx(archive_path: Path, workdir: Path) -> None:
    """
    Extracts every entry of the archive into workdir, keeping relative paths.

    Raises InvalidArchive if the file is not a readable zip (or an entry would
    land outside workdir) and MissingCoreFile if there is no main document.
    """
    root = workdir.resolve()
    try:
        with zipfile.ZipFile(archive_path, "r") as z:
            for info in z.infolist():
                target = (root / info.filename).resolve()
                if target != root and root not in target.parents:
                    raise InvalidArchive(f"Unsafe ZIP entry path: {info.filename}")
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with z.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            logger.info(f"Unpacked {len(z.infolist())} entries from {archive_path.name}")
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        OSError,
        EOFError,
        zlib.error,
        # Encrypted entries
        RuntimeError,
        # Unsupported compression methods
        NotImplementedError,
    ) as e:
        raise InvalidArchive(f"Cannot open {archive_path} as a zip archive: {e}") from e

    if not part_path(workdir, DOCUMENT_PART).is_file():
        raise MissingCoreFile(f"{archive_path.name} has no {DOCUMENT_PART}; is it a Word document?")

def _archive_entries(workdir: Path) -> list:
    entries = sorted(p for p in workdir.rglob("*") if p.is_file())
    names = [p.relative_to(workdir).as_posix() for p in entries]

    # Content types first, as Word writes them
    pairs = list(zip(entries, names))
    pairs.sort(key=lambda pair: pair[1] != CONTENT_TYPES_PART)
    return pairs

def pack_docx(workdir: Path, output_path: Path) -> None:
    """
    Zips the contents of workdir into output_path, replacing any existing file.
    Entries are stored relative to workdir, without a wrapping folder.

    The archive is built in a temporary file beside output_path and only
    moved into place once it is complete; a failed write leaves whatever
    was at output_path untouched.
    """
    pairs = _archive_entries(workdir)
    partial = output_path.with_name(f".{output_path.name}.partial")
    try:
        with zipfile.ZipFile(
            partial, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESSION_LEVEL
        ) as z:
            for path, arcname in pairs:
                z.write(path, arcname)
        os.replace(partial, output_path)
    finally:
        if partial.exists():
            partial.unlink()
    logger.info(f"Packed {len(pairs)} entries into {output_path}")
