from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("scrubdocx")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source/dev)
    __version__ = "0.0.0-dev"

from scrubdocx.audit import audit_docx
from scrubdocx.clean.engine import DocumentCleaner
from scrubdocx.errors import (
    InputNotFound,
    InvalidArchive,
    MissingCoreFile,
    SanitizeError,
    TransformFailure,
)
from scrubdocx.models import AuditReport, SanitizeResult, SanitizeStats
from scrubdocx.sanitizer import sanitize_docx

__all__ = [
    "sanitize_docx",
    "audit_docx",
    "DocumentCleaner",
    "SanitizeStats",
    "SanitizeResult",
    "AuditReport",
    "SanitizeError",
    "InputNotFound",
    "InvalidArchive",
    "MissingCoreFile",
    "TransformFailure",
    "__version__",
]
