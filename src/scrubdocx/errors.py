class SanitizeError(Exception):
    """Base class for every failure that aborts a sanitize run."""


class InputNotFound(SanitizeError):
    pass


class InvalidArchive(SanitizeError):
    """The input is not a zip container we can open (or extract safely)."""


class MissingCoreFile(SanitizeError):
    """The archive opened fine but has no main document part."""


class TransformFailure(SanitizeError):
    """Reading, rewriting or writing a part failed."""
