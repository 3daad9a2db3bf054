"""Exceptions raised by :mod:`ziphandle`."""


class ZipperError(Exception):
    """Base class for ziphandle errors."""


class ArchiveNotFoundError(ZipperError, FileNotFoundError):
    """Raised when the archive does not exist on disk."""


class SourceNotFoundError(ZipperError, FileNotFoundError):
    """Raised when a file to add does not exist."""


class ArchiveIOError(ZipperError, OSError):
    """Raised when a filesystem or stream operation on the archive fails."""


class WriteSessionActiveError(ZipperError):
    """Raised when an operation needs the handle to have no open write session."""


class NoWriteSessionError(ZipperError):
    """Raised when an entry is added before :meth:`ArchiveHandle.open`."""
