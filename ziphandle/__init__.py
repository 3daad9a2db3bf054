"""Create a ZIP archive, append deflated files to it and list its entries."""

from .archive import ArchiveHandle
from .errors import (
    ArchiveIOError,
    ArchiveNotFoundError,
    NoWriteSessionError,
    SourceNotFoundError,
    WriteSessionActiveError,
    ZipperError,
)

__all__ = [
    "ArchiveHandle",
    "ArchiveIOError",
    "ArchiveNotFoundError",
    "NoWriteSessionError",
    "SourceNotFoundError",
    "WriteSessionActiveError",
    "ZipperError",
]
