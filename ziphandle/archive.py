"""A small stateful handle for building a ZIP archive one file at a time."""

from __future__ import annotations

import logging
import os
import shutil
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Union

from .errors import (
    ArchiveIOError,
    ArchiveNotFoundError,
    NoWriteSessionError,
    SourceNotFoundError,
    WriteSessionActiveError,
)

log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

# Strongest deflate level understood by zlib.
COMPRESS_LEVEL = 9

_EARLIEST_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_LATEST_DATE_TIME = (2107, 12, 31, 23, 59, 59)


@dataclass
class _WriteSession:
    """The open archive file and the ZIP writer bound to it."""

    file: BinaryIO
    writer: zipfile.ZipFile


def _entry_info(name: str, st: os.stat_result) -> zipfile.ZipInfo:
    """Build the header for a new entry from the source file's metadata."""

    date_time = time.localtime(st.st_mtime)[0:6]
    # MS-DOS dates only cover 1980-2107; clamp like ZipInfo.from_file(strict_timestamps=False).
    if date_time[0] < 1980:
        date_time = _EARLIEST_DATE_TIME
    elif date_time[0] > 2107:
        date_time = _LATEST_DATE_TIME

    info = zipfile.ZipInfo(name, date_time=date_time)
    info.external_attr = (st.st_mode & 0xFFFF) << 16
    info.file_size = st.st_size
    info.compress_type = zipfile.ZIP_DEFLATED
    # ZipFile.open() takes the level from the header, not from the writer.
    if hasattr(info, "compress_level"):
        info.compress_level = COMPRESS_LEVEL
    else:
        info._compresslevel = COMPRESS_LEVEL
    return info


class ArchiveHandle:
    """One ZIP archive on disk plus at most one open write session.

    Typical use::

        handle = ArchiveHandle("backup.zip")
        handle.create()
        with handle:
            handle.add_file("notes.txt")
        handle.get_file_list()  # ['notes.txt']

    The handle is not thread safe and does not lock the archive against
    other handles or processes.
    """

    def __init__(self, path: PathLike) -> None:
        self._path = Path(path)
        self._session: _WriteSession | None = None

    def __repr__(self) -> str:
        state = "open" if self.in_session else "closed"
        return f"{type(self).__name__}({str(self._path)!r}, {state})"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def in_session(self) -> bool:
        """``True`` between a successful :meth:`open` and :meth:`close`."""

        return self._session is not None

    def __enter__(self) -> "ArchiveHandle":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------ lifecycle --
    def create(self, force: bool = False) -> None:
        """Write an empty archive at :attr:`path`.

        An existing file is left untouched unless *force* is true, in which
        case it is replaced by an empty archive.
        """

        if self._path.exists() and not force:
            log.debug("Keeping existing archive %s", self._path)
            return

        try:
            with zipfile.ZipFile(self._path, "w"):
                pass
        except OSError as exc:
            raise ArchiveIOError(f"error creating zip file: {self._path}") from exc
        log.info("Created empty archive %s", self._path)

    def open(self) -> None:
        """Start a write session; new entries are appended to the archive."""

        if self._session is not None:
            raise WriteSessionActiveError(f"zip file is already open for writing: {self._path}")
        if not self._path.exists():
            raise ArchiveNotFoundError(f"zip file does not exist: {self._path}")

        try:
            handle = open(self._path, "r+b")
        except FileNotFoundError as exc:
            raise ArchiveNotFoundError(f"zip file does not exist: {self._path}") from exc
        except OSError as exc:
            raise ArchiveIOError(f"error opening zip file: {self._path}") from exc

        try:
            writer = zipfile.ZipFile(
                handle,
                mode="a",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=COMPRESS_LEVEL,
            )
        except (OSError, zipfile.BadZipFile) as exc:
            handle.close()
            raise ArchiveIOError(f"error opening zip file for writing: {self._path}") from exc

        self._session = _WriteSession(file=handle, writer=writer)
        log.debug("Opened write session on %s", self._path)

    def close(self) -> None:
        """Finish the write session, writing the archive's central directory.

        Closing a handle that has no session, or whose writer or file is
        already closed, succeeds.
        """

        session, self._session = self._session, None
        if session is None:
            return

        try:
            if session.writer.fp is not None:
                try:
                    session.writer.close()
                except (OSError, ValueError) as exc:
                    raise ArchiveIOError(f"error closing zip writer: {self._path}") from exc
        finally:
            if not session.file.closed:
                try:
                    session.file.close()
                except OSError as exc:
                    raise ArchiveIOError(f"error closing zip file: {self._path}") from exc
        log.debug("Closed write session on %s", self._path)

    # -------------------------------------------------------------- entries --
    def add_file(self, source: PathLike) -> None:
        """Append *source* to the archive as a deflated entry named after it."""

        if self._session is None:
            raise NoWriteSessionError(f"zip file is not open for writing: {self._path}")
        writer = self._session.writer

        try:
            src = open(source, "rb")
        except FileNotFoundError as exc:
            raise SourceNotFoundError(f"file to add does not exist: {source}") from exc
        except OSError as exc:
            raise ArchiveIOError(f"error opening file to add: {source}") from exc

        with src:
            try:
                st = os.fstat(src.fileno())
            except OSError as exc:
                raise ArchiveIOError(f"error getting file info for the file to add: {source}") from exc

            try:
                info = _entry_info(os.path.basename(os.fspath(source)), st)
            except (ValueError, OverflowError, OSError) as exc:
                raise ArchiveIOError(f"error determining header for the file to add: {source}") from exc

            try:
                dest = writer.open(info, mode="w")
            except (OSError, ValueError, RuntimeError) as exc:
                raise ArchiveIOError(f"error creating header for the file to add: {source}") from exc

            try:
                with dest:
                    shutil.copyfileobj(src, dest)
            except (OSError, ValueError) as exc:
                raise ArchiveIOError(f"error copying file to zip file: {source}") from exc

        log.debug("Added %s to %s as %s", source, self._path, info.filename)

    def get_file_list(self) -> List[str]:
        """Return the names of the file entries, in archive order.

        Directory entries are skipped. Listing is refused while this handle
        has a write session open.
        """

        if self._session is not None:
            raise WriteSessionActiveError(
                f"error getting file list, zip file is open for writing: {self._path}"
            )

        try:
            if self._path.stat().st_size == 0:
                return []
            with zipfile.ZipFile(self._path) as archive:
                infos = archive.infolist()
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveIOError(f"error opening zip file for reading: {self._path}") from exc

        return [info.filename for info in infos if not info.is_dir()]


__all__ = ["ArchiveHandle", "COMPRESS_LEVEL"]
