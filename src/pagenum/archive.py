"""Read a pptx (zip) container into an in-memory Package and write it back out.

The Package keeps entries in the order they appeared in the source archive so the
repacked file has the same layout ([Content_Types].xml first, etc.). Entries we
never touch are written back with their original bytes, timestamp, attributes and
compression method.
"""

from __future__ import annotations

import io
import logging
import time
import zipfile
import zlib
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Iterator

from pagenum.errors import ArchiveFormatError

log = logging.getLogger("pagenum")

# Compression methods we can write back unchanged. Anything else gets re-deflated.
_WRITABLE_COMPRESSION = (zipfile.ZIP_STORED, zipfile.ZIP_DEFLATED)

# Errors the zipfile module (and the codecs under it) raise for unreadable archives.
_ZIP_READ_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    NotImplementedError,  # unsupported compression method
    RuntimeError,  # encrypted entry, password required
    zlib.error,
    EOFError,
    ValueError,
)

# Unix permission bits zipfile.write() uses for directories, plus the MS-DOS directory flag.
_DIR_EXTERNAL_ATTR = (0o40775 << 16) | 0x10


# region EntryKind
class EntryKind(Enum):
    """Whether a package entry is a folder placeholder or a file with a payload."""

    FILE = "file"
    DIRECTORY = "directory"


# endregion


# region PackageEntry
@dataclass
class PackageEntry:
    """One named member of a Package."""

    path: str
    kind: EntryKind = EntryKind.FILE
    payload: bytes = b""
    date_time: tuple[int, int, int, int, int, int] = field(
        default_factory=lambda: time.localtime(time.time())[:6]
    )
    compress_type: int = zipfile.ZIP_DEFLATED
    external_attr: int = 0

    def __post_init__(self) -> None:
        if self.kind == EntryKind.DIRECTORY and self.payload:
            raise ValueError(f"Directory entry {self.path} cannot carry a payload.")

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY


# endregion


# region Package
class Package:
    """Ordered, path-unique collection of PackageEntry objects."""

    def __init__(self) -> None:
        self._entries: dict[str, PackageEntry] = {}

    def add(self, entry: PackageEntry) -> None:
        """Append an entry. Paths must be unique."""
        if entry.path in self._entries:
            log.error(f"Duplicate entry in package: {entry.path}")
            raise ArchiveFormatError(f"Duplicate entry in archive: {entry.path}")
        self._entries[entry.path] = entry

    def replace_payload(self, path: str, payload: bytes) -> None:
        """Swap the bytes of an existing file entry, keeping its place and metadata."""
        entry = self._entries.get(path)
        if entry is None:
            raise KeyError(f"No entry named {path} in package")
        if entry.is_dir:
            raise ValueError(f"Cannot set a payload on directory entry {path}")
        entry.payload = payload

    def paths(self) -> list[str]:
        return list(self._entries)

    def files(self) -> list[PackageEntry]:
        return [e for e in self._entries.values() if not e.is_dir]

    def __getitem__(self, path: str) -> PackageEntry:
        return self._entries[path]

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[PackageEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Package({len(self)} entries)"


# endregion


# region extract
def extract(stream: BinaryIO) -> Package:
    """
    Read a zip container into a Package.

    Args:
        stream: Readable binary stream. Non-seekable streams are buffered into memory first,
            since the zip central directory lives at the end of the file.

    Returns:
        Package with one entry per archive member, in archive order.

    Raises:
        ArchiveFormatError: If the stream is not a valid zip, an entry is truncated or corrupt,
            an entry uses a compression method we cannot decode, or names repeat.
    """
    if not _is_seekable(stream):
        log.debug("Input stream is not seekable; buffering it into memory.")
        stream = io.BytesIO(stream.read())

    pkg = Package()
    try:
        with zipfile.ZipFile(stream) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    entry = PackageEntry(
                        path=info.filename,
                        kind=EntryKind.DIRECTORY,
                        date_time=info.date_time,
                        compress_type=zipfile.ZIP_STORED,
                        external_attr=info.external_attr,
                    )
                else:
                    compress_type = (
                        info.compress_type
                        if info.compress_type in _WRITABLE_COMPRESSION
                        else zipfile.ZIP_DEFLATED
                    )
                    entry = PackageEntry(
                        path=info.filename,
                        kind=EntryKind.FILE,
                        payload=zf.read(info),
                        date_time=info.date_time,
                        compress_type=compress_type,
                        external_attr=info.external_attr,
                    )
                pkg.add(entry)
    except _ZIP_READ_ERRORS as e:
        log.error(f"Could not read presentation container: {e}")
        raise ArchiveFormatError(f"Not a valid presentation file: {e}") from e

    log.debug(f"Extracted {len(pkg)} entries from archive.")
    return pkg


def _is_seekable(stream: BinaryIO) -> bool:
    try:
        return stream.seekable()
    except (AttributeError, ValueError):
        return False


# endregion


# region pack
def pack_to(pkg: Package, stream: BinaryIO) -> None:
    """
    Write a Package to a binary stream as a zip container, in package order.

    Directory entries are written with a trailing slash and no data. File entries keep
    their recorded compression method (stored or deflate).
    """
    with zipfile.ZipFile(stream, "w", zipfile.ZIP_DEFLATED) as zf:
        for entry in pkg:
            if entry.is_dir:
                name = entry.path if entry.path.endswith("/") else entry.path + "/"
                info = zipfile.ZipInfo(name, date_time=entry.date_time)
                info.compress_type = zipfile.ZIP_STORED
                info.external_attr = entry.external_attr or _DIR_EXTERNAL_ATTR
                zf.writestr(info, b"")
            else:
                info = zipfile.ZipInfo(entry.path, date_time=entry.date_time)
                info.compress_type = entry.compress_type
                info.external_attr = entry.external_attr or (0o600 << 16)
                zf.writestr(info, entry.payload)

    log.debug(f"Packed {len(pkg)} entries into archive.")


def pack(pkg: Package) -> bytes:
    """Serialize a Package to zip bytes. See pack_to()."""
    buffer = io.BytesIO()
    pack_to(pkg, buffer)
    return buffer.getvalue()


# endregion
