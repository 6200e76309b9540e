"""
fc_build_util.models — Package request and archive entry definitions.

Entry conventions expected by Function Compute:

    bootstrap       symlink (0755) to the real executable, unless the
                    executable itself is named bootstrap
    <executable>    Unix regular file, 0777, DEFLATE
    scf_bootstrap   Unix regular file, 0777, DEFLATE
    everything else default (non-executable) zip metadata

All headers carry the fixed DOS timestamp 1980-01-01 00:00:00 so identical
inputs produce identical archives.
"""

from __future__ import annotations

import os
import stat
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from fc_build_util.exceptions import UsageError

# ---------------------------------------------------------------------------
# Platform conventions
# ---------------------------------------------------------------------------
BOOTSTRAP_NAME: str = "bootstrap"
SCF_BOOTSTRAP_NAME: str = "scf_bootstrap"
ZIP_SUFFIX: str = ".zip"

EXECUTABLE_MODE: int = 0o777  # -rwxrwxrwx
SYMLINK_MODE: int = 0o755
UNIX_CREATOR: int = 3  # "version made by" high byte: Unix
DEFAULT_CREATOR: int = 0  # MS-DOS / FAT, no permission bits
DOS_ARCHIVE_ATTR: int = 0x20
DOS_DIRECTORY_ATTR: int = 0x10

FIXED_DATE_TIME: tuple[int, int, int, int, int, int] = (1980, 1, 1, 0, 0, 0)


class EntryKind(StrEnum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


# ---------------------------------------------------------------------------
# Archive entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArchiveEntry:
    """One record written to the archive.

    unix_mode is None for entries that use default zip metadata.
    """

    name: str
    kind: EntryKind = EntryKind.FILE
    unix_mode: int | None = None

    @classmethod
    def executable(cls, name: str) -> ArchiveEntry:
        return cls(name=name, kind=EntryKind.FILE, unix_mode=EXECUTABLE_MODE)

    @classmethod
    def symlink(cls, name: str) -> ArchiveEntry:
        return cls(name=name, kind=EntryKind.SYMLINK, unix_mode=stat.S_IFLNK | SYMLINK_MODE)

    @classmethod
    def directory(cls, name: str) -> ArchiveEntry:
        if not name.endswith("/"):
            name = f"{name}/"
        return cls(name=name, kind=EntryKind.DIRECTORY)

    @property
    def compress_type(self) -> int:
        if self.kind is EntryKind.DIRECTORY:
            return zipfile.ZIP_STORED
        return zipfile.ZIP_DEFLATED

    def zip_info(self) -> zipfile.ZipInfo:
        """Build the zip header for this entry."""
        info = zipfile.ZipInfo(filename=self.name, date_time=FIXED_DATE_TIME)
        info.compress_type = self.compress_type
        if self.unix_mode is None:
            # zipfile rewrites a zero external_attr to 0o600 << 16
            info.create_system = DEFAULT_CREATOR
            info.external_attr = (
                DOS_DIRECTORY_ATTR if self.kind is EntryKind.DIRECTORY else DOS_ARCHIVE_ATTR
            )
        else:
            info.create_system = UNIX_CREATOR
            info.external_attr = self.unix_mode << 16
        return info


# ---------------------------------------------------------------------------
# Package request
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageRequest:
    """What to package and where to write it.

    executable_path is None when the first input is a directory; every input
    is then archived as a supplemental path.
    """

    executable_path: str | None
    supplemental_paths: tuple[str, ...]
    output_path: str
    preserve_paths: bool = False

    def __post_init__(self) -> None:
        if not self.output_path:
            raise ValueError("output_path must be non-empty")


def base_name(path: str) -> str:
    """Return the last path element, ignoring trailing separators."""
    return os.path.basename(os.path.normpath(path))


def default_output_path(first_input: str) -> str:
    return f"{base_name(first_input)}{ZIP_SUFFIX}"


def resolve_request(
    inputs: Sequence[str],
    output: str | None = None,
    *,
    preserve_paths: bool = False,
) -> PackageRequest:
    """Turn positional CLI inputs into a PackageRequest.

    A first input that is a directory means there is no executable to
    special-case. Anything else (a regular file, or a path that does not
    exist) is taken as the executable.
    """
    if not inputs:
        raise UsageError("no input provided")

    first = inputs[0]
    output_path = output or default_output_path(first)

    if os.path.isdir(first):
        return PackageRequest(
            executable_path=None,
            supplemental_paths=tuple(inputs),
            output_path=output_path,
            preserve_paths=preserve_paths,
        )
    return PackageRequest(
        executable_path=first,
        supplemental_paths=tuple(inputs[1:]),
        output_path=output_path,
        preserve_paths=preserve_paths,
    )
