"""
fc_build_util.archive — Write Function Compute deployment archives.

Build sequence (linear, single pass):

    open output -> executable entries -> supplemental entries -> close

Directory recursion flattens names by default: every file is stored under
its base name, so same-named files in different subdirectories collide.
Pass preserve_paths=True to keep paths relative to the directory argument.

Any OSError or zipfile error aborts the build and propagates to the caller.
The partially written archive is left on disk.
"""

from __future__ import annotations

import logging
import os
import zipfile
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from fc_build_util.models import (
    BOOTSTRAP_NAME,
    SCF_BOOTSTRAP_NAME,
    ArchiveEntry,
    PackageRequest,
    base_name,
)

logger = logging.getLogger(__name__)


class ArchiveWriter:
    """Owns the output file handle and zip encoder for one build.

    Usage:
        with ArchiveWriter("fn.zip") as writer:
            writer.write(ArchiveEntry.executable("fn"), data)

    On exit the encoder is closed before the file handle. A failure closing
    the file handle is logged and never replaces the outcome of the build.
    """

    def __init__(self, output_path: str) -> None:
        self.output_path = output_path
        self.entries: list[ArchiveEntry] = []
        self._names: set[str] = set()
        self._fh: BinaryIO | None = None
        self._zip: zipfile.ZipFile | None = None

    def __enter__(self) -> ArchiveWriter:
        self._fh = open(self.output_path, "wb")
        try:
            self._zip = zipfile.ZipFile(self._fh, "w", compression=zipfile.ZIP_DEFLATED)
        except BaseException:
            self._close_file()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self._close_zip(build_failed=exc is not None)
        finally:
            self._close_file()

    def write(self, entry: ArchiveEntry, data: bytes = b"") -> None:
        """Append one entry. Duplicate names are written again, last one wins on lookup."""
        if self._zip is None:
            raise RuntimeError("ArchiveWriter is not open")
        if entry.name in self._names:
            logger.warning(
                "Duplicate entry name %s in %s; the later entry shadows the earlier one",
                entry.name,
                self.output_path,
            )
        self._zip.writestr(entry.zip_info(), data)
        self._names.add(entry.name)
        self.entries.append(entry)
        logger.debug("added %s (%s, %d bytes)", entry.name, entry.kind, len(data))

    def _close_zip(self, *, build_failed: bool) -> None:
        if self._zip is None:
            return
        zf, self._zip = self._zip, None
        try:
            zf.close()
        except (OSError, zipfile.LargeZipFile) as exc:
            if not build_failed:
                raise
            logger.error("Failed to finalize zip file %s: %s", self.output_path, exc)

    def _close_file(self) -> None:
        if self._fh is None:
            return
        fh, self._fh = self._fh, None
        try:
            fh.close()
        except OSError as exc:
            logger.error("Failed to close zip file: %s", exc)


# ---------------------------------------------------------------------------
# Entry emission
# ---------------------------------------------------------------------------


def write_executable(writer: ArchiveWriter, name_in_zip: str, data: bytes) -> None:
    """Write the executable, preceded by a bootstrap symlink unless it is named bootstrap."""
    if name_in_zip != BOOTSTRAP_NAME:
        writer.write(ArchiveEntry.symlink(BOOTSTRAP_NAME), name_in_zip.encode("utf-8"))
    writer.write(ArchiveEntry.executable(name_in_zip), data)


def write_supplemental(writer: ArchiveWriter, path: str, *, preserve_paths: bool = False) -> None:
    if path == SCF_BOOTSTRAP_NAME:
        writer.write(ArchiveEntry.executable(SCF_BOOTSTRAP_NAME), Path(path).read_bytes())
        return
    if os.path.isdir(path):
        zip_directory(writer, path, preserve_paths=preserve_paths)
        return
    writer.write(ArchiveEntry(name=path), Path(path).read_bytes())


def zip_directory(writer: ArchiveWriter, folder: str, *, preserve_paths: bool = False) -> None:
    """Archive the contents of folder depth-first.

    The folder itself gets no entry. Each subdirectory gets a "<name>/"
    marker written before its children. Symlinks are not descended into: a
    link is read as a file, so a link to a directory aborts the build.
    """
    _zip_tree(writer, folder, "" if preserve_paths else None)


def _zip_tree(writer: ArchiveWriter, folder: str, prefix: str | None) -> None:
    # prefix None: flatten to base names
    with os.scandir(folder) as it:
        children = sorted(it, key=lambda child: child.name)

    for child in children:
        name = child.name if prefix is None else f"{prefix}{child.name}"
        if child.is_dir(follow_symlinks=False):
            writer.write(ArchiveEntry.directory(name))
            _zip_tree(writer, child.path, None if prefix is None else f"{name}/")
        else:
            writer.write(ArchiveEntry(name=name), Path(child.path).read_bytes())


def build_archive(request: PackageRequest) -> list[ArchiveEntry]:
    """Write request.output_path and return the entries in write order."""
    logger.debug(
        "building %s (executable=%s, %d supplemental paths)",
        request.output_path,
        request.executable_path,
        len(request.supplemental_paths),
    )
    with ArchiveWriter(request.output_path) as writer:
        if request.executable_path:
            data = Path(request.executable_path).read_bytes()
            write_executable(writer, base_name(request.executable_path), data)

        for path in request.supplemental_paths:
            write_supplemental(writer, path, preserve_paths=request.preserve_paths)

    return writer.entries
