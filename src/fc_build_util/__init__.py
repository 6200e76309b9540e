"""
fc_build_util — Package executables into Function Compute deployment zips.

The archive layout follows the platform conventions: a bootstrap entry
(symlink to the executable, or the executable itself), Unix 0777 permission
bits on executables, and an optional scf_bootstrap entry.
"""

from fc_build_util.archive import ArchiveWriter, build_archive
from fc_build_util.exceptions import ArchiveBuildError, BuildUtilError, UsageError
from fc_build_util.models import ArchiveEntry, EntryKind, PackageRequest, resolve_request

__all__ = [
    "ArchiveEntry",
    "ArchiveBuildError",
    "ArchiveWriter",
    "BuildUtilError",
    "EntryKind",
    "PackageRequest",
    "UsageError",
    "build_archive",
    "resolve_request",
]
