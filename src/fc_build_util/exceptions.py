"""
fc_build_util.exceptions — Error taxonomy for archive builds.

    UsageError         no input provided (reported as-is)
    ArchiveBuildError  I/O or zip-encoding failure while building the archive
"""


class BuildUtilError(RuntimeError):
    """Base class for build_util failures reported by the CLI."""


class UsageError(BuildUtilError):
    """Raised when the command line does not name anything to package."""


class ArchiveBuildError(BuildUtilError):
    """
    Raised when writing the archive fails.

    Wraps the underlying OSError or zipfile error; the original is kept on
    ``__cause__`` and on ``cause``. The partially written output file is
    left on disk.

    Attributes:
        output_path: Archive that was being written.
        cause:       The error that aborted the build.
    """

    def __init__(self, *, output_path: str, cause: BaseException) -> None:
        self.output_path = output_path
        self.cause = cause
        super().__init__(f"failed to compress file: {cause}")
