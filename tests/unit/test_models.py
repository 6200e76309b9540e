"""
tests/unit/test_models.py — Request resolution and entry header tests.

Validates:
- Platform constants
- First-input resolution (executable vs. directory)
- Output path defaulting
- Zip header metadata per entry kind
"""

import dataclasses
import io
import stat
import zipfile
from pathlib import Path

import pytest
from fc_build_util.exceptions import UsageError
from fc_build_util.models import (
    BOOTSTRAP_NAME,
    DOS_ARCHIVE_ATTR,
    DOS_DIRECTORY_ATTR,
    EXECUTABLE_MODE,
    FIXED_DATE_TIME,
    SCF_BOOTSTRAP_NAME,
    UNIX_CREATOR,
    ArchiveEntry,
    EntryKind,
    PackageRequest,
    default_output_path,
    resolve_request,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------


class TestConstants:
    def test_bootstrap_names(self):
        assert BOOTSTRAP_NAME == "bootstrap"
        assert SCF_BOOTSTRAP_NAME == "scf_bootstrap"

    def test_executable_mode_is_rwxrwxrwx(self):
        assert EXECUTABLE_MODE == 0o777

    def test_unix_creator(self):
        assert UNIX_CREATOR == 3


# ---------------------------------------------------------------------------
# PackageRequest
# ---------------------------------------------------------------------------


class TestPackageRequest:
    def test_empty_output_path_rejected(self):
        with pytest.raises(ValueError, match="output_path"):
            PackageRequest(executable_path="fn", supplemental_paths=(), output_path="")

    def test_frozen(self):
        request = PackageRequest(executable_path="fn", supplemental_paths=(), output_path="fn.zip")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.output_path = "other.zip"  # type: ignore[misc]

    def test_preserve_paths_defaults_off(self):
        request = PackageRequest(executable_path=None, supplemental_paths=("d",), output_path="d.zip")
        assert request.preserve_paths is False


# ---------------------------------------------------------------------------
# resolve_request
# ---------------------------------------------------------------------------


class TestResolveRequest:
    def test_no_inputs_is_usage_error(self):
        with pytest.raises(UsageError, match="no input provided"):
            resolve_request([])

    def test_regular_file_is_executable(self, tmp_path: Path):
        exe = tmp_path / "handler"
        exe.write_bytes(b"\x7fELF")
        extra = tmp_path / "config.json"
        extra.write_text("{}")

        request = resolve_request([str(exe), str(extra)])

        assert request.executable_path == str(exe)
        assert request.supplemental_paths == (str(extra),)
        assert request.output_path == "handler.zip"

    def test_missing_path_is_treated_as_executable(self, tmp_path: Path):
        missing = tmp_path / "not-built-yet"
        request = resolve_request([str(missing)])
        assert request.executable_path == str(missing)
        assert request.supplemental_paths == ()

    def test_directory_first_means_no_executable(self, tmp_path: Path):
        folder = tmp_path / "dist"
        folder.mkdir()
        extra = tmp_path / "extra.txt"
        extra.write_text("x")

        request = resolve_request([str(folder), str(extra)])

        assert request.executable_path is None
        assert request.supplemental_paths == (str(folder), str(extra))
        assert request.output_path == "dist.zip"

    def test_explicit_output_wins(self, tmp_path: Path):
        exe = tmp_path / "handler"
        exe.write_bytes(b"x")
        request = resolve_request([str(exe)], str(tmp_path / "out.zip"))
        assert request.output_path == str(tmp_path / "out.zip")

    def test_empty_output_falls_back_to_default(self):
        request = resolve_request(["bin/handler"], "")
        assert request.output_path == "handler.zip"

    def test_preserve_paths_carried(self):
        request = resolve_request(["bin/handler"], preserve_paths=True)
        assert request.preserve_paths is True

    @pytest.mark.parametrize(
        ("first_input", "expected"),
        [
            ("handler", "handler.zip"),
            ("target/release/handler", "handler.zip"),
            ("dist/", "dist.zip"),
            ("dist//", "dist.zip"),
        ],
    )
    def test_default_output_path(self, first_input: str, expected: str):
        assert default_output_path(first_input) == expected


# ---------------------------------------------------------------------------
# ArchiveEntry headers, read back from a written archive
# ---------------------------------------------------------------------------


def _written(entry: ArchiveEntry, data: bytes = b"") -> zipfile.ZipInfo:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(entry.zip_info(), data)
    with zipfile.ZipFile(io.BytesIO(buffer.getvalue())) as zf:
        return zf.getinfo(entry.name)


class TestArchiveEntry:
    def test_executable_header(self):
        info = _written(ArchiveEntry.executable("handler"), b"exe")
        assert info.filename == "handler"
        assert info.create_system == UNIX_CREATOR
        assert info.external_attr == 0o777 << 16
        assert info.compress_type == zipfile.ZIP_DEFLATED

    def test_symlink_header(self):
        entry = ArchiveEntry.symlink("bootstrap")
        info = _written(entry, b"handler")
        mode = info.external_attr >> 16
        assert entry.kind is EntryKind.SYMLINK
        assert stat.S_ISLNK(mode)
        assert stat.S_IMODE(mode) == 0o755
        assert info.create_system == UNIX_CREATOR
        assert info.compress_type == zipfile.ZIP_DEFLATED

    def test_default_file_header_has_no_permission_bits(self):
        info = _written(ArchiveEntry(name="conf/app.yaml"), b"port: 9000\n")
        assert info.external_attr >> 16 == 0
        assert info.external_attr == DOS_ARCHIVE_ATTR
        assert info.create_system == 0
        assert info.compress_type == zipfile.ZIP_DEFLATED

    def test_empty_default_file_keeps_dos_attributes(self):
        info = _written(ArchiveEntry(name="empty.dat"))
        assert info.external_attr == DOS_ARCHIVE_ATTR

    def test_directory_marker(self):
        entry = ArchiveEntry.directory("lib")
        info = _written(entry)
        assert entry.name == "lib/"
        assert info.is_dir()
        assert info.file_size == 0
        assert info.compress_type == zipfile.ZIP_STORED
        assert info.external_attr >> 16 == 0
        assert info.external_attr == DOS_DIRECTORY_ATTR

    def test_directory_marker_keeps_existing_slash(self):
        assert ArchiveEntry.directory("lib/").name == "lib/"

    def test_fixed_timestamp(self):
        assert _written(ArchiveEntry.executable("handler")).date_time == FIXED_DATE_TIME
