"""Tests for target executable resolution."""

import plistlib

import pytest

from tweak_launcher.errors import ResolutionError
from tweak_launcher.target import find_bundle_executable, is_executable_file, resolve
from tests.conftest import create_bundle, posix_only, write_script


@posix_only
class TestResolve:
    """Direct executables and application bundles."""

    def test_direct_executable_unchanged(self, tmp_path):
        exe = write_script(tmp_path / "server", "true")
        assert resolve(str(exe)) == str(exe)

    def test_accepts_path_objects(self, tmp_path):
        exe = write_script(tmp_path / "server", "true")
        assert resolve(exe) == str(exe)

    def test_bundle_resolves_declared_executable(self, tmp_path):
        bundle = create_bundle(tmp_path, "BlockheadsServer.app", "BlockheadsServer")

        resolved = resolve(str(bundle))

        assert resolved == str(bundle / "Contents" / "MacOS" / "BlockheadsServer")

    def test_bundle_with_binary_plist(self, tmp_path):
        bundle = create_bundle(tmp_path, "Bin.app", "Bin")
        with open(bundle / "Contents" / "Info.plist", "wb") as f:
            plistlib.dump({"CFBundleExecutable": "Bin"}, f, fmt=plistlib.FMT_BINARY)

        assert resolve(bundle).endswith("/Contents/MacOS/Bin")

    def test_declared_name_not_directory_name(self, tmp_path):
        bundle = create_bundle(tmp_path, "Pretty Name.app", "actual-binary")
        assert resolve(bundle) == str(bundle / "Contents" / "MacOS" / "actual-binary")

    def test_missing_plist_fails(self, tmp_path):
        (tmp_path / "Empty.app" / "Contents" / "MacOS").mkdir(parents=True)
        with pytest.raises(ResolutionError, match="Info.plist"):
            resolve(tmp_path / "Empty.app")

    def test_malformed_plist_fails(self, tmp_path):
        bundle = create_bundle(tmp_path)
        (bundle / "Contents" / "Info.plist").write_bytes(b"<plist><dict><key>")
        with pytest.raises(ResolutionError, match="Info.plist"):
            resolve(bundle)

    def test_invalid_date_value_fails(self, tmp_path):
        bundle = create_bundle(tmp_path)
        (bundle / "Contents" / "Info.plist").write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<plist version="1.0"><dict>'
            "<key>CFBundleExecutable</key><string>Server</string>"
            "<key>Built</key><date>yesterday</date>"
            "</dict></plist>\n"
        )
        with pytest.raises(ResolutionError, match="Failed to parse Info.plist"):
            resolve(bundle)

    def test_non_dictionary_plist_fails(self, tmp_path):
        bundle = create_bundle(tmp_path, info=["not", "a", "dict"])
        with pytest.raises(ResolutionError):
            resolve(bundle)

    def test_missing_executable_key_fails(self, tmp_path):
        bundle = create_bundle(tmp_path, executable=None)
        with pytest.raises(ResolutionError, match="CFBundleExecutable"):
            resolve(bundle)

    def test_non_string_executable_key_fails(self, tmp_path):
        bundle = create_bundle(tmp_path, info={"CFBundleExecutable": 42})
        with pytest.raises(ResolutionError, match="CFBundleExecutable"):
            resolve(bundle)

    def test_declared_executable_missing_fails(self, tmp_path):
        bundle = create_bundle(tmp_path, executable="Ghost", create_executable=False)
        with pytest.raises(ResolutionError, match="Ghost"):
            resolve(bundle)

    def test_declared_executable_is_directory_fails(self, tmp_path):
        bundle = create_bundle(tmp_path, executable="Dir", create_executable=False)
        (bundle / "Contents" / "MacOS" / "Dir").mkdir()
        with pytest.raises(ResolutionError):
            resolve(bundle)

    def test_non_executable_file_is_not_direct(self, tmp_path):
        """A plain file falls through to bundle lookup, which then fails."""
        plain = tmp_path / "readme"
        plain.write_text("hello")
        plain.chmod(0o644)
        with pytest.raises(ResolutionError):
            resolve(plain)

    def test_nonexistent_path_fails(self, tmp_path):
        with pytest.raises(ResolutionError):
            resolve(tmp_path / "missing")


@posix_only
class TestHelpers:
    def test_is_executable_file(self, tmp_path):
        exe = write_script(tmp_path / "run", "true")
        plain = tmp_path / "data"
        plain.write_text("")
        plain.chmod(0o644)

        assert is_executable_file(exe)
        assert not is_executable_file(plain)
        assert not is_executable_file(tmp_path)

    def test_find_bundle_executable_ignores_direct_check(self, tmp_path):
        bundle = create_bundle(tmp_path)
        assert find_bundle_executable(bundle) == str(bundle / "Contents" / "MacOS" / "Server")
