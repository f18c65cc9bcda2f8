"""
Unit tests for archive handlers.

Tests manifest reading and rewriting for zip-based and exploded
archives, and handler selection.
"""

import os
import zipfile

import pytest

from buildstamp.archives.base import BaseArchive
from buildstamp.archives.exploded import ExplodedArchive
from buildstamp.archives.factory import ArchiveFactory
from buildstamp.archives.manifest import MANIFEST_PATH
from buildstamp.archives.zip_archive import ZipArchive
from buildstamp.core.errors import ManifestError
from buildstamp.core.models import ArchiveKind

from conftest import create_test_jar, read_entry


class TestArchiveFactory:
    """Test archive factory functionality."""

    @pytest.mark.parametrize("name", ["app.jar", "app.war", "app.ear", "app.zip", "APP.JAR"])
    def test_zip_suffixes(self, tmp_path, name):
        """Test zip-based archive suffixes."""
        archive = ArchiveFactory.get_archive(tmp_path / name)
        assert isinstance(archive, ZipArchive)
        assert archive.kind == ArchiveKind.ZIP

    def test_directory(self, exploded_dir):
        """Test directories map to exploded archives."""
        archive = ArchiveFactory.get_archive(exploded_dir)
        assert isinstance(archive, ExplodedArchive)

    def test_unsupported_archive(self, tmp_path):
        """Test unsupported suffix raises error."""
        with pytest.raises(ValueError, match="Unsupported archive"):
            ArchiveFactory.get_archive(tmp_path / "app.tar.gz")

    def test_supported_suffixes_list(self):
        """Test getting list of supported suffixes."""
        suffixes = ArchiveFactory.get_supported_suffixes()
        assert ".jar" in suffixes
        assert ".war" in suffixes

    def test_register_archive(self, tmp_path, monkeypatch):
        """Test registering a handler for a new suffix."""
        monkeypatch.setattr(ArchiveFactory, "_archives", dict(ArchiveFactory._archives))

        ArchiveFactory.register_archive("apk", ZipArchive)

        assert isinstance(ArchiveFactory.get_archive(tmp_path / "app.apk"), ZipArchive)


class TestZipArchive:
    """Test zip-based archive handling."""

    def test_read_manifest(self, sample_jar):
        """Test reading the manifest entry."""
        manifest = ZipArchive(sample_jar).read_manifest()
        assert manifest.get("Main-Class") == "com.example.Main"

    def test_read_without_manifest(self, tmp_path):
        """Test archive with no manifest yields an empty one."""
        jar = create_test_jar(tmp_path / "bare.jar", manifest=None)
        assert len(ZipArchive(jar).read_manifest().main) == 0

    def test_missing_file(self, tmp_path):
        """Test missing archive."""
        with pytest.raises(FileNotFoundError):
            ZipArchive(tmp_path / "missing.jar").read_manifest()

    def test_not_a_zip(self, tmp_path):
        """Test corrupt archive."""
        bogus = tmp_path / "bogus.jar"
        bogus.write_bytes(b"not a zip file")

        with pytest.raises(ManifestError, match="not a valid zip"):
            ZipArchive(bogus).read_manifest()

    def test_set_attribute(self, sample_jar):
        """Test stamping rewrites only the manifest."""
        archive = ZipArchive(sample_jar)

        previous = archive.set_attribute("Implementation-Version", "2.1-SNAPSHOT (git-abcdef01)")

        assert previous is None
        assert archive.get_attribute("Implementation-Version") == "2.1-SNAPSHOT (git-abcdef01)"
        assert archive.get_attribute("Main-Class") == "com.example.Main"
        assert read_entry(sample_jar, "com/example/Main.class") == b"\xca\xfe\xba\xbe main"
        assert read_entry(sample_jar, "config/app.properties") == b"key=value\n"

    def test_manifest_stays_near_front(self, sample_jar):
        """Test entry order expected by jar readers."""
        ZipArchive(sample_jar).set_attribute("Implementation-Version", "1.0")

        with zipfile.ZipFile(sample_jar) as archive:
            names = archive.namelist()

        assert names[:2] == ["META-INF/", MANIFEST_PATH]
        assert names.count(MANIFEST_PATH) == 1

    def test_adds_manifest_when_missing(self, tmp_path):
        """Test stamping an archive without a manifest."""
        jar = create_test_jar(tmp_path / "bare.jar", manifest=None)

        ZipArchive(jar).set_attribute("Implementation-Version", "1.0")

        data = read_entry(jar, MANIFEST_PATH)
        assert data.startswith(b"Manifest-Version: 1.0\r\n")
        assert b"Implementation-Version: 1.0\r\n" in data

    def test_unchanged_value_skips_write(self, sample_jar):
        """Test archive is not rewritten when already stamped."""
        archive = ZipArchive(sample_jar)
        archive.set_attribute("Implementation-Version", "1.0")
        before = os.stat(sample_jar).st_ino, sample_jar.read_bytes()

        assert archive.set_attribute("Implementation-Version", "1.0") == "1.0"
        assert (os.stat(sample_jar).st_ino, sample_jar.read_bytes()) == before

    def test_no_temporary_files_left(self, sample_jar):
        """Test the rewrite cleans up after itself."""
        ZipArchive(sample_jar).set_attribute("Implementation-Version", "1.0")

        assert sorted(p.name for p in sample_jar.parent.iterdir()) == [sample_jar.name]


class TestExplodedArchive:
    """Test unpacked archive handling."""

    def test_set_attribute(self, exploded_dir):
        """Test stamping the manifest file in place."""
        archive = ExplodedArchive(exploded_dir)

        archive.set_attribute("Implementation-Version", "2.1-SNAPSHOT (git-abcdef01-b77)")

        data = (exploded_dir / MANIFEST_PATH).read_bytes()
        assert b"Implementation-Version: 2.1-SNAPSHOT (git-abcdef01-b77)\r\n" in data
        assert b"Main-Class: com.example.Main\r\n" in data

    def test_creates_meta_inf(self, tmp_path):
        """Test stamping a directory without META-INF."""
        root = tmp_path / "site"
        root.mkdir()

        ExplodedArchive(root).set_attribute("Implementation-Version", "1.0")

        assert ExplodedArchive(root).get_attribute("Implementation-Version") == "1.0"

    def test_missing_directory(self, tmp_path):
        """Test missing directory."""
        with pytest.raises(FileNotFoundError):
            ExplodedArchive(tmp_path / "missing").read_manifest()


class TestBaseArchive:
    """Test shared attribute handling."""

    def test_cannot_instantiate(self, tmp_path):
        """Test abstract interface."""
        with pytest.raises(TypeError):
            BaseArchive(tmp_path)
